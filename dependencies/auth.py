from typing import Any, Dict, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.config import settings
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from models.enums import Role


bearer_scheme = HTTPBearer()

PROFILE_COLUMNS = "id, user_id, email, full_name, display_name, role, is_active, created_at, permissions"


# ============================================================
# Current User Model (session identity + stored permissions)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # profiles.id
    auth_user_id: str               # Supabase Auth UID (profiles.user_id)
    email: Optional[str] = None
    full_name: Optional[str] = None

    role: Optional[str] = None
    is_active: bool = False

    # Raw override document from profiles.permissions
    permissions: Optional[Dict[str, Any]] = None


# ============================================================
# PROFILE BOOTSTRAP
# ============================================================
def ensure_profile_for_user(client: Client, auth_user) -> dict:
    """
    Return the profiles row for an auth user, creating it as
    pending + inactive the first time the user shows up.
    """
    table = settings.PROFILES_TABLE

    try:
        res = (
            client.table(table)
            .select(PROFILE_COLUMNS)
            .eq("user_id", auth_user.id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "No se pudo leer tu perfil de usuario.")

    if res.data:
        return res.data[0]

    metadata = getattr(auth_user, "user_metadata", None) or {}
    full_name = metadata.get("full_name") or metadata.get("name")

    new_profile = {
        "user_id": auth_user.id,
        "email": auth_user.email,
        "full_name": full_name,
        "display_name": full_name or auth_user.email,
        "role": Role.pending.value,
        "is_active": False,
    }

    try:
        created = client.table(table).insert(new_profile).execute()
    except Exception as e:
        logger.warning(f"Could not create profile for {auth_user.email}: {e}")
        created = None

    if not created or not created.data:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tu perfil no está configurado. Contacta al administrador.",
        )

    logger.info(f"Created pending profile for {auth_user.email}")
    return created.data[0]


def profile_to_current_user(profile: dict, auth_user_id: str) -> CurrentUser:
    overrides = profile.get("permissions")
    if not isinstance(overrides, dict):
        overrides = None

    return CurrentUser(
        id=str(profile["id"]),
        auth_user_id=str(auth_user_id),
        email=profile.get("email"),
        full_name=profile.get("display_name") or profile.get("full_name") or profile.get("email"),
        role=profile.get("role"),
        is_active=bool(profile.get("is_active")),
        permissions=overrides,
    )


# ============================================================
# AUTH DECODING (Supabase: validates JWT + loads profile)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token de autenticación inválido o expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase no está configurado")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
    except Exception:
        raise unauthorized

    if not auth_resp or not auth_resp.user:
        raise unauthorized

    auth_user = auth_resp.user

    # ---------------------------------------------------------
    # Role + overrides live in the profiles table
    # ---------------------------------------------------------
    profile = ensure_profile_for_user(client, auth_user)
    return profile_to_current_user(profile, auth_user.id)


# ============================================================
# ACTIVE USER (pending or blocked accounts are rejected)
# ============================================================
def get_active_user(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role == Role.pending.value or not current_user.is_active:
        logger.warning(f"Access denied for pending/blocked user {current_user.email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tu cuenta está en revisión o bloqueada. Consulta con el administrador.",
        )
    return current_user
