from fastapi import APIRouter, HTTPException, Depends, status

from core.config import settings
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import get_effective_permissions
from core.supabase_client import get_supabase_client
from dependencies.auth import get_current_user, CurrentUser
from models.auth import LoginRequest, RegisterRequest, TokenResponse
from models.enums import Role


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)

INVALID_CREDENTIALS = "Correo o contraseña inválidos"


def _client():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase no está configurado")
    return client


# ============================================================
# LOGIN (SUPABASE AUTH)
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Iniciar sesión")
def login(payload: LoginRequest):

    email = payload.email.strip().lower()
    client = _client()

    try:
        response = client.auth.sign_in_with_password(
            {"email": email, "password": payload.password}
        )
    except Exception as e:
        # Details stay in the log, never in the response
        logger.warning(f"Login attempt failed for {email}: {type(e).__name__}")
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS)

    session = response.session
    if not session or not session.access_token:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS)

    return TokenResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
    )


# ============================================================
# REGISTER (self sign-up; account waits for admin approval)
# ============================================================
@router.post("/register", status_code=201, summary="Crear cuenta")
def register(payload: RegisterRequest):

    email = payload.email.strip().lower()
    nombre = (payload.nombre or "").strip() or None
    client = _client()

    try:
        response = client.auth.sign_up(
            {
                "email": email,
                "password": payload.password,
                "options": {"data": {"full_name": nombre}},
            }
        )
    except Exception as e:
        logger.warning(f"Sign-up failed for {email}: {e}")
        raise HTTPException(400, f"No se pudo crear la cuenta: {e}")

    if not response.user:
        raise HTTPException(400, "No se pudo crear la cuenta")

    profile = {
        "user_id": response.user.id,
        "email": email,
        "full_name": nombre,
        "display_name": nombre or email,
        "role": Role.pending.value,
        "is_active": False,
    }

    try:
        client.table(settings.PROFILES_TABLE).upsert(profile, on_conflict="user_id").execute()
    except Exception as e:
        raise handle_supabase_error(e, "No se pudo crear el perfil")

    logger.info(f"Registered {email} (pending approval)")

    return {
        "success": True,
        "message": "Cuenta creada. Un administrador debe aprobar tu acceso.",
        "user_id": response.user.id,
    }


# ============================================================
# CURRENT USER (pending users allowed, to show their status)
# ============================================================
@router.get("/me", summary="Usuario actual y permisos efectivos")
def read_me(current_user: CurrentUser = Depends(get_current_user)):
    pending = current_user.role == Role.pending.value

    return {
        "user": current_user.model_dump(),
        "estado": "Pendiente" if pending else ("Activo" if current_user.is_active else "Bloqueado"),
        "permissions": get_effective_permissions(current_user).model_dump(by_alias=True),
    }
