# routers/admin.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from dependencies.auth import CurrentUser, PROFILE_COLUMNS
from core.config import settings
from core.logging_config import logger
from core.permission_helpers import requires_section
from core.permissions import (
    BASE_PERMISSIONS,
    LOG_COLUMNS,
    apply_overrides,
    canonicalize,
    get_permissions_for_role,
    toggle_log_column,
    toggle_section,
)
from core.supabase_helpers import safe_select, safe_update
from models.enums import Role, Section
from models.profile import PermissionToggle, PermissionsUpdate, ProfileRead, RoleUpdate


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)

require_admin_section = requires_section(Section.admin)


# -----------------------------------------------------
# Helpers
# -----------------------------------------------------
def get_profile(user_id: str) -> ProfileRead:
    rows = safe_select(settings.PROFILES_TABLE, {"id": user_id}, columns=PROFILE_COLUMNS)
    if not rows:
        raise HTTPException(404, "Usuario no encontrado")
    return ProfileRead.from_row(rows[0])


def update_profile(user_id: str, data: dict) -> ProfileRead:
    row = safe_update(settings.PROFILES_TABLE, {"id": user_id}, data)
    if row is None:
        raise HTTPException(404, "Usuario no encontrado")
    return ProfileRead.from_row(row)


def prevent_self_lockout(requestor: CurrentUser, user_id: str, action: str):
    """An admin may not demote or block their own profile."""
    if requestor.id == user_id:
        raise HTTPException(400, f"No puedes {action} tu propio usuario.")


def serialize_profile(profile: ProfileRead) -> dict:
    data = profile.model_dump(mode="json")
    data["estado"] = profile.estado
    return data


def permissions_view(profile: ProfileRead, overrides: Optional[dict]) -> dict:
    base = get_permissions_for_role(profile.role)
    return {
        "user_id": profile.id,
        "role": profile.role,
        "base": base.model_dump(by_alias=True),
        "overrides": overrides,
        "effective": apply_overrides(base, overrides).model_dump(by_alias=True),
    }


def ensure_bootstrap_admin(profiles: list) -> list:
    """Keep the configured ADMIN_EMAIL account as an active admin."""
    if not settings.ADMIN_EMAIL:
        return profiles

    result = []
    for p in profiles:
        if p.email == settings.ADMIN_EMAIL and (p.role != Role.admin.value or not p.is_active):
            logger.info(f"Promoting bootstrap admin {p.email}")
            p = update_profile(p.id, {"role": Role.admin.value, "is_active": True})
        result.append(p)
    return result


# -----------------------------------------------------
# ROLE TABLE (for the permission editor)
# -----------------------------------------------------
@router.get(
    "/roles",
    summary="Admin: Base permissions per role",
    dependencies=[Depends(require_admin_section)],
)
def list_roles():
    return {
        "success": True,
        "data": {
            role.value: perms.model_dump(by_alias=True)
            for role, perms in BASE_PERMISSIONS.items()
        },
        "log_columns": LOG_COLUMNS,
        "sections": Section.list(),
    }


# -----------------------------------------------------
# LIST USERS
# -----------------------------------------------------
@router.get(
    "/users",
    summary="Admin: List users",
    dependencies=[Depends(require_admin_section)],
)
def list_users():
    rows = safe_select(settings.PROFILES_TABLE, columns=PROFILE_COLUMNS, order="email")
    profiles = ensure_bootstrap_admin([ProfileRead.from_row(r) for r in rows])
    return {"success": True, "data": [serialize_profile(p) for p in profiles]}


# -----------------------------------------------------
# CHANGE ROLE
# -----------------------------------------------------
@router.patch("/users/{user_id}/role", summary="Admin: Change role")
def change_role(
    user_id: str,
    payload: RoleUpdate,
    current_user: CurrentUser = Depends(require_admin_section),
):
    if payload.role != Role.admin.value:
        prevent_self_lockout(current_user, user_id, "quitar el rol admin a")

    profile = update_profile(user_id, {"role": payload.role})
    logger.info(f"{current_user.email} set role of {profile.email} to {payload.role}")
    return {"success": True, "data": serialize_profile(profile)}


# -----------------------------------------------------
# APPROVE / BLOCK / REACTIVATE
# -----------------------------------------------------
@router.post(
    "/users/{user_id}/approve",
    summary="Admin: Approve pending user",
    dependencies=[Depends(require_admin_section)],
)
def approve_user(user_id: str):
    profile = update_profile(user_id, {"role": Role.user.value, "is_active": True})
    logger.info(f"Approved user {profile.email}")
    return {"success": True, "data": serialize_profile(profile)}


@router.post("/users/{user_id}/block", summary="Admin: Block user")
def block_user(
    user_id: str,
    current_user: CurrentUser = Depends(require_admin_section),
):
    prevent_self_lockout(current_user, user_id, "bloquear")
    profile = update_profile(user_id, {"is_active": False})
    logger.info(f"{current_user.email} blocked {profile.email}")
    return {"success": True, "data": serialize_profile(profile)}


@router.post(
    "/users/{user_id}/reactivate",
    summary="Admin: Reactivate user",
    dependencies=[Depends(require_admin_section)],
)
def reactivate_user(user_id: str):
    profile = update_profile(user_id, {"is_active": True})
    return {"success": True, "data": serialize_profile(profile)}


# -----------------------------------------------------
# PER-USER PERMISSION OVERRIDES
# -----------------------------------------------------
@router.get(
    "/users/{user_id}/permissions",
    summary="Admin: Base, overrides and effective permissions",
    dependencies=[Depends(require_admin_section)],
)
def get_user_permissions(user_id: str):
    profile = get_profile(user_id)
    return {"success": True, "data": permissions_view(profile, canonicalize(profile.permissions))}


@router.put(
    "/users/{user_id}/permissions",
    summary="Admin: Replace permission overrides",
    dependencies=[Depends(require_admin_section)],
)
def set_user_permissions(user_id: str, payload: PermissionsUpdate):
    clean = canonicalize(payload.permissions)
    profile = update_profile(user_id, {"permissions": clean})
    return {"success": True, "data": permissions_view(profile, clean)}


@router.post(
    "/users/{user_id}/permissions/toggle",
    summary="Admin: Toggle one column or section",
    dependencies=[Depends(require_admin_section)],
)
def toggle_user_permission(user_id: str, payload: PermissionToggle):
    profile = get_profile(user_id)
    base = get_permissions_for_role(profile.role)

    if payload.column is not None:
        updated = toggle_log_column(base, profile.permissions, payload.column)
    else:
        updated = toggle_section(base, profile.permissions, payload.section)

    clean = canonicalize(updated)
    profile = update_profile(user_id, {"permissions": clean})
    return {"success": True, "data": permissions_view(profile, clean)}
