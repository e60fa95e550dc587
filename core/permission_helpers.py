from fastapi import Depends, HTTPException
from typing import Dict, Iterable, List, Tuple

from dependencies.auth import get_active_user, CurrentUser
from core.permissions import (
    RolePermissions,
    resolve_permissions,
    can_see_section,
    can_see_column,
)
from models.enums import LogColumn, Section


# -----------------------------------------------------
# Collect effective permissions:
#   • role-based permissions (BASE_PERMISSIONS)
#   • per-user override patch from profiles.permissions
# -----------------------------------------------------
def get_effective_permissions(user: CurrentUser) -> RolePermissions:
    return resolve_permissions(user.role, user.permissions)


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_section(section: Section):
    """
    Usage:
        @router.get("/", dependencies=[Depends(requires_section(Section.log))])
    """

    def dependency(current_user: CurrentUser = Depends(get_active_user)):
        if not can_see_section(get_effective_permissions(current_user), section):
            raise HTTPException(
                status_code=403,
                detail=f"Sin acceso a la sección '{section.value}'"
            )
        return current_user

    return dependency


def requires_create_quote():
    def dependency(current_user: CurrentUser = Depends(get_active_user)):
        if not get_effective_permissions(current_user).can_create_quote:
            raise HTTPException(403, "No tienes permiso para registrar cotizaciones")
        return current_user

    return dependency


def requires_edit_quote():
    def dependency(current_user: CurrentUser = Depends(get_active_user)):
        if not get_effective_permissions(current_user).can_edit_quote:
            raise HTTPException(403, "No tienes permiso para editar cotizaciones")
        return current_user

    return dependency


def requires_quote_write():
    """Create OR edit: catalogs and attachments are used by both forms."""
    def dependency(current_user: CurrentUser = Depends(get_active_user)):
        perms = get_effective_permissions(current_user)
        if not (perms.can_create_quote or perms.can_edit_quote):
            raise HTTPException(403, "No tienes permiso para modificar cotizaciones")
        return current_user

    return dependency


# ============================================================
# LOG COLUMN PROJECTION
# ============================================================
# Stored fields shown by each log column. "acciones" is UI only.
LOG_COLUMN_FIELDS: Dict[LogColumn, Tuple[str, ...]] = {
    LogColumn.cotizacion: ("cotizacion",),
    LogColumn.descripcion: ("descripcion",),
    LogColumn.cliente: ("cliente",),
    LogColumn.unidad_minera: ("unidad_minera",),
    LogColumn.tipo_servicio: ("tipo_servicio",),
    LogColumn.status_cotizacion: ("estado_cotizacion", "status_cotizacion"),
    LogColumn.status_proyecto: ("status_proyecto",),
    LogColumn.oferta_usd: ("oferta_economica", "oferta_usd", "moneda_normalizada_usd"),
    LogColumn.moneda: ("moneda",),
    LogColumn.acciones: (),
}


def visible_log_columns(user: CurrentUser) -> List[str]:
    perms = get_effective_permissions(user)
    return [c.value for c in LogColumn if can_see_column(perms, c)]


def hidden_fields(visible: Iterable[str]) -> set:
    visible = set(visible)
    hidden = set()
    for column, fields in LOG_COLUMN_FIELDS.items():
        if column.value not in visible:
            hidden.update(fields)
    return hidden


def filter_log_row(row: dict, visible: Iterable[str]) -> dict:
    """
    Drop the stored fields of every hidden log column.
    Fields not tied to a log column (id, fechas, seguimiento) are kept.
    """
    hidden = hidden_fields(visible)
    return {k: v for k, v in row.items() if k not in hidden}
