# routers/requerimientos.py

from fastapi import APIRouter, Depends, HTTPException

from core.config import settings
from core.errors import handle_supabase_error
from core.permission_helpers import requires_section
from core.supabase_client import get_supabase_client
from models.enums import Section


router = APIRouter(
    prefix="/requerimientos",
    tags=["Requerimientos"],
)


def _fetch_all(table: str, order: str, operation: str):
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase no está configurado")

    try:
        res = client.table(table).select("*").order(order, desc=True).execute()
    except Exception as e:
        raise handle_supabase_error(e, operation)

    return {"success": True, "data": res.data or []}


# -----------------------------------------------------
# GET /requerimientos
# -----------------------------------------------------
@router.get(
    "",
    summary="Detalle de Requerimientos",
    dependencies=[Depends(requires_section(Section.requerimientos))],
)
def list_requerimientos():
    return _fetch_all(
        settings.REQUERIMIENTOS_TABLE,
        "id",
        "Error al cargar el Detalle de Requerimientos",
    )


# -----------------------------------------------------
# GET /requerimientos/detalle
# Requirement line items (nro_requerimiento, codigo, cantidad, oc, ...)
# -----------------------------------------------------
@router.get(
    "/detalle",
    summary="Ítems de requerimiento",
    dependencies=[Depends(requires_section(Section.detalle_reqs))],
)
def list_detalle_reqs():
    return _fetch_all(
        settings.DETALLE_REQS_TABLE,
        "created_at",
        "Error al cargar Detalle de Requerimientos",
    )
