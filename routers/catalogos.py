# routers/catalogos.py

from fastapi import APIRouter, Depends, HTTPException

from core.logging_config import logger
from core.permission_helpers import requires_section, requires_quote_write
from core.supabase_helpers import safe_select, safe_insert, safe_update, safe_delete
from models.catalogo import CatalogoItem
from models.enums import Catalogo, Section


router = APIRouter(
    prefix="/catalogos",
    tags=["Catálogos"],
    dependencies=[Depends(requires_section(Section.log))],
)


def _columns(catalogo: Catalogo) -> str:
    return "id, nombre, correo, telefono" if catalogo.has_contact else "id, nombre"


def _data(catalogo: Catalogo, payload: CatalogoItem) -> dict:
    if catalogo.has_contact:
        return payload.model_dump()
    return {"nombre": payload.nombre}


# -----------------------------------------------------
# GET /catalogos/{catalogo}
# -----------------------------------------------------
@router.get("/{catalogo}", summary="Listar opciones del catálogo")
def list_options(catalogo: Catalogo):
    rows = safe_select(catalogo.value, columns=_columns(catalogo), order="nombre")
    return {"success": True, "data": rows}


# -----------------------------------------------------
# POST /catalogos/{catalogo}
# -----------------------------------------------------
@router.post(
    "/{catalogo}",
    summary="Agregar opción",
    dependencies=[Depends(requires_quote_write())],
)
def create_option(catalogo: Catalogo, payload: CatalogoItem):
    row = safe_insert(catalogo.value, _data(catalogo, payload))
    logger.info(f"Catalog {catalogo.value}: added '{payload.nombre}'")
    return {"success": True, "data": row}


# -----------------------------------------------------
# PUT /catalogos/{catalogo}/{option_id}
# -----------------------------------------------------
@router.put(
    "/{catalogo}/{option_id}",
    summary="Renombrar opción",
    dependencies=[Depends(requires_quote_write())],
)
def update_option(catalogo: Catalogo, option_id: str, payload: CatalogoItem):
    row = safe_update(catalogo.value, {"id": option_id}, _data(catalogo, payload))
    if row is None:
        raise HTTPException(404, "Opción no encontrada")
    return {"success": True, "data": row}


# -----------------------------------------------------
# DELETE /catalogos/{catalogo}/{option_id}
# -----------------------------------------------------
@router.delete(
    "/{catalogo}/{option_id}",
    summary="Eliminar opción",
    dependencies=[Depends(requires_quote_write())],
)
def delete_option(catalogo: Catalogo, option_id: str):
    deleted = safe_delete(catalogo.value, {"id": option_id})
    if not deleted:
        raise HTTPException(404, "Opción no encontrada")
    logger.info(f"Catalog {catalogo.value}: deleted {option_id}")
    return {"success": True}
