# routers/cotizaciones.py

import time
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from dependencies.auth import CurrentUser
from core.config import settings
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import (
    requires_section,
    requires_create_quote,
    requires_edit_quote,
    requires_quote_write,
    visible_log_columns,
    filter_log_row,
    hidden_fields,
)
from core.quote_codes import latest_quote_code, suggest_next_code
from core.supabase_client import get_supabase_client
from core.utils import sanitize, safe_filename
from models.cotizacion import CotizacionCreate, CotizacionUpdate
from models.enums import Section


router = APIRouter(
    prefix="/cotizaciones",
    tags=["Cotizaciones"],
)

DUPLICATE_CODE_DETAIL = "La cotización ingresada ya existe. Usa otro código."


def _client():
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase no está configurado")
    return client


# -----------------------------------------------------
# Helper: duplicate code check (optionally excluding a row)
# -----------------------------------------------------
def code_exists(client, codigo: str, exclude_id: Optional[str] = None) -> bool:
    query = (
        client.table(settings.COTIZACIONES_TABLE)
        .select("id")
        .eq("cotizacion", codigo.strip())
    )
    if exclude_id:
        query = query.neq("id", exclude_id)

    res = query.limit(1).execute()
    return bool(res.data)


def _payload(model: CotizacionCreate) -> dict:
    return sanitize(model.model_dump(mode="json"))


def _update_payload(model: CotizacionUpdate, current_user: CurrentUser) -> dict:
    """
    Only the fields the client sent, minus the stored fields of log
    columns hidden for the user (those are never written back).
    """
    hidden = hidden_fields(visible_log_columns(current_user))
    data = model.model_dump(mode="json", exclude_unset=True)
    return sanitize({k: v for k, v in data.items() if k not in hidden})


# ============================================================
# LIST QUOTATIONS
# ============================================================
@router.get(
    "",
    summary="Log de Cotizaciones",
    description="""
    Quotation log, newest first.

    **Permissions:** requires the `log` section.
    **Columns:** fields of log columns hidden for the user are removed
    from every row; `columns` lists the visible ones.
    """,
)
def list_cotizaciones(current_user: CurrentUser = Depends(requires_section(Section.log))):
    client = _client()
    columns = visible_log_columns(current_user)

    try:
        res = (
            client.table(settings.COTIZACIONES_TABLE)
            .select("*")
            .order("fecha_registro", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Error al cargar el Log de Cotizaciones")

    rows = [filter_log_row(r, columns) for r in (res.data or [])]
    return {"success": True, "columns": columns, "data": rows}


# ============================================================
# SUGGESTED CODE
# ============================================================
@router.get(
    "/next-code",
    summary="Siguiente código sugerido",
    dependencies=[Depends(requires_section(Section.log))],
)
def next_code():
    client = _client()

    try:
        last = latest_quote_code(client, settings.COTIZACIONES_TABLE)
    except Exception as e:
        raise handle_supabase_error(e, "Error al calcular el siguiente código")

    return {"success": True, "codigo": suggest_next_code(last)}


# ============================================================
# DUPLICATE CHECK (used while typing in the form)
# ============================================================
@router.get(
    "/check-code",
    summary="Validar código de cotización",
    dependencies=[Depends(requires_section(Section.log))],
)
def check_code(
    codigo: str = Query(..., description="Código a validar"),
    exclude_id: Optional[str] = Query(None, description="ID de la cotización en edición"),
):
    if not codigo.strip():
        return {"success": True, "exists": False}

    client = _client()

    try:
        exists = code_exists(client, codigo, exclude_id)
    except Exception as e:
        raise handle_supabase_error(e, "Error al validar cotización")

    return {"success": True, "exists": exists}


# ============================================================
# ATTACHMENTS (Supabase Storage)
# ============================================================
@router.post(
    "/attachments",
    summary="Subir archivo adjunto",
    dependencies=[Depends(requires_section(Section.log)), Depends(requires_quote_write())],
)
async def upload_attachment(file: UploadFile = File(...)):
    content = await file.read()
    if not content:
        raise HTTPException(400, "El archivo está vacío")
    if len(content) > settings.MAX_ATTACHMENT_BYTES:
        raise HTTPException(413, "El archivo supera el tamaño permitido")

    file_path = f"cotizaciones/{int(time.time() * 1000)}-{safe_filename(file.filename or 'archivo')}"

    client = _client()
    bucket = client.storage.from_(settings.COTIZACIONES_BUCKET)

    try:
        bucket.upload(
            file_path,
            content,
            {"content-type": file.content_type or "application/octet-stream"},
        )
    except Exception as e:
        raise handle_supabase_error(e, "Error al subir archivo")

    public_url = bucket.get_public_url(file_path)
    logger.info(f"Uploaded quotation attachment {file_path}")

    return {"success": True, "path": file_path, "url": public_url}


# ============================================================
# GET ONE QUOTATION
# ============================================================
@router.get("/{cotizacion_id}", summary="Detalle de cotización")
def get_cotizacion(
    cotizacion_id: str,
    current_user: CurrentUser = Depends(requires_section(Section.log)),
):
    client = _client()

    try:
        res = (
            client.table(settings.COTIZACIONES_TABLE)
            .select("*")
            .eq("id", cotizacion_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Error al cargar la cotización")

    if not res.data:
        raise HTTPException(404, "Cotización no encontrada")

    return {"success": True, "data": filter_log_row(res.data[0], visible_log_columns(current_user))}


# ============================================================
# CREATE QUOTATION
# ============================================================
@router.post(
    "",
    summary="Registrar cotización",
    dependencies=[Depends(requires_section(Section.log))],
)
def create_cotizacion(
    payload: CotizacionCreate,
    current_user: CurrentUser = Depends(requires_create_quote()),
):
    client = _client()
    table = settings.COTIZACIONES_TABLE

    try:
        if code_exists(client, payload.cotizacion):
            raise HTTPException(409, DUPLICATE_CODE_DETAIL)

        res = client.table(table).insert(_payload(payload)).execute()
        if not res.data:
            raise HTTPException(500, "La inserción no devolvió datos")

        # Next suggestion is recomputed after the insert (optimistic, no locking)
        siguiente = suggest_next_code(latest_quote_code(client, table))

    except Exception as e:
        raise handle_supabase_error(e, "Error al registrar la cotización")

    logger.info(f"Quotation {payload.cotizacion} created by {current_user.email}")
    row = filter_log_row(res.data[0], visible_log_columns(current_user))
    return {"success": True, "data": row, "next_code": siguiente}


# ============================================================
# UPDATE QUOTATION
# ============================================================
@router.put(
    "/{cotizacion_id}",
    summary="Actualizar cotización",
    dependencies=[Depends(requires_section(Section.log))],
)
def update_cotizacion(
    cotizacion_id: str,
    payload: CotizacionUpdate,
    current_user: CurrentUser = Depends(requires_edit_quote()),
):
    client = _client()

    try:
        if code_exists(client, payload.cotizacion, exclude_id=cotizacion_id):
            raise HTTPException(409, DUPLICATE_CODE_DETAIL)

        res = (
            client.table(settings.COTIZACIONES_TABLE)
            .update(_update_payload(payload, current_user))
            .eq("id", cotizacion_id)
            .execute()
        )

    except Exception as e:
        raise handle_supabase_error(e, "Error al actualizar la cotización")

    if not res.data:
        raise HTTPException(404, "Cotización no encontrada")

    logger.info(f"Quotation {cotizacion_id} updated by {current_user.email}")
    return {"success": True, "data": filter_log_row(res.data[0], visible_log_columns(current_user))}
