# models/cotizacion.py

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from core.quote_codes import QUOTE_CODE_PATTERN


# -------------------------------------------------
# Shared fields ("Log de Cotizaciones" row)
# -------------------------------------------------
class CotizacionBase(BaseModel):
    # REGISTRO
    descripcion: Optional[str] = None
    cliente: Optional[str] = None
    unidad_minera: Optional[str] = None
    tipo_servicio: Optional[str] = None
    solicitado_por: Optional[str] = None
    correo_solicitante: Optional[str] = None
    telefono_solicitante: Optional[str] = None
    prioridad: Optional[str] = None
    estado_cotizacion: Optional[str] = None
    status_proyecto: Optional[str] = None
    fecha_invitacion: Optional[date] = None
    fecha_confirmacion: Optional[date] = None
    fecha_visita_tec: Optional[date] = None
    fecha_consultas: Optional[date] = None
    fecha_abs_consultas: Optional[date] = None
    fecha_entrega: Optional[date] = None
    link_carpeta_drive: Optional[str] = None

    # SEGUIMIENTO
    responsable: Optional[str] = None
    correo_resp_tec: Optional[str] = None
    telefono_resp_tec: Optional[str] = None
    responsable_economico: Optional[str] = None
    correo_resp_eco: Optional[str] = None
    telefono_resp_eco: Optional[str] = None
    estado_propuesta: Optional[str] = None
    fecha_envio_propuesta: Optional[date] = None
    hora_envio_propuesta: Optional[str] = None
    dias_vencimiento: Optional[int] = None
    enviado_a_tiempo: bool = False
    requiere_visita_tecnica: bool = False
    visita_ejecutada: bool = False
    tiempo_respuesta_dias: Optional[int] = None
    semana_iso: Optional[str] = None
    mes_anio: Optional[str] = None
    oc: Optional[str] = None
    f_oc: Optional[date] = None
    observacion: Optional[str] = None
    oferta_tecnica: Optional[str] = None
    oferta_economica: Optional[str] = None
    moneda: Optional[str] = None
    estado_pipeline: Optional[str] = None

    # Public URLs returned by POST /cotizaciones/attachments
    links_adjuntos: Optional[List[str]] = None

    # The form sends "" for untouched inputs
    @field_validator(
        "fecha_invitacion", "fecha_confirmacion", "fecha_visita_tec",
        "fecha_consultas", "fecha_abs_consultas", "fecha_entrega",
        "fecha_envio_propuesta", "f_oc",
        "dias_vencimiento", "tiempo_respuesta_dias",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("links_adjuntos", mode="before")
    @classmethod
    def empty_links_to_none(cls, v):
        return v or None


# -------------------------------------------------
# Create
# -------------------------------------------------
class CotizacionCreate(CotizacionBase):
    """
    Quotation code is mandatory and must follow FOR-EKA-PRO-3_YYYY-NNN.
    No ID supplied, Supabase generates it.
    """
    cotizacion: str = Field(..., description="Formato: FOR-EKA-PRO-3_2025-001")

    @field_validator("cotizacion")
    @classmethod
    def validate_code(cls, v: str):
        v = v.strip()
        if not QUOTE_CODE_PATTERN.fullmatch(v):
            raise ValueError("Formato: FOR-EKA-PRO-3_2025-001")
        return v


# -------------------------------------------------
# Update (full form, as the edit modal sends it)
# -------------------------------------------------
class CotizacionUpdate(CotizacionCreate):
    pass
