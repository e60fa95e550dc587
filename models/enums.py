from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Base authorization class stored in profiles.role."""

    admin = "admin"
    user = "user"
    lector = "lector"      # read-only
    pending = "pending"    # awaiting approval


# -----------------------------------------------------
# SECTION
# -----------------------------------------------------
class Section(BaseStrEnum):
    """Navigable UI areas gated by permission."""

    dashboard = "dashboard"
    log = "log"
    requerimientos = "requerimientos"
    detalle_reqs = "detalle_reqs"
    admin = "admin"


# -----------------------------------------------------
# LOG COLUMN
# -----------------------------------------------------
class LogColumn(BaseStrEnum):
    """Columns of the quotation log table."""

    cotizacion = "cotizacion"
    descripcion = "descripcion"
    cliente = "cliente"
    unidad_minera = "unidad_minera"
    tipo_servicio = "tipo_servicio"
    status_cotizacion = "status_cotizacion"
    status_proyecto = "status_proyecto"
    oferta_usd = "oferta_usd"
    moneda = "moneda"
    acciones = "acciones"


# -----------------------------------------------------
# CATALOG
# -----------------------------------------------------
class Catalogo(BaseStrEnum):
    """Option lists maintained from the quotation form."""

    clientes = "clientes"
    unidades_minera = "unidades_minera"
    tipos_servicio = "tipos_servicio"
    status_cotizacion = "status_cotizacion_catalogo"
    solicitantes = "solicitantes"
    responsables = "responsables"

    @property
    def has_contact(self) -> bool:
        return self in (Catalogo.solicitantes, Catalogo.responsables)
