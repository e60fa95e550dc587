# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    Section,
    LogColumn,
    Catalogo,
)

# -------------------------
# Profile Models
# -------------------------
from .profile import (
    ProfileRead,
    RoleUpdate,
    PermissionToggle,
    PermissionsUpdate,
)

# -------------------------
# Quotation Models
# -------------------------
from .cotizacion import (
    CotizacionBase,
    CotizacionCreate,
    CotizacionUpdate,
)

# -------------------------
# Catalog Models
# -------------------------
from .catalogo import CatalogoItem

# -------------------------
# Auth Models
# -------------------------
from .auth import LoginRequest, RegisterRequest, TokenResponse

__all__ = [
    # enums
    "Role",
    "Section",
    "LogColumn",
    "Catalogo",

    # profiles
    "ProfileRead",
    "RoleUpdate",
    "PermissionToggle",
    "PermissionsUpdate",

    # quotations
    "CotizacionBase",
    "CotizacionCreate",
    "CotizacionUpdate",

    # catalogs
    "CatalogoItem",

    # auth
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
]
