# models/profile.py

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator

from models.enums import LogColumn, Role, Section


# ===============================================================
# PROFILES TABLE
# ===============================================================

class ProfileRead(BaseModel):
    """
    Row of the profiles table, normalized for the admin panel.
    """
    id: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    nombre: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = False
    permissions: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def normalize_id(cls, v):
        return str(v) if v is not None else None

    @property
    def estado(self) -> str:
        if self.role == Role.pending.value:
            return "Pendiente"
        if not self.is_active:
            return "Bloqueado"
        return "Activo"

    @classmethod
    def from_row(cls, row: dict) -> "ProfileRead":
        return cls(
            id=row["id"],
            user_id=row.get("user_id"),
            email=row.get("email"),
            nombre=row.get("display_name") or row.get("full_name") or row.get("email"),
            role=row.get("role"),
            is_active=bool(row.get("is_active")),
            permissions=row.get("permissions") if isinstance(row.get("permissions"), dict) else None,
            created_at=row.get("created_at"),
        )


# -----------------------------------------------------
# Admin payloads
# -----------------------------------------------------
class RoleUpdate(BaseModel):
    """Empty string or null clears the role."""
    role: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v):
        if v is None or v == "":
            return None
        if v not in Role.list():
            raise ValueError(f"Rol inválido: {v}")
        return v


class PermissionToggle(BaseModel):
    """Exactly one of column / section."""
    column: Optional[LogColumn] = None
    section: Optional[Section] = None

    @model_validator(mode="after")
    def one_target(self):
        if (self.column is None) == (self.section is None):
            raise ValueError("Indica una columna o una sección")
        return self


class PermissionsUpdate(BaseModel):
    """Full override document; null clears all overrides."""
    permissions: Optional[Dict[str, Any]] = Field(None, description="Override document (sections, logColumns, canCreateQuote, canEditQuote)")
