# models/catalogo.py

from typing import Optional
from pydantic import BaseModel, field_validator


class CatalogoItem(BaseModel):
    """
    Option of a catalog table. correo / telefono only exist
    for solicitantes and responsables.
    """
    nombre: str
    correo: Optional[str] = None
    telefono: Optional[str] = None

    @field_validator("nombre")
    @classmethod
    def nombre_required(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("El nombre es obligatorio.")
        return v
