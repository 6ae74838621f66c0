# app/core/auth/schemas.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Rol(str, Enum):
    """Roles de usuario del sistema"""
    ADMINISTRADOR = "administrador"
    SUPER_ADMIN = "super_admin"
    USUARIO = "usuario"


@dataclass(frozen=True)
class IdentityContext:
    """Identidad verificada del solicitante, construida una vez por request"""
    user_id: int
    empresa_id: Optional[int]
    tenant_id: Optional[str]
    rol: str

    @property
    def es_super_admin(self) -> bool:
        return self.rol == Rol.SUPER_ADMIN.value


class TokenPayload(BaseModel):
    """Carga útil (payload) del JWT"""
    sub: str = Field(..., pattern=r"^\d+$")
    empresa_id: Optional[int] = None
    tenant_id: Optional[str] = None
    rol: str
    exp: Optional[int] = None
