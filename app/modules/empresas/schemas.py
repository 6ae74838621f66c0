# app/modules/empresas/schemas.py
import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

from app.config.settings import settings

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

def _validar_correo(v: str) -> str:
    v = v.strip().lower()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("El formato de correo es inválido")
    return v

class RolUsuarioEmpresa(str, Enum):
    """Roles que un administrador puede asignar dentro de su empresa"""
    ADMINISTRADOR = "administrador"
    USUARIO = "usuario"

# ==================== AUTENTICACIÓN ====================

class LoginRequest(BaseModel):
    tenant_id: str = Field(..., min_length=1, description="ID de la empresa")
    correo_electronico: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class LoginResponse(BaseModel):
    success: bool
    message: str
    access_token: str
    token_type: str = "bearer"
    tenant_id: str
    rol: str
    necesita_cambio_pw: bool

class CambioPasswordRequest(BaseModel):
    """Usado por el cambio forzado y por el reseteo del super_admin"""
    tenant_id: str = Field(..., min_length=1)
    correo_electronico: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, description="Contraseña (mínimo 6 caracteres)")

# ==================== REGISTRO DE EMPRESAS ====================

class RegistroEmpresaRequest(BaseModel):
    tenant_id: str = Field(..., min_length=1, max_length=100, description="ID único de la empresa")
    nombre_empresa: str = Field(..., min_length=1, max_length=255)
    nombre_admin: str = Field(..., min_length=1, max_length=255)
    correo_electronico: str = Field(..., description="Correo del administrador principal")
    password: str = Field(..., min_length=6, description="Contraseña (mínimo 6 caracteres)")
    forzar_cambio_pw: bool = Field(True, description="Pedir cambio de contraseña en el primer acceso")

    @field_validator("tenant_id", "nombre_empresa", "nombre_admin")
    @classmethod
    def validate_non_empty(cls, v: str):
        if not v.strip():
            raise ValueError("Este campo no puede estar vacío")
        return v.strip()

    @field_validator("correo_electronico")
    @classmethod
    def validate_email_domain(cls, v: str):
        v = v.strip().lower()
        dominio = v.rsplit("@", 1)[-1]
        if not EMAIL_PATTERN.match(v) or dominio not in settings.allowed_email_domains:
            permitidos = ", ".join(f"@{d}" for d in settings.allowed_email_domains)
            raise ValueError(
                f"El formato de correo es inválido o el dominio no está permitido. "
                f"Solo se aceptan {permitidos}"
            )
        return v

class RegistroEmpresaResponse(BaseModel):
    success: bool
    message: str
    tenant_id: str

class CheckTenantResponse(BaseModel):
    exists: bool
    message: str

# ==================== SUPER ADMIN ====================

class EmpresaResponse(BaseModel):
    id: int
    tenant_id: str
    nombre_empresa: str
    activo: bool
    fecha_registro: datetime
    admin_email: Optional[str] = None

class EmpresasListResponse(BaseModel):
    success: bool
    empresas: List[EmpresaResponse]
    total: int

class MessageResponse(BaseModel):
    success: bool
    message: str

# ==================== USUARIOS DE LA EMPRESA ====================

class UsuarioCreateRequest(BaseModel):
    nombre: str = Field(..., min_length=2, max_length=255)
    correo_electronico: str = Field(..., description="Email único del usuario")
    password: str = Field(..., min_length=6, description="Contraseña temporal (mínimo 6 caracteres)")
    rol: RolUsuarioEmpresa = Field(RolUsuarioEmpresa.USUARIO, description="Rol del usuario")

    @field_validator("correo_electronico")
    @classmethod
    def validate_email(cls, v: str):
        return _validar_correo(v)

class UsuarioResponse(BaseModel):
    id: int
    nombre: str
    correo_electronico: str
    rol: str
    necesita_cambio_pw: bool
    fecha_registro: datetime

class UsuariosListResponse(BaseModel):
    success: bool
    usuarios: List[UsuarioResponse]

class UsuarioCreadoResponse(BaseModel):
    success: bool
    message: str
    usuario: UsuarioResponse
