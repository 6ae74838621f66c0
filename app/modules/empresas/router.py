# app/modules/empresas/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.core.auth.schemas import IdentityContext, Rol
from .service import EmpresasService
from .schemas import (
    CambioPasswordRequest, EmpresasListResponse, MessageResponse,
    UsuarioCreateRequest, UsuarioCreadoResponse, UsuariosListResponse
)

# ==================== SUPER ADMIN ====================

superadmin_router = APIRouter(prefix="/superadmin", tags=["SuperAdmin - Empresas"])

@superadmin_router.get("/empresas", response_model=EmpresasListResponse)
def listar_empresas(
    identity: IdentityContext = Depends(require_roles([Rol.SUPER_ADMIN])),
    db: Session = Depends(get_db)
):
    """Todas las empresas registradas con el correo de su administrador"""
    service = EmpresasService(db)
    return service.listar_empresas()

@superadmin_router.delete("/empresas/{tenant_id}", response_model=MessageResponse)
def eliminar_empresa(
    tenant_id: str,
    identity: IdentityContext = Depends(require_roles([Rol.SUPER_ADMIN])),
    db: Session = Depends(get_db)
):
    """
    Eliminar empresa con todos sus usuarios, catálogos, productos y ventas

    El puesto de administración central no puede eliminarse.
    """
    service = EmpresasService(db)
    return service.eliminar_empresa(tenant_id)

@superadmin_router.post("/reset-pw", response_model=MessageResponse)
def reset_password(
    data: CambioPasswordRequest,
    identity: IdentityContext = Depends(require_roles([Rol.SUPER_ADMIN])),
    db: Session = Depends(get_db)
):
    """Establecer contraseña temporal al administrador de una empresa"""
    service = EmpresasService(db)
    return service.reset_password(data)

# ==================== USUARIOS DE LA EMPRESA ====================

usuarios_router = APIRouter(prefix="/usuarios", tags=["Admin - Usuarios"])

@usuarios_router.get("", response_model=UsuariosListResponse)
def listar_usuarios(
    identity: IdentityContext = Depends(require_roles([Rol.ADMINISTRADOR])),
    db: Session = Depends(get_db)
):
    service = EmpresasService(db)
    return service.listar_usuarios(identity)

@usuarios_router.post("", response_model=UsuarioCreadoResponse, status_code=status.HTTP_201_CREATED)
def crear_usuario(
    data: UsuarioCreateRequest,
    identity: IdentityContext = Depends(require_roles([Rol.ADMINISTRADOR])),
    db: Session = Depends(get_db)
):
    """Crear usuario de la empresa (administrador o usuario) con cambio de contraseña obligatorio"""
    service = EmpresasService(db)
    return service.crear_usuario(identity, data)
