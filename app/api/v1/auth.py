# app/api/v1/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.modules.empresas import AuthService, EmpresasService
from app.modules.empresas.schemas import (
    CambioPasswordRequest, CheckTenantResponse, LoginRequest, LoginResponse,
    MessageResponse, RegistroEmpresaRequest, RegistroEmpresaResponse
)

router = APIRouter()

@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Iniciar sesión con Tenant ID, correo y contraseña

    El super_admin usa el Tenant ID reservado `super_admin`.
    """
    service = AuthService(db)
    return service.login(credentials)

@router.post("/register", response_model=RegistroEmpresaResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegistroEmpresaRequest, db: Session = Depends(get_db)):
    """Registrar empresa nueva con su administrador principal"""
    service = EmpresasService(db)
    return service.registrar_empresa(data)

@router.get("/check-tenant/{tenant_id}", response_model=CheckTenantResponse)
def check_tenant(tenant_id: str, db: Session = Depends(get_db)):
    """Consultar si un Tenant ID ya está en uso"""
    service = EmpresasService(db)
    return service.check_tenant(tenant_id)

@router.post("/cambio-pw-forzado", response_model=MessageResponse)
def cambio_password_forzado(data: CambioPasswordRequest, db: Session = Depends(get_db)):
    """Cambio de contraseña obligatorio del primer acceso"""
    service = AuthService(db)
    return service.cambio_password_forzado(data)
