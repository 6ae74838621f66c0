# app/modules/empresas/__init__.py

"""
Módulo Empresas - Tenants y usuarios

- Registro de empresas con su administrador, cliente y vendedor por defecto
- Inicio de sesión y cambio forzado de contraseña
- Administración global del super_admin (listado, baja, reseteo de contraseña)
- Usuarios de cada empresa
"""

from .router import superadmin_router, usuarios_router
from .service import EmpresasService, AuthService
from .repository import EmpresasRepository

__all__ = [
    "superadmin_router",
    "usuarios_router",
    "EmpresasService",
    "AuthService",
    "EmpresasRepository"
]
