# app/modules/empresas/service.py
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.auth.dependencies import require_tenant
from app.core.auth.schemas import IdentityContext, Rol
from app.core.auth.security import create_access_token, get_password_hash, verify_password
from app.core.exceptions import (
    AuthenticationError, AuthorizationError,
    ConflictError, InternalError, NotFoundError
)
from .repository import EmpresasRepository
from .schemas import (
    CambioPasswordRequest, LoginRequest, RegistroEmpresaRequest, UsuarioCreateRequest
)

logger = logging.getLogger(__name__)

CREDENCIALES_INVALIDAS = "Credenciales inválidas o Tenant ID incorrecto."

def _usuario_dict(usuario) -> Dict[str, Any]:
    return {
        "id": usuario.id,
        "nombre": usuario.nombre,
        "correo_electronico": usuario.correo_electronico,
        "rol": usuario.rol,
        "necesita_cambio_pw": usuario.necesita_cambio_pw,
        "fecha_registro": usuario.fecha_registro
    }

class AuthService:
    """Inicio de sesión y cambio forzado de contraseña"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = EmpresasRepository(db)

    def login(self, credentials: LoginRequest) -> Dict[str, Any]:
        """
        Validar tenant, correo y contraseña y emitir el JWT.
        Cualquier fallo responde con el mismo mensaje genérico.
        """
        tenant_id = credentials.tenant_id.strip()

        if tenant_id == settings.super_admin_tenant_id:
            usuario = self.repository.get_super_admin(credentials.correo_electronico.strip())
            empresa = None
        else:
            found = self.repository.get_usuario_de_tenant(tenant_id, credentials.correo_electronico.strip())
            usuario, empresa = found if found else (None, None)
            if empresa is not None and not empresa.activo:
                usuario = None

        if not usuario or not verify_password(credentials.password, usuario.password_hash):
            logger.info(f"🔒 Login rechazado para tenant '{tenant_id}'")
            raise AuthenticationError(CREDENCIALES_INVALIDAS)

        identity = IdentityContext(
            user_id=usuario.id,
            empresa_id=empresa.id if empresa else None,
            tenant_id=tenant_id,
            rol=usuario.rol
        )

        return {
            "success": True,
            "message": "Autenticación exitosa.",
            "access_token": create_access_token(identity),
            "token_type": "bearer",
            "tenant_id": tenant_id,
            "rol": usuario.rol,
            "necesita_cambio_pw": usuario.necesita_cambio_pw
        }

    def cambio_password_forzado(self, data: CambioPasswordRequest) -> Dict[str, Any]:
        """Sólo aplica a usuarios marcados con necesita_cambio_pw"""
        if data.tenant_id == settings.super_admin_tenant_id:
            usuario = self.repository.get_super_admin(data.correo_electronico.strip())
        else:
            found = self.repository.get_usuario_de_tenant(data.tenant_id, data.correo_electronico.strip())
            usuario = found[0] if found else None

        if not usuario or not usuario.necesita_cambio_pw:
            raise NotFoundError("Solicitud de cambio inválida o ya procesada.")

        self.repository.set_password(usuario, get_password_hash(data.new_password), False)
        self.db.commit()

        return {
            "success": True,
            "message": "Contraseña actualizada correctamente. Inicie sesión."
        }


class EmpresasService:
    """
    Registro de empresas, administración global del super_admin
    y usuarios de cada empresa
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = EmpresasRepository(db)

    # ==================== REGISTRO ====================

    def check_tenant(self, tenant_id: str) -> Dict[str, Any]:
        tenant_id = tenant_id.strip()
        if tenant_id == settings.super_admin_tenant_id or self.repository.get_empresa_por_tenant(tenant_id):
            return {"exists": True, "message": "El Tenant ID ya está en uso."}
        return {"exists": False, "message": "Tenant ID disponible."}

    def registrar_empresa(self, data: RegistroEmpresaRequest) -> Dict[str, Any]:
        """
        Crear empresa, administrador principal, cliente y vendedor por defecto
        en una sola transacción
        """
        if data.tenant_id == settings.super_admin_tenant_id:
            raise ConflictError(f"Error: El ID de Puesto/Empresa ({data.tenant_id}) está reservado.")
        if self.repository.get_empresa_por_tenant(data.tenant_id):
            raise ConflictError(f"Error: El ID de Puesto/Empresa ({data.tenant_id}) ya está en uso.")
        if self.repository.get_usuario_por_correo(data.correo_electronico):
            raise ConflictError(
                f"Error: El Correo Electrónico ({data.correo_electronico}) ya está registrado por otro administrador."
            )

        try:
            empresa = self.repository.create_empresa(data.tenant_id, data.nombre_empresa)
            self.repository.create_usuario(
                empresa_id=empresa.id,
                nombre=data.nombre_admin,
                correo_electronico=data.correo_electronico,
                password_hash=get_password_hash(data.password),
                rol=Rol.ADMINISTRADOR.value,
                necesita_cambio_pw=data.forzar_cambio_pw
            )
            self.repository.create_registros_por_defecto(empresa.id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Error de unicidad. Revise Tenant ID o Correo Electrónico.")
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Error registrando empresa '{data.tenant_id}'")
            raise InternalError("Error interno del servidor al crear empresa. (Operación revertida).")

        logger.info(f"🏢 Empresa registrada: {data.tenant_id}")

        return {
            "success": True,
            "message": "Empresa y administrador principal creados exitosamente.",
            "tenant_id": data.tenant_id
        }

    # ==================== SUPER ADMIN ====================

    def listar_empresas(self) -> Dict[str, Any]:
        empresas = [
            {
                "id": empresa.id,
                "tenant_id": empresa.tenant_id,
                "nombre_empresa": empresa.nombre_empresa,
                "activo": empresa.activo,
                "fecha_registro": empresa.fecha_registro,
                "admin_email": admin_email
            }
            for empresa, admin_email in self.repository.get_empresas_con_admin()
        ]
        return {"success": True, "empresas": empresas, "total": len(empresas)}

    def eliminar_empresa(self, tenant_id: str) -> Dict[str, Any]:
        """Eliminar la empresa y, en cascada, todos sus registros"""
        if tenant_id == settings.super_admin_tenant_id:
            raise AuthorizationError(
                "Error: El puesto de Administración Central (super_admin) no puede ser eliminado."
            )

        empresa = self.repository.get_empresa_por_tenant(tenant_id)
        if not empresa:
            raise NotFoundError("Empresa no encontrada.")
        nombre_empresa = empresa.nombre_empresa

        try:
            self.repository.delete_empresa(empresa.id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Error eliminando empresa '{tenant_id}'")
            raise InternalError("Error interno del servidor al eliminar la empresa.")

        logger.warning(f"🗑️ Empresa eliminada: {tenant_id} ({nombre_empresa})")

        return {
            "success": True,
            "message": (
                f"La empresa '{nombre_empresa}' (ID: {tenant_id}) y todos sus "
                f"usuarios han sido eliminados correctamente."
            )
        }

    def reset_password(self, data: CambioPasswordRequest) -> Dict[str, Any]:
        """Contraseña temporal para el administrador de una empresa"""
        found = self.repository.get_usuario_de_tenant(data.tenant_id, data.correo_electronico.strip())
        usuario = found[0] if found else None
        if not usuario or usuario.rol != Rol.ADMINISTRADOR.value:
            raise NotFoundError("Administrador no encontrado para este Puesto/Empresa.")

        self.repository.set_password(usuario, get_password_hash(data.new_password), True)
        self.db.commit()

        logger.info(f"🔑 Contraseña temporal establecida para {usuario.correo_electronico} ({data.tenant_id})")

        return {
            "success": True,
            "message": (
                f"Contraseña temporal establecida para {usuario.correo_electronico}. "
                f"El usuario será forzado a cambiarla al iniciar sesión."
            )
        }

    # ==================== USUARIOS DE LA EMPRESA ====================

    def listar_usuarios(self, identity: IdentityContext) -> Dict[str, Any]:
        empresa_id = require_tenant(identity)
        return {
            "success": True,
            "usuarios": [_usuario_dict(u) for u in self.repository.get_usuarios(empresa_id)]
        }

    def crear_usuario(self, identity: IdentityContext, data: UsuarioCreateRequest) -> Dict[str, Any]:
        """El usuario nuevo debe cambiar su contraseña en el primer acceso"""
        empresa_id = require_tenant(identity)

        if self.repository.get_usuario_por_correo(data.correo_electronico):
            raise ConflictError("Email ya está en uso")

        try:
            usuario = self.repository.create_usuario(
                empresa_id=empresa_id,
                nombre=data.nombre.strip(),
                correo_electronico=data.correo_electronico,
                password_hash=get_password_hash(data.password),
                rol=data.rol.value,
                necesita_cambio_pw=True
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Email ya está en uso")
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Error creando usuario en empresa {empresa_id}")
            raise InternalError()

        self.db.refresh(usuario)

        return {
            "success": True,
            "message": "Usuario creado exitosamente.",
            "usuario": _usuario_dict(usuario)
        }
