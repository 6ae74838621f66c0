# app/modules/empresas/repository.py
from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.shared.database.models import Empresa, Usuario, Cliente, Vendedor

class EmpresasRepository:
    """
    Repositorio para empresas (tenants) y sus usuarios
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== EMPRESAS ====================

    def get_empresa_por_tenant(self, tenant_id: str) -> Optional[Empresa]:
        return self.db.query(Empresa).filter(Empresa.tenant_id == tenant_id).first()

    def create_empresa(self, tenant_id: str, nombre_empresa: str) -> Empresa:
        empresa = Empresa(tenant_id=tenant_id, nombre_empresa=nombre_empresa, activo=True)
        self.db.add(empresa)
        self.db.flush()
        return empresa

    def create_registros_por_defecto(self, empresa_id: int):
        """Cliente y vendedor que usa una venta sin cliente/vendedor explícito"""
        self.db.add(Cliente(empresa_id=empresa_id, nombre=settings.default_cliente_nombre))
        self.db.add(Vendedor(empresa_id=empresa_id, nombre=settings.default_vendedor_nombre))
        self.db.flush()

    def get_empresas_con_admin(self) -> List[Tuple[Empresa, Optional[str]]]:
        """Empresas con el correo de su primer administrador, más recientes primero"""
        admin_email = select(func.min(Usuario.correo_electronico))\
            .where(
                Usuario.empresa_id == Empresa.id,
                Usuario.rol == "administrador"
            )\
            .correlate(Empresa)\
            .scalar_subquery()

        return self.db.query(Empresa, admin_email.label("admin_email"))\
            .order_by(Empresa.fecha_registro.desc(), Empresa.id.desc())\
            .all()

    def delete_empresa(self, empresa_id: int) -> int:
        """Borrado en la base; las llaves foráneas eliminan todos sus registros"""
        return self.db.query(Empresa)\
            .filter(Empresa.id == empresa_id)\
            .delete(synchronize_session=False)

    # ==================== USUARIOS ====================

    def get_usuario_por_correo(self, correo: str) -> Optional[Usuario]:
        return self.db.query(Usuario).filter(
            func.lower(Usuario.correo_electronico) == correo.lower()
        ).first()

    def get_usuario_de_tenant(self, tenant_id: str, correo: str) -> Optional[Tuple[Usuario, Empresa]]:
        return self.db.query(Usuario, Empresa)\
            .join(Empresa, Usuario.empresa_id == Empresa.id)\
            .filter(
                Empresa.tenant_id == tenant_id,
                func.lower(Usuario.correo_electronico) == correo.lower()
            ).first()

    def get_super_admin(self, correo: str) -> Optional[Usuario]:
        return self.db.query(Usuario).filter(
            Usuario.empresa_id.is_(None),
            Usuario.rol == "super_admin",
            func.lower(Usuario.correo_electronico) == correo.lower()
        ).first()

    def get_usuarios(self, empresa_id: int) -> List[Usuario]:
        return self.db.query(Usuario)\
            .filter(Usuario.empresa_id == empresa_id)\
            .order_by(Usuario.nombre)\
            .all()

    def create_usuario(
        self,
        empresa_id: Optional[int],
        nombre: str,
        correo_electronico: str,
        password_hash: str,
        rol: str,
        necesita_cambio_pw: bool
    ) -> Usuario:
        usuario = Usuario(
            empresa_id=empresa_id,
            nombre=nombre,
            correo_electronico=correo_electronico,
            password_hash=password_hash,
            rol=rol,
            necesita_cambio_pw=necesita_cambio_pw
        )
        self.db.add(usuario)
        self.db.flush()
        return usuario

    def set_password(self, usuario: Usuario, password_hash: str, necesita_cambio_pw: bool) -> Any:
        usuario.password_hash = password_hash
        usuario.necesita_cambio_pw = necesita_cambio_pw
        self.db.flush()
        return usuario
