# app/modules/catalog/service.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.auth.dependencies import require_tenant
from app.core.auth.schemas import IdentityContext
from app.core.exceptions import (
    AppError, ConflictError, InternalError, NotFoundError,
    ProtectedEntityError, ValidationError
)
from app.shared.database.integrity import is_foreign_key_violation, is_unique_violation
from app.shared.database.models import (
    Categoria, Clasificacion, Proveedor, Cliente, Vendedor
)
from .repository import TenantCatalogRepository, ProductoRepository
from .schemas import (
    CategoriaResponse, ClasificacionResponse, ProveedorResponse,
    ClienteResponse, VendedorResponse, ProductoResponse
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntity:
    """Descripción de un catálogo: modelo, llaves del sobre JSON y textos"""
    model: Type[Any]
    response_schema: Type[BaseModel]
    singular: str
    plural: str
    etiqueta: str
    femenino: bool = False
    name_field: str = "nombre"
    protected_name: Optional[str] = None
    referencia_invalida: str = "Referencia inválida. Asegúrese de que los registros relacionados existan."

    @property
    def un(self) -> str:
        return "una" if self.femenino else "un"

    @property
    def el(self) -> str:
        return "la" if self.femenino else "el"

    @property
    def sufijo(self) -> str:
        return "a" if self.femenino else "o"


CATEGORIAS = CatalogEntity(Categoria, CategoriaResponse, "categoria", "categorias", "categoría", femenino=True)
CLASIFICACIONES = CatalogEntity(
    Clasificacion, ClasificacionResponse, "clasificacion", "clasificaciones", "clasificación", femenino=True
)
PROVEEDORES = CatalogEntity(Proveedor, ProveedorResponse, "proveedor", "proveedores", "proveedor")
CLIENTES = CatalogEntity(
    Cliente, ClienteResponse, "cliente", "clientes", "cliente",
    protected_name=settings.default_cliente_nombre
)
VENDEDORES = CatalogEntity(
    Vendedor, VendedorResponse, "vendedor", "vendedores", "vendedor",
    protected_name=settings.default_vendedor_nombre
)
PRODUCTOS = CatalogEntity(
    None, ProductoResponse, "producto", "productos", "producto",
    name_field="clave",
    referencia_invalida="Clasificación, Proveedor o Categoría inválida. Asegúrese de que existan."
)


class CatalogService:
    """
    Política común de los catálogos por empresa:
    - la empresa sale siempre de la identidad verificada
    - nombre único sin distinguir mayúsculas dentro de la empresa
    - ids de otra empresa responden 'no encontrado'
    - registros por defecto protegidos contra edición y borrado
    """

    def __init__(self, db: Session, entity: CatalogEntity, repository: TenantCatalogRepository = None):
        self.db = db
        self.entity = entity
        self.repository = repository or TenantCatalogRepository(db, entity.model, entity.name_field)

    # ==================== LECTURA ====================

    def listar(self, identity: IdentityContext) -> Dict[str, Any]:
        empresa_id = None if identity.es_super_admin else require_tenant(identity)
        items = self.repository.get_all(empresa_id)
        return {
            "success": True,
            self.entity.plural: [self._serialize(i) for i in items]
        }

    # ==================== ESCRITURA ====================

    def crear(self, identity: IdentityContext, data: BaseModel) -> Dict[str, Any]:
        empresa_id = require_tenant(identity)
        values = data.model_dump()

        self._validate_references(empresa_id, values)
        self._ensure_unique(empresa_id, values[self.entity.name_field])

        entity = self._commit(lambda: self.repository.create(empresa_id, values), values)
        logger.info(f"➕ {self.entity.singular} {entity.id} creado en empresa {empresa_id}")

        return {
            "success": True,
            "message": f"{self.entity.etiqueta.capitalize()} cread{self.entity.sufijo} exitosamente.",
            self.entity.singular: self._serialize(entity)
        }

    def actualizar(self, identity: IdentityContext, entity_id: int, data: BaseModel) -> Dict[str, Any]:
        empresa_id = require_tenant(identity)
        entity = self._get_or_404(empresa_id, entity_id)
        self._check_protected(entity, "modificar")

        values = data.model_dump()
        self._validate_references(empresa_id, values)
        self._ensure_unique(empresa_id, values[self.entity.name_field], exclude_id=entity_id)

        entity = self._commit(lambda: self.repository.update(entity, values), values)

        return {
            "success": True,
            "message": f"{self.entity.etiqueta.capitalize()} actualizad{self.entity.sufijo} exitosamente.",
            self.entity.singular: self._serialize(entity)
        }

    def eliminar(self, identity: IdentityContext, entity_id: int) -> Dict[str, Any]:
        empresa_id = require_tenant(identity)
        entity = self._get_or_404(empresa_id, entity_id)
        self._check_protected(entity, "eliminar")

        self._commit(lambda: self.repository.delete(entity), {}, deleting=True)
        logger.info(f"🗑️ {self.entity.singular} {entity_id} eliminado en empresa {empresa_id}")

        return {
            "success": True,
            "message": f"{self.entity.etiqueta.capitalize()} eliminad{self.entity.sufijo} exitosamente."
        }

    # ==================== REGLAS ====================

    def _get_or_404(self, empresa_id: int, entity_id: int):
        entity = self.repository.get(empresa_id, entity_id)
        if not entity:
            raise NotFoundError(
                f"{self.entity.etiqueta.capitalize()} no encontrad{self.entity.sufijo} "
                f"o no pertenece a su empresa."
            )
        return entity

    def _check_protected(self, entity: Any, accion: str):
        protected = self.entity.protected_name
        if protected and getattr(entity, self.entity.name_field).strip().lower() == protected.lower():
            raise ProtectedEntityError(
                f'No se puede {accion} {self.entity.el} {self.entity.etiqueta} por defecto ("{protected}").'
            )

    def _ensure_unique(self, empresa_id: int, value: str, exclude_id: Optional[int] = None):
        if self.repository.find_by_name(empresa_id, value, exclude_id=exclude_id):
            raise ConflictError(self._duplicate_message(value))

    def _validate_references(self, empresa_id: int, values: Dict[str, Any]):
        """Los catálogos simples no referencian a otros registros"""

    def _duplicate_message(self, value: Any) -> str:
        return (
            f'Ya existe {self.entity.un} {self.entity.etiqueta} con '
            f'{"la" if self.entity.name_field == "clave" else "el"} {self.entity.name_field} '
            f'"{value}" en su empresa.'
        )

    def _commit(self, operation, values: Dict[str, Any], deleting: bool = False):
        try:
            result = operation()
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise self._translate_integrity_error(e, values, deleting)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Error de base de datos en catálogo {self.entity.plural}")
            raise InternalError()

        if result is not None:
            self.db.refresh(result)
        return result

    def _translate_integrity_error(self, e: IntegrityError, values: Dict[str, Any], deleting: bool) -> AppError:
        if is_foreign_key_violation(e):
            if deleting:
                return ConflictError(
                    f"No se puede eliminar {self.entity.el} {self.entity.etiqueta} porque está "
                    f"siendo utilizad{self.entity.sufijo} por otros registros."
                )
            return ValidationError(self.entity.referencia_invalida)
        if is_unique_violation(e):
            return ConflictError(self._duplicate_message(values.get(self.entity.name_field)))

        logger.exception(f"❌ Violación de integridad no esperada en {self.entity.plural}")
        return InternalError()

    def _serialize(self, entity: Any) -> Dict[str, Any]:
        return self.entity.response_schema.model_validate(entity).model_dump()


class ProductoService(CatalogService):
    """Catálogo de productos: clave única y referencias de la misma empresa"""

    def __init__(self, db: Session):
        super().__init__(db, PRODUCTOS, ProductoRepository(db))

    def _validate_references(self, empresa_id: int, values: Dict[str, Any]):
        referencias = [
            (Clasificacion, values.get("clasificacion_id")),
            (Proveedor, values.get("proveedor_id")),
            (Categoria, values.get("categoria_id")),
        ]
        for model, ref_id in referencias:
            if ref_id is None:
                continue
            if not self.repository.belongs_to(model, empresa_id, ref_id):
                raise ValidationError(self.entity.referencia_invalida)
