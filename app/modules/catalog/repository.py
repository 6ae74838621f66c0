# app/modules/catalog/repository.py
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.config.database import Base
from app.shared.database.models import Producto

class TenantCatalogRepository:
    """
    Acceso a datos de un catálogo filtrado siempre por empresa.
    Un id de otra empresa se comporta igual que uno inexistente.
    """

    def __init__(self, db: Session, model: Type[Base], name_field: str = "nombre"):
        self.db = db
        self.model = model
        self.name_field = name_field

    @property
    def _name_column(self):
        return getattr(self.model, self.name_field)

    def _base_query(self):
        return self.db.query(self.model)

    def get_all(self, empresa_id: Optional[int]) -> List[Any]:
        """Registros de la empresa; empresa_id=None es la vista global del super_admin"""
        query = self._base_query()
        if empresa_id is not None:
            query = query.filter(self.model.empresa_id == empresa_id)
        return query.order_by(self._name_column).all()

    def get(self, empresa_id: int, entity_id: int) -> Optional[Any]:
        return self._base_query().filter(
            self.model.id == entity_id,
            self.model.empresa_id == empresa_id
        ).first()

    def find_by_name(self, empresa_id: int, value: str, exclude_id: Optional[int] = None) -> Optional[Any]:
        """Búsqueda sin distinguir mayúsculas dentro de la empresa"""
        query = self.db.query(self.model).filter(
            self.model.empresa_id == empresa_id,
            func.lower(self._name_column) == value.strip().lower()
        )
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return query.first()

    def create(self, empresa_id: int, data: Dict[str, Any]) -> Any:
        entity = self.model(empresa_id=empresa_id, **data)
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity: Any, data: Dict[str, Any]) -> Any:
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        self.db.flush()
        return entity

    def delete(self, entity: Any):
        self.db.delete(entity)
        self.db.flush()

    def belongs_to(self, model: Type[Base], empresa_id: int, entity_id: int) -> bool:
        return self.db.query(model.id).filter(
            model.id == entity_id,
            model.empresa_id == empresa_id
        ).first() is not None


class ProductoRepository(TenantCatalogRepository):
    """Productos con sus relaciones cargadas para el listado"""

    def __init__(self, db: Session):
        super().__init__(db, Producto, name_field="clave")

    def _base_query(self):
        return self.db.query(Producto).options(
            joinedload(Producto.clasificacion),
            joinedload(Producto.proveedor),
            joinedload(Producto.categoria)
        )

    def get_all(self, empresa_id: Optional[int]) -> List[Producto]:
        query = self._base_query()
        if empresa_id is not None:
            query = query.filter(Producto.empresa_id == empresa_id)
        return query.order_by(Producto.id.desc()).all()
