# app/modules/catalog/__init__.py

"""
Módulo Catalog - Catálogos por empresa

- Categorías, clasificaciones, proveedores, clientes y vendedores
- Productos (clave única por empresa, stock, costo y precio)

Todas las operaciones se limitan a la empresa del token. El cliente
"público general" y el vendedor "administrador" no pueden editarse ni eliminarse.

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Política de aislamiento y unicidad
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import catalog_routers
from .service import CatalogService, ProductoService
from .repository import TenantCatalogRepository, ProductoRepository

__all__ = [
    "catalog_routers",
    "CatalogService",
    "ProductoService",
    "TenantCatalogRepository",
    "ProductoRepository"
]
