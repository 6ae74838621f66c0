# app/modules/catalog/router.py
from typing import Type

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_identity, require_roles
from app.core.auth.schemas import IdentityContext, Rol
from .service import (
    CatalogEntity, CatalogService, ProductoService,
    CATEGORIAS, CLASIFICACIONES, PROVEEDORES, CLIENTES, VENDEDORES
)
from .schemas import (
    CategoriaRequest, ClasificacionRequest, ProveedorRequest,
    ClienteRequest, VendedorRequest, ProductoRequest
)

LECTURA = [Rol.ADMINISTRADOR, Rol.SUPER_ADMIN]
ESCRITURA = [Rol.ADMINISTRADOR]


def build_catalog_router(entity: CatalogEntity, request_schema: Type[BaseModel], tags: list) -> APIRouter:
    """
    Router CRUD de un catálogo simple por empresa.

    - GET    /            listado (super_admin ve todas las empresas)
    - POST   /            alta, 201
    - PUT    /{id}        edición
    - DELETE /{id}        baja
    """
    router = APIRouter(prefix=f"/{entity.plural}", tags=tags)

    @router.get("")
    def listar(
        identity: IdentityContext = Depends(require_roles(LECTURA)),
        db: Session = Depends(get_db)
    ):
        return CatalogService(db, entity).listar(identity)

    @router.post("", status_code=201)
    def crear(
        data: request_schema,
        identity: IdentityContext = Depends(require_roles(ESCRITURA)),
        db: Session = Depends(get_db)
    ):
        return CatalogService(db, entity).crear(identity, data)

    @router.put("/{entity_id}")
    def actualizar(
        data: request_schema,
        entity_id: int = Path(..., gt=0),
        identity: IdentityContext = Depends(require_roles(ESCRITURA)),
        db: Session = Depends(get_db)
    ):
        return CatalogService(db, entity).actualizar(identity, entity_id, data)

    @router.delete("/{entity_id}")
    def eliminar(
        entity_id: int = Path(..., gt=0),
        identity: IdentityContext = Depends(require_roles(ESCRITURA)),
        db: Session = Depends(get_db)
    ):
        return CatalogService(db, entity).eliminar(identity, entity_id)

    return router


categorias_router = build_catalog_router(CATEGORIAS, CategoriaRequest, ["Catálogo - Categorías"])
clasificaciones_router = build_catalog_router(CLASIFICACIONES, ClasificacionRequest, ["Catálogo - Clasificaciones"])
proveedores_router = build_catalog_router(PROVEEDORES, ProveedorRequest, ["Catálogo - Proveedores"])
clientes_router = build_catalog_router(CLIENTES, ClienteRequest, ["Catálogo - Clientes"])
vendedores_router = build_catalog_router(VENDEDORES, VendedorRequest, ["Catálogo - Vendedores"])

# ==================== PRODUCTOS ====================

productos_router = APIRouter(prefix="/productos", tags=["Catálogo - Productos"])

@productos_router.get("")
def listar_productos(
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    """
    Listado de productos con clasificación, proveedor y categoría.

    Disponible para cualquier usuario autenticado; el super_admin ve todas las empresas.
    """
    return ProductoService(db).listar(identity)

@productos_router.post("", status_code=201)
def crear_producto(
    data: ProductoRequest,
    identity: IdentityContext = Depends(require_roles(ESCRITURA)),
    db: Session = Depends(get_db)
):
    """Alta de producto. La clave es única por empresa sin distinguir mayúsculas"""
    return ProductoService(db).crear(identity, data)

@productos_router.put("/{producto_id}")
def actualizar_producto(
    data: ProductoRequest,
    producto_id: int = Path(..., gt=0),
    identity: IdentityContext = Depends(require_roles(ESCRITURA)),
    db: Session = Depends(get_db)
):
    return ProductoService(db).actualizar(identity, producto_id, data)

@productos_router.delete("/{producto_id}")
def eliminar_producto(
    producto_id: int = Path(..., gt=0),
    identity: IdentityContext = Depends(require_roles(ESCRITURA)),
    db: Session = Depends(get_db)
):
    """Un producto con ventas registradas no puede eliminarse (409)"""
    return ProductoService(db).eliminar(identity, producto_id)

catalog_routers = [
    categorias_router,
    clasificaciones_router,
    proveedores_router,
    clientes_router,
    vendedores_router,
    productos_router,
]
