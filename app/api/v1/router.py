# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1.auth import router as auth_router

# ✅ IMPORTAR MÓDULOS
from app.modules.sales import sales_router
from app.modules.catalog import catalog_routers
from app.modules.inventory import inventory_router
from app.modules.reports import reports_router
from app.modules.empresas import superadmin_router, usuarios_router

from app.config.settings import settings


# Crear router principal de la API v1
api_router = APIRouter()

# ==================== AUTENTICACIÓN ====================

api_router.include_router(auth_router, prefix="/auth", tags=["Autenticación"])

# ==================== SUPER ADMIN ====================

api_router.include_router(superadmin_router)  # /api/v1/superadmin/...

# ==================== ADMINISTRACIÓN DE LA EMPRESA ====================

# Ventas: /api/v1/admin/ventas
api_router.include_router(sales_router, prefix="/admin")

# Reportes: /api/v1/admin/ventas/reportes, /api/v1/admin/ventas/productos-vendidos
api_router.include_router(reports_router, prefix="/admin")

# Catálogos: /api/v1/admin/{categorias|clasificaciones|proveedores|clientes|vendedores|productos}
for catalog_router in catalog_routers:
    api_router.include_router(catalog_router, prefix="/admin")

# Inventario: /api/v1/admin/inventario/entradas
api_router.include_router(inventory_router, prefix="/admin")

# Usuarios: /api/v1/admin/usuarios
api_router.include_router(usuarios_router, prefix="/admin")


# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "superadmin": "/api/v1/superadmin",
            "sales": "/api/v1/admin/ventas",
            "reports": "/api/v1/admin/ventas/reportes",
            "catalog": "/api/v1/admin/{categorias|clasificaciones|proveedores|clientes|vendedores|productos}",
            "inventory": "/api/v1/admin/inventario/entradas",
            "users": "/api/v1/admin/usuarios"
        }
    }

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "architecture": "modular_monolith",
        "modules": {
            "auth": {
                "status": "active",
                "features": ["JWT", "Roles", "Registro de empresas", "Cambio de contraseña forzado"]
            },
            "sales": {
                "status": "active",
                "features": ["Folio por empresa", "Pagos múltiples", "Descuento de inventario"]
            },
            "catalog": {
                "status": "active",
                "features": ["Categorías", "Clasificaciones", "Proveedores", "Clientes", "Vendedores", "Productos"]
            },
            "inventory": {
                "status": "active",
                "features": ["Entradas de mercancía", "Historial de movimientos"]
            },
            "reports": {
                "status": "active",
                "features": ["Reporte de ventas", "Productos vendidos"]
            }
        }
    }
