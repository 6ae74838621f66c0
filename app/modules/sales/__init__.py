# app/modules/sales/__init__.py
"""
Módulo de Ventas - Registro de ventas en punto de venta

- Folio consecutivo por empresa, emitido dentro de la transacción de la venta
- Validación de stock y precios por línea
- Conciliación de pagos en múltiples métodos y cálculo de cambio
- Descuento atómico de inventario

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio (transacción de la venta)
- repository.py: Acceso a datos y emisión de folios
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository, FolioRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository",
    "FolioRepository"
]
