# app/modules/inventory/__init__.py

"""
Módulo Inventory - Entradas de mercancía y kardex

- Entradas de inventario con suma atómica de stock
- Historial de movimientos ENTRADA (entradas) y SALIDA (ventas)
"""

from .router import router as inventory_router
from .service import InventoryService
from .repository import InventoryRepository

__all__ = [
    "inventory_router",
    "InventoryService",
    "InventoryRepository"
]
