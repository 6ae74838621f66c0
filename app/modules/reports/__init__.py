# app/modules/reports/__init__.py

"""
Módulo Reports - Lectura de ventas registradas

- Reporte de ventas con detalles, pagos y total acumulado
- Productos vendidos con costo y ganancia por línea
"""

from .router import router as reports_router
from .service import ReportsService
from .repository import ReportsRepository

__all__ = [
    "reports_router",
    "ReportsService",
    "ReportsRepository"
]
