# app/modules/reports/router.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.core.auth.schemas import IdentityContext, Rol
from .service import ReportsService
from .schemas import ReporteVentasResponse, ProductosVendidosResponse

router = APIRouter(prefix="/ventas", tags=["Reportes"])

@router.get("/reportes", response_model=ReporteVentasResponse)
def reporte_ventas(
    inicio: Optional[date] = Query(None, description="Fecha inicio (inclusive)"),
    fin: Optional[date] = Query(None, description="Fecha fin (inclusive)"),
    identity: IdentityContext = Depends(require_roles([Rol.ADMINISTRADOR])),
    db: Session = Depends(get_db)
):
    """
    Reporte de ventas del periodo

    Incluye cliente, vendedor, detalles, pagos y el total acumulado.
    """
    service = ReportsService(db)
    return service.reporte_ventas(identity, inicio, fin)

@router.get("/productos-vendidos", response_model=ProductosVendidosResponse)
def productos_vendidos(
    inicio: Optional[date] = Query(None, description="Fecha inicio (inclusive)"),
    fin: Optional[date] = Query(None, description="Fecha fin (inclusive)"),
    identity: IdentityContext = Depends(require_roles([Rol.ADMINISTRADOR])),
    db: Session = Depends(get_db)
):
    """Líneas vendidas con importe, costo y ganancia"""
    service = ReportsService(db)
    return service.productos_vendidos(identity, inicio, fin)
