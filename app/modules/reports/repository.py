# app/modules/reports/repository.py
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from app.shared.database.models import Venta, DetalleVenta, Producto

class ReportsRepository:
    """
    Consultas de sólo lectura sobre las ventas de una empresa
    """

    def __init__(self, db: Session):
        self.db = db

    def _filter_dates(self, query, inicio: Optional[date], fin: Optional[date]):
        if inicio:
            query = query.filter(func.date(Venta.fecha_venta) >= inicio)
        if fin:
            query = query.filter(func.date(Venta.fecha_venta) <= fin)
        return query

    def get_ventas(
        self,
        empresa_id: int,
        inicio: Optional[date] = None,
        fin: Optional[date] = None
    ) -> List[Venta]:
        query = self.db.query(Venta).options(
            joinedload(Venta.cliente),
            joinedload(Venta.vendedor),
            selectinload(Venta.detalles).joinedload(DetalleVenta.producto),
            selectinload(Venta.pagos)
        ).filter(Venta.empresa_id == empresa_id)

        query = self._filter_dates(query, inicio, fin)
        return query.order_by(Venta.fecha_venta.desc(), Venta.folio.desc()).all()

    def get_lineas_vendidas(
        self,
        empresa_id: int,
        inicio: Optional[date] = None,
        fin: Optional[date] = None
    ) -> List[Tuple[DetalleVenta, Venta, Producto]]:
        """Cada línea de venta con su encabezado y producto"""
        query = self.db.query(DetalleVenta, Venta, Producto)\
            .join(Venta, DetalleVenta.venta_id == Venta.id)\
            .join(Producto, DetalleVenta.producto_id == Producto.id)\
            .filter(Venta.empresa_id == empresa_id)

        query = self._filter_dates(query, inicio, fin)
        return query.order_by(
            Venta.fecha_venta.desc(),
            Venta.folio.desc(),
            DetalleVenta.id
        ).all()
