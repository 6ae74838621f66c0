# app/modules/inventory/repository.py
from datetime import date
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, joinedload

from app.shared.database.models import MovimientoInventario, Producto

class InventoryRepository:
    """
    Repositorio para entradas de inventario e historial de movimientos
    """

    def __init__(self, db: Session):
        self.db = db

    def get_producto(self, empresa_id: int, producto_id: int) -> Optional[Producto]:
        return self.db.query(Producto).filter(
            Producto.id == producto_id,
            Producto.empresa_id == empresa_id
        ).first()

    def increase_product_stock(self, empresa_id: int, producto_id: int, cantidad: int) -> Optional[int]:
        """Sumar stock de forma atómica (stock = stock + cantidad); devuelve el nuevo stock"""
        result = self.db.execute(
            update(Producto)
            .where(
                Producto.id == producto_id,
                Producto.empresa_id == empresa_id
            )
            .values(stock=Producto.stock + cantidad)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None

        return self.db.execute(
            select(Producto.stock).where(Producto.id == producto_id)
        ).scalar_one()

    def create_entrada(
        self,
        empresa_id: int,
        producto_id: int,
        cantidad: int,
        nuevo_stock: int,
        usuario_id: Optional[int],
        referencia: Optional[str],
        motivo: Optional[str]
    ) -> MovimientoInventario:
        movimiento = MovimientoInventario(
            empresa_id=empresa_id,
            producto_id=producto_id,
            tipo="ENTRADA",
            cantidad=cantidad,
            nuevo_stock=nuevo_stock,
            usuario_id=usuario_id,
            referencia=referencia,
            motivo=motivo
        )
        self.db.add(movimiento)
        return movimiento

    def get_movimientos(
        self,
        empresa_id: int,
        tipo: Optional[str] = None,
        inicio: Optional[date] = None,
        fin: Optional[date] = None
    ) -> List[MovimientoInventario]:
        """Movimientos de la empresa, más recientes primero"""
        query = self.db.query(MovimientoInventario).options(
            joinedload(MovimientoInventario.producto),
            joinedload(MovimientoInventario.usuario)
        ).filter(MovimientoInventario.empresa_id == empresa_id)

        if tipo:
            query = query.filter(MovimientoInventario.tipo == tipo)
        if inicio:
            query = query.filter(func.date(MovimientoInventario.fecha) >= inicio)
        if fin:
            query = query.filter(func.date(MovimientoInventario.fecha) <= fin)

        return query.order_by(
            MovimientoInventario.fecha.desc(),
            MovimientoInventario.id.desc()
        ).all()
