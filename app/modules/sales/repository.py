# app/modules/sales/repository.py
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.shared.database.models import (
    ControlFolio, Producto, Venta, DetalleVenta, PagoVenta,
    Cliente, Vendedor, MovimientoInventario
)

class FolioRepository:
    """
    Emisión de folios por empresa. Sólo debe usarse dentro de la
    transacción de la venta: el folio se libera si la venta se revierte.
    """

    def __init__(self, db: Session):
        self.db = db

    def allocate_next_folio(self, empresa_id: int) -> int:
        """
        Avanzar ultimo_folio en uno y devolver el nuevo valor.

        El UPDATE atómico toma el candado de la fila hasta el fin de la
        transacción, así que dos ventas concurrentes de la misma empresa
        nunca obtienen el mismo folio.
        """
        if self._increment(empresa_id):
            return self._current(empresa_id)

        # Primera venta de la empresa: crear la fila con el folio 1
        if self._insert_initial_row(empresa_id):
            return 1

        # Otra transacción creó la fila primero
        if not self._increment(empresa_id):
            raise RuntimeError(f"No se pudo inicializar el control de folios de la empresa {empresa_id}")
        return self._current(empresa_id)

    def _increment(self, empresa_id: int) -> bool:
        result = self.db.execute(
            update(ControlFolio)
            .where(ControlFolio.empresa_id == empresa_id)
            .values(ultimo_folio=ControlFolio.ultimo_folio + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _current(self, empresa_id: int) -> int:
        return self.db.execute(
            select(ControlFolio.ultimo_folio).where(ControlFolio.empresa_id == empresa_id)
        ).scalar_one()

    def _insert_initial_row(self, empresa_id: int) -> bool:
        """INSERT protegido por la llave primaria; False si la fila ya existía"""
        values = {"empresa_id": empresa_id, "ultimo_folio": 1}
        dialect = self.db.get_bind().dialect.name

        if dialect == "postgresql":
            stmt = pg_insert(ControlFolio).values(**values).on_conflict_do_nothing(
                index_elements=["empresa_id"]
            )
        elif dialect == "sqlite":
            stmt = sqlite_insert(ControlFolio).values(**values).on_conflict_do_nothing(
                index_elements=["empresa_id"]
            )
        else:
            stmt = insert(ControlFolio).values(**values)

        result = self.db.execute(stmt)
        return result.rowcount == 1


class SalesRepository:
    """
    Repositorio para las operaciones de datos de ventas
    """

    def __init__(self, db: Session):
        self.db = db
        self.folios = FolioRepository(db)

    # ==================== CLIENTES Y VENDEDORES ====================

    def get_cliente(self, empresa_id: int, cliente_id: int) -> Optional[Cliente]:
        return self.db.query(Cliente).filter(
            Cliente.id == cliente_id,
            Cliente.empresa_id == empresa_id
        ).first()

    def get_cliente_por_nombre(self, empresa_id: int, nombre: str) -> Optional[Cliente]:
        return self.db.query(Cliente).filter(
            Cliente.empresa_id == empresa_id,
            func.lower(Cliente.nombre) == nombre.lower()
        ).first()

    def get_vendedor(self, empresa_id: int, vendedor_id: int) -> Optional[Vendedor]:
        return self.db.query(Vendedor).filter(
            Vendedor.id == vendedor_id,
            Vendedor.empresa_id == empresa_id
        ).first()

    def get_vendedor_por_nombre(self, empresa_id: int, nombre: str) -> Optional[Vendedor]:
        return self.db.query(Vendedor).filter(
            Vendedor.empresa_id == empresa_id,
            func.lower(Vendedor.nombre) == nombre.lower()
        ).first()

    # ==================== PRODUCTOS ====================

    def get_producto(self, empresa_id: int, producto_id: int) -> Optional[Producto]:
        """Producto de la empresa; los de otras empresas no existen para ella"""
        return self.db.query(Producto).filter(
            Producto.id == producto_id,
            Producto.empresa_id == empresa_id
        ).first()

    def decrease_product_stock(self, empresa_id: int, producto_id: int, cantidad: int) -> Optional[int]:
        """
        Descontar stock con un UPDATE condicional (stock = stock - cantidad
        sólo si alcanza). Devuelve el nuevo stock, o None si no alcanzó.
        """
        result = self.db.execute(
            update(Producto)
            .where(
                Producto.id == producto_id,
                Producto.empresa_id == empresa_id,
                Producto.stock >= cantidad
            )
            .values(stock=Producto.stock - cantidad)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return None

        return self.db.execute(
            select(Producto.stock).where(Producto.id == producto_id)
        ).scalar_one()

    # ==================== VENTAS ====================

    def create_venta(
        self,
        empresa_id: int,
        folio: int,
        subtotal: Decimal,
        impuesto: Decimal,
        total: Decimal,
        es_factura: bool,
        cliente_id: Optional[int],
        vendedor_id: Optional[int],
        usuario_id: Optional[int]
    ) -> Venta:
        venta = Venta(
            empresa_id=empresa_id,
            folio=folio,
            subtotal=subtotal,
            impuesto=impuesto,
            descuento=Decimal("0"),
            total=total,
            es_factura=es_factura,
            cliente_id=cliente_id,
            vendedor_id=vendedor_id,
            usuario_id=usuario_id
        )
        self.db.add(venta)
        self.db.flush()  # Obtener ID sin hacer commit aún
        return venta

    def create_detalle(
        self,
        venta_id: int,
        producto_id: int,
        cantidad: int,
        precio_unitario: Decimal
    ) -> DetalleVenta:
        detalle = DetalleVenta(
            venta_id=venta_id,
            producto_id=producto_id,
            cantidad=cantidad,
            precio_unitario=precio_unitario,
            subtotal=cantidad * precio_unitario
        )
        self.db.add(detalle)
        return detalle

    def create_pago(self, venta_id: int, metodo: str, monto: Decimal) -> PagoVenta:
        pago = PagoVenta(
            venta_id=venta_id,
            metodo_pago=metodo,
            monto=monto
        )
        self.db.add(pago)
        return pago

    def create_salida(
        self,
        empresa_id: int,
        producto_id: int,
        cantidad: int,
        nuevo_stock: int,
        usuario_id: Optional[int],
        folio: int
    ) -> MovimientoInventario:
        movimiento = MovimientoInventario(
            empresa_id=empresa_id,
            producto_id=producto_id,
            tipo="SALIDA",
            cantidad=-cantidad,
            nuevo_stock=nuevo_stock,
            usuario_id=usuario_id,
            referencia=f"Venta folio {folio}",
            motivo="Venta"
        )
        self.db.add(movimiento)
        return movimiento

    def get_venta_por_folio(self, empresa_id: int, folio: int) -> Optional[Venta]:
        return self.db.query(Venta).filter(
            Venta.empresa_id == empresa_id,
            Venta.folio == folio
        ).first()
