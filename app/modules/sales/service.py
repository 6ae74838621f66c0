# app/modules/sales/service.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.auth.schemas import IdentityContext
from app.core.exceptions import (
    AppError, BusinessRuleError, InsufficientPaymentError,
    InsufficientStockError, InternalError, ValidationError
)
from app.shared.database.models import Producto
from .repository import SalesRepository
from .schemas import VentaCreateRequest, DetalleVentaRequest

logger = logging.getLogger(__name__)

CENTAVOS = Decimal("0.01")

def _money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTAVOS, rounding=ROUND_HALF_UP)

class SalesService:
    """
    Registro de ventas: folio, validación de stock y precios, conciliación
    de pagos y descuento de inventario en una sola transacción
    """

    # El cálculo de impuestos no está implementado; el total se mantiene
    # como subtotal + impuesto para cuando exista.
    IMPUESTO = Decimal("0")

    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)

    def registrar_venta(
        self,
        identity: IdentityContext,
        venta_data: VentaCreateRequest
    ) -> Dict[str, Any]:
        """
        Registrar una venta completa. Devuelve el folio asignado y el cambio.

        Cualquier error revierte la transacción completa, incluido el avance
        del folio. Reenviar la misma solicitud genera otra venta con un folio
        nuevo: la operación no es idempotente.
        """
        empresa_id = identity.empresa_id
        if not empresa_id or not venta_data.detalles or not venta_data.pagos:
            raise ValidationError(
                "Datos incompletos o inválidos (Empresa, Detalles o Pagos faltantes)."
            )

        try:
            cliente_id, vendedor_id = self._resolver_cliente_vendedor(empresa_id, venta_data)

            # 1. Folio (bloquea la fila de control de la empresa)
            folio = self.repository.folios.allocate_next_folio(empresa_id)

            # 2. Validar stock y precios en el orden recibido
            lineas = self._validar_lineas(empresa_id, venta_data.detalles)
            subtotal = _money(sum((cantidad * precio for _, cantidad, precio in lineas), Decimal("0")))

            # 3. Total
            impuesto = self.IMPUESTO
            total = subtotal + impuesto

            # 4. Conciliar pagos
            total_pagado = _money(sum((p.monto for p in venta_data.pagos), Decimal("0")))
            if total_pagado < total:
                raise InsufficientPaymentError(total_pagado, total)

            # 5. Cambio
            cambio = total_pagado - total

            # 6. Encabezado
            venta = self.repository.create_venta(
                empresa_id=empresa_id,
                folio=folio,
                subtotal=subtotal,
                impuesto=impuesto,
                total=total,
                es_factura=venta_data.es_factura,
                cliente_id=cliente_id,
                vendedor_id=vendedor_id,
                usuario_id=identity.user_id
            )

            # 7. Detalles y descuento de stock
            for producto, cantidad, precio in lineas:
                self.repository.create_detalle(venta.id, producto.id, cantidad, precio)

                nuevo_stock = self.repository.decrease_product_stock(empresa_id, producto.id, cantidad)
                if nuevo_stock is None:
                    # Otra venta consumió el stock después de la validación
                    raise InsufficientStockError(producto.id, self._stock_actual(producto), cantidad)

                self.repository.create_salida(
                    empresa_id, producto.id, cantidad, nuevo_stock, identity.user_id, folio
                )

            # 8. Pagos
            for pago in venta_data.pagos:
                self.repository.create_pago(venta.id, pago.metodo.value, pago.monto)

            # 9. Commit
            self.db.commit()

        except AppError as e:
            self.db.rollback()
            logger.info(f"↩️ Venta revertida (empresa {empresa_id}): {e.message}")
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Error de base de datos registrando venta (empresa {empresa_id})")
            raise InternalError("Error en la transacción. La venta no fue registrada.")
        except Exception:
            self.db.rollback()
            logger.exception(f"❌ Error inesperado registrando venta (empresa {empresa_id})")
            raise InternalError("Error en la transacción. La venta no fue registrada.")

        logger.info(
            f"✅ Venta registrada - empresa {empresa_id}, folio {folio}, "
            f"total {total:.2f}, cambio {cambio:.2f}"
        )

        return {
            "success": True,
            "message": "Venta y pago registrados exitosamente.",
            "folio": folio,
            "cambio": f"{cambio:.2f}"
        }

    def _resolver_cliente_vendedor(
        self,
        empresa_id: int,
        venta_data: VentaCreateRequest
    ) -> Tuple[Optional[int], Optional[int]]:
        """Cliente y vendedor de la venta; sin ids se usan los registros por defecto"""
        if venta_data.cliente_id is not None:
            cliente = self.repository.get_cliente(empresa_id, venta_data.cliente_id)
            if not cliente:
                raise BusinessRuleError(f"Cliente ID {venta_data.cliente_id} no encontrado.")
        else:
            cliente = self.repository.get_cliente_por_nombre(empresa_id, settings.default_cliente_nombre)

        if venta_data.vendedor_id is not None:
            vendedor = self.repository.get_vendedor(empresa_id, venta_data.vendedor_id)
            if not vendedor:
                raise BusinessRuleError(f"Vendedor ID {venta_data.vendedor_id} no encontrado.")
        else:
            vendedor = self.repository.get_vendedor_por_nombre(empresa_id, settings.default_vendedor_nombre)

        return (
            cliente.id if cliente else None,
            vendedor.id if vendedor else None
        )

    def _validar_lineas(
        self,
        empresa_id: int,
        detalles: List[DetalleVentaRequest]
    ) -> List[Tuple[Producto, int, Decimal]]:
        """Validar existencia y stock de cada línea; fija el precio unitario"""
        lineas = []
        for detalle in detalles:
            producto = self.repository.get_producto(empresa_id, detalle.producto_id)
            if not producto:
                raise BusinessRuleError(f"Producto ID {detalle.producto_id} no encontrado.")

            if producto.stock < detalle.cantidad:
                raise InsufficientStockError(producto.id, producto.stock, detalle.cantidad)

            precio = detalle.precio_unitario
            if precio is None:
                precio = producto.precio
            lineas.append((producto, detalle.cantidad, _money(precio)))

        return lineas

    def _stock_actual(self, producto: Producto) -> int:
        self.db.refresh(producto, attribute_names=["stock"])
        return producto.stock
