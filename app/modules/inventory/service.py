# app/modules/inventory/service.py
import logging
from datetime import date
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth.dependencies import require_tenant
from app.core.auth.schemas import IdentityContext
from app.core.exceptions import AppError, InternalError, NotFoundError, ValidationError
from .repository import InventoryRepository
from .schemas import EntradaInventarioRequest, TipoMovimiento

logger = logging.getLogger(__name__)

class InventoryService:
    """Entradas de mercancía e historial de movimientos de inventario"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = InventoryRepository(db)

    def registrar_entrada(
        self,
        identity: IdentityContext,
        entrada: EntradaInventarioRequest
    ) -> Dict[str, Any]:
        """
        Sumar stock a cada producto y registrar un movimiento ENTRADA por línea.
        Si algún producto no pertenece a la empresa no se aplica ninguna línea.
        """
        empresa_id = require_tenant(identity)

        try:
            for linea in entrada.productos:
                nuevo_stock = self.repository.increase_product_stock(
                    empresa_id, linea.producto_id, linea.cantidad
                )
                if nuevo_stock is None:
                    raise NotFoundError(f"Producto ID {linea.producto_id} no encontrado.")

                self.repository.create_entrada(
                    empresa_id=empresa_id,
                    producto_id=linea.producto_id,
                    cantidad=linea.cantidad,
                    nuevo_stock=nuevo_stock,
                    usuario_id=identity.user_id,
                    referencia=entrada.referencia,
                    motivo=entrada.motivo
                )

            self.db.commit()

        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Error registrando entrada de inventario (empresa {empresa_id})")
            raise InternalError("Error en la transacción. La entrada no fue registrada.")

        logger.info(f"📦 Entrada de inventario - empresa {empresa_id}, {len(entrada.productos)} productos")

        return {
            "success": True,
            "message": "Entrada de inventario registrada exitosamente.",
            "productos_actualizados": len(entrada.productos)
        }

    def listar_movimientos(
        self,
        identity: IdentityContext,
        tipo: TipoMovimiento = TipoMovimiento.TODOS,
        inicio: Optional[date] = None,
        fin: Optional[date] = None
    ) -> Dict[str, Any]:
        empresa_id = require_tenant(identity)
        if inicio and fin and inicio > fin:
            raise ValidationError("La fecha de inicio no puede ser posterior a la fecha de fin.")

        movimientos = self.repository.get_movimientos(
            empresa_id,
            tipo=None if tipo == TipoMovimiento.TODOS else tipo.value,
            inicio=inicio,
            fin=fin
        )

        return {
            "success": True,
            "movimientos": [
                {
                    "fecha": m.fecha,
                    "producto": m.producto.descripcion,
                    "clave": m.producto.clave,
                    "tipo": m.tipo,
                    "cantidad": m.cantidad,
                    "nuevo_stock": m.nuevo_stock,
                    "usuario": m.usuario.nombre if m.usuario else None,
                    "referencia": m.referencia,
                    "motivo": m.motivo
                }
                for m in movimientos
            ]
        }
