# app/modules/reports/service.py
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.core.auth.dependencies import require_tenant
from app.core.auth.schemas import IdentityContext
from app.core.exceptions import ValidationError
from .repository import ReportsRepository

class ReportsService:
    """Reportes de ventas y de productos vendidos por empresa"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = ReportsRepository(db)

    def _validar_rango(self, inicio: Optional[date], fin: Optional[date]):
        if inicio and fin and inicio > fin:
            raise ValidationError("La fecha de inicio no puede ser posterior a la fecha de fin.")

    def reporte_ventas(
        self,
        identity: IdentityContext,
        inicio: Optional[date] = None,
        fin: Optional[date] = None
    ) -> Dict[str, Any]:
        empresa_id = require_tenant(identity)
        self._validar_rango(inicio, fin)

        ventas = self.repository.get_ventas(empresa_id, inicio, fin)
        total_acumulado = sum((v.total for v in ventas), Decimal("0"))

        return {
            "success": True,
            "ventas": [
                {
                    "folio": v.folio,
                    "fecha_venta": v.fecha_venta,
                    "cliente": v.cliente.nombre if v.cliente else None,
                    "vendedor": v.vendedor.nombre if v.vendedor else None,
                    "subtotal": float(v.subtotal),
                    "impuesto": float(v.impuesto),
                    "total": float(v.total),
                    "es_factura": v.es_factura,
                    "detalles": [
                        {
                            "cantidad": d.cantidad,
                            "descripcion": d.producto.descripcion,
                            "precio_unitario": float(d.precio_unitario),
                            "subtotal": float(d.subtotal)
                        }
                        for d in v.detalles
                    ],
                    "pagos": [
                        {"metodo": p.metodo_pago, "monto": float(p.monto)}
                        for p in v.pagos
                    ]
                }
                for v in ventas
            ],
            "total_acumulado": float(total_acumulado)
        }

    def productos_vendidos(
        self,
        identity: IdentityContext,
        inicio: Optional[date] = None,
        fin: Optional[date] = None
    ) -> Dict[str, Any]:
        """Una fila por línea vendida con venta, costo y ganancia"""
        empresa_id = require_tenant(identity)
        self._validar_rango(inicio, fin)

        productos = []
        for detalle, venta, producto in self.repository.get_lineas_vendidas(empresa_id, inicio, fin):
            importe = Decimal(detalle.subtotal)
            costo = detalle.cantidad * Decimal(producto.costo)
            productos.append({
                "fecha_venta": venta.fecha_venta,
                "folio": venta.folio,
                "clave": producto.clave,
                "descripcion": producto.descripcion,
                "cantidad": detalle.cantidad,
                "precio_unitario": float(detalle.precio_unitario),
                "venta": float(importe),
                "costo": float(costo),
                "ganancia": float(importe - costo)
            })

        return {"success": True, "productos": productos}
