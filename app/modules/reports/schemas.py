# app/modules/reports/schemas.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

# ==================== REPORTE DE VENTAS ====================

class DetalleReporte(BaseModel):
    cantidad: int
    descripcion: str
    precio_unitario: float
    subtotal: float

class PagoReporte(BaseModel):
    metodo: str
    monto: float

class VentaReporte(BaseModel):
    folio: int
    fecha_venta: datetime
    cliente: Optional[str] = None
    vendedor: Optional[str] = None
    subtotal: float
    impuesto: float
    total: float
    es_factura: bool
    detalles: List[DetalleReporte]
    pagos: List[PagoReporte]

class ReporteVentasResponse(BaseModel):
    success: bool
    ventas: List[VentaReporte]
    total_acumulado: float

# ==================== PRODUCTOS VENDIDOS ====================

class ProductoVendido(BaseModel):
    fecha_venta: datetime
    folio: int
    clave: str
    descripcion: str
    cantidad: int
    precio_unitario: float
    venta: float
    costo: float
    ganancia: float

class ProductosVendidosResponse(BaseModel):
    success: bool
    productos: List[ProductoVendido]
