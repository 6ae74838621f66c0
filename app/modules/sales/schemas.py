from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from enum import Enum

# ==================== ENUMS ====================

class MetodoPago(str, Enum):
    efectivo = "efectivo"
    tarjeta = "tarjeta"
    transferencia = "transferencia"
    deposito = "deposito"
    credito = "credito"

# ==================== REQUEST SCHEMAS ====================

class DetalleVentaRequest(BaseModel):
    producto_id: int = Field(..., gt=0, description="ID del producto")
    cantidad: int = Field(..., gt=0, description="Cantidad")
    precio_unitario: Optional[Decimal] = Field(
        None, ge=0, decimal_places=2,
        description="Precio unitario; si se omite se usa el precio actual del producto"
    )

class PagoRequest(BaseModel):
    metodo: MetodoPago = Field(..., description="Método de pago")
    monto: Decimal = Field(..., gt=0, decimal_places=2, description="Monto pagado con este método")

class VentaCreateRequest(BaseModel):
    cliente_id: Optional[int] = Field(None, description="Cliente; por defecto 'público general'")
    vendedor_id: Optional[int] = Field(None, description="Vendedor; por defecto 'administrador'")
    es_factura: bool = Field(False, description="Si la venta se factura")
    detalles: List[DetalleVentaRequest] = Field(default_factory=list, description="Productos vendidos")
    pagos: List[PagoRequest] = Field(default_factory=list, description="Pagos recibidos")

# ==================== RESPONSE SCHEMAS ====================

class VentaCreadaResponse(BaseModel):
    success: bool = True
    message: str
    folio: int
    cambio: str
