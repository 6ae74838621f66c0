# app/modules/inventory/schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum

class TipoMovimiento(str, Enum):
    """Filtro de tipo de movimiento"""
    ENTRADA = "ENTRADA"
    SALIDA = "SALIDA"
    TODOS = "TODOS"

# ==================== ENTRADAS ====================

class EntradaProductoRequest(BaseModel):
    producto_id: int = Field(..., gt=0, description="ID del producto")
    cantidad: int = Field(..., gt=0, description="Unidades que ingresan")

class EntradaInventarioRequest(BaseModel):
    productos: List[EntradaProductoRequest] = Field(..., min_length=1, description="Productos recibidos")
    referencia: Optional[str] = Field(None, max_length=255, description="Factura, remisión, etc.")
    motivo: Optional[str] = Field(None, description="Motivo de la entrada")

class EntradaInventarioResponse(BaseModel):
    success: bool
    message: str
    productos_actualizados: int

# ==================== HISTORIAL ====================

class MovimientoResponse(BaseModel):
    fecha: datetime
    producto: str
    clave: str
    tipo: str
    cantidad: int
    nuevo_stock: int
    usuario: Optional[str] = None
    referencia: Optional[str] = None
    motivo: Optional[str] = None

class MovimientosResponse(BaseModel):
    success: bool
    movimientos: List[MovimientoResponse]
