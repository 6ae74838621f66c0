# app/modules/catalog/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from typing import Optional
from decimal import Decimal

# ==================== BASE ====================

class CatalogBaseModel(BaseModel):
    """Base para las respuestas de catálogos leídas desde el ORM"""
    model_config = ConfigDict(from_attributes=True)

class NombreRequest(BaseModel):
    nombre: str = Field(..., max_length=255, description="Nombre único dentro de la empresa")

    @field_validator("nombre")
    @classmethod
    def validate_nombre(cls, v: str):
        if not v or not v.strip():
            raise ValueError("El nombre es obligatorio")
        return v.strip()

# ==================== CATEGORÍAS ====================

class CategoriaRequest(NombreRequest):
    pass

class CategoriaResponse(CatalogBaseModel):
    id: int
    nombre: str
    empresa_id: int

# ==================== CLASIFICACIONES ====================

class ClasificacionRequest(NombreRequest):
    descripcion: Optional[str] = Field(None, description="Descripción opcional")

class ClasificacionResponse(CatalogBaseModel):
    id: int
    nombre: str
    descripcion: Optional[str] = None
    empresa_id: int

# ==================== PROVEEDORES ====================

class ProveedorRequest(NombreRequest):
    telefono: Optional[str] = Field(None, max_length=50)
    correo_contacto: Optional[str] = Field(None, max_length=255)

class ProveedorResponse(CatalogBaseModel):
    id: int
    nombre: str
    telefono: Optional[str] = None
    correo_contacto: Optional[str] = None
    empresa_id: int

# ==================== CLIENTES Y VENDEDORES ====================

class ClienteRequest(NombreRequest):
    pass

class ClienteResponse(CatalogBaseModel):
    id: int
    nombre: str
    empresa_id: int

class VendedorRequest(NombreRequest):
    pass

class VendedorResponse(CatalogBaseModel):
    id: int
    nombre: str
    empresa_id: int

# ==================== PRODUCTOS ====================

class ProductoRequest(BaseModel):
    clave: str = Field(..., max_length=100, description="Clave (SKU) única por empresa")
    descripcion: str = Field(..., max_length=255)
    stock: int = Field(..., ge=0, description="Existencia inicial")
    costo: Decimal = Field(..., ge=0, decimal_places=2)
    precio: Decimal = Field(..., ge=0, decimal_places=2)
    clasificacion_id: int
    proveedor_id: int
    categoria_id: Optional[int] = None

    @field_validator("clave", "descripcion")
    @classmethod
    def validate_non_empty(cls, v: str):
        if not v or not v.strip():
            raise ValueError("Este campo no puede estar vacío")
        return v.strip()

class ProductoResponse(CatalogBaseModel):
    id: int
    empresa_id: int
    clave: str
    descripcion: str
    stock: int
    costo: Decimal
    precio: Decimal
    clasificacion_id: int
    proveedor_id: int
    categoria_id: Optional[int] = None
    clasificacion_nombre: Optional[str] = None
    proveedor_nombre: Optional[str] = None
    categoria_nombre: Optional[str] = None

    # Serializador: convierte Decimal a float para la salida JSON
    @field_serializer("costo", "precio")
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)
