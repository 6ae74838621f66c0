from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Numeric,
    UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base

class TimestampMixin:
    """Mixin para timestamps automáticos"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

# ===== TENANTS Y USUARIOS =====

class Empresa(Base):
    """Empresa (tenant). Al eliminarla se eliminan todos sus registros"""
    __tablename__ = "empresas"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(100), unique=True, nullable=False, index=True)
    nombre_empresa = Column(String(255), nullable=False)
    activo = Column(Boolean, default=True, nullable=False)
    fecha_registro = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    # Relationships
    usuarios = relationship("Usuario", back_populates="empresa", passive_deletes=True)

class Usuario(Base):
    """Identidad de acceso. empresa_id es NULL sólo para el super_admin global"""
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=True, index=True)
    nombre = Column(String(255), nullable=False)
    correo_electronico = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    rol = Column(String(50), default="usuario", nullable=False)
    necesita_cambio_pw = Column(Boolean, default=False, nullable=False)
    fecha_registro = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    # Relationships
    empresa = relationship("Empresa", back_populates="usuarios")

class ControlFolio(Base):
    """Último folio emitido por empresa"""
    __tablename__ = "control_folios"

    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), primary_key=True)
    ultimo_folio = Column(Integer, nullable=False, default=0)

# ===== CATÁLOGOS =====

class Categoria(Base, TimestampMixin):
    __tablename__ = "categorias"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    nombre = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("empresa_id", "nombre", name="uq_categorias_empresa_nombre"),
    )

class Clasificacion(Base, TimestampMixin):
    __tablename__ = "clasificaciones"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    descripcion = Column(Text)

    __table_args__ = (
        UniqueConstraint("empresa_id", "nombre", name="uq_clasificaciones_empresa_nombre"),
    )

class Proveedor(Base, TimestampMixin):
    __tablename__ = "proveedores"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    telefono = Column(String(50))
    correo_contacto = Column(String(255))

    __table_args__ = (
        UniqueConstraint("empresa_id", "nombre", name="uq_proveedores_empresa_nombre"),
    )

class Cliente(Base, TimestampMixin):
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    nombre = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("empresa_id", "nombre", name="uq_clientes_empresa_nombre"),
    )

class Vendedor(Base, TimestampMixin):
    __tablename__ = "vendedores"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    nombre = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("empresa_id", "nombre", name="uq_vendedores_empresa_nombre"),
    )

# ===== PRODUCTOS =====

class Producto(Base, TimestampMixin):
    """Producto de una empresa; el stock nunca puede quedar negativo"""
    __tablename__ = "productos"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    clave = Column(String(100), nullable=False)
    descripcion = Column(String(255), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    costo = Column(Numeric(10, 2), nullable=False, default=0)
    precio = Column(Numeric(10, 2), nullable=False, default=0)
    clasificacion_id = Column(Integer, ForeignKey("clasificaciones.id"), nullable=False)
    proveedor_id = Column(Integer, ForeignKey("proveedores.id"), nullable=False)
    categoria_id = Column(Integer, ForeignKey("categorias.id"), nullable=True)

    __table_args__ = (
        UniqueConstraint("empresa_id", "clave", name="uq_productos_empresa_clave"),
        CheckConstraint("stock >= 0", name="ck_productos_stock_no_negativo"),
    )

    # Relationships
    clasificacion = relationship("Clasificacion")
    proveedor = relationship("Proveedor")
    categoria = relationship("Categoria")

    @property
    def clasificacion_nombre(self):
        return self.clasificacion.nombre if self.clasificacion else None

    @property
    def proveedor_nombre(self):
        return self.proveedor.nombre if self.proveedor else None

    @property
    def categoria_nombre(self):
        return self.categoria.nombre if self.categoria else None

class MovimientoInventario(Base):
    """Historial de entradas (cantidad positiva) y salidas por venta (negativa)"""
    __tablename__ = "movimientos_inventario"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    producto_id = Column(Integer, ForeignKey("productos.id", ondelete="CASCADE"), nullable=False, index=True)
    tipo = Column(String(20), nullable=False)
    cantidad = Column(Integer, nullable=False)
    nuevo_stock = Column(Integer, nullable=False)
    usuario_id = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)
    referencia = Column(String(255))
    motivo = Column(Text)
    fecha = Column(DateTime, server_default=func.current_timestamp(), nullable=False, index=True)

    # Relationships
    producto = relationship("Producto")
    usuario = relationship("Usuario")

# ===== VENTAS =====

class Venta(Base):
    """Encabezado de venta; inmutable una vez confirmada"""
    __tablename__ = "ventas"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False, index=True)
    folio = Column(Integer, nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    impuesto = Column(Numeric(12, 2), nullable=False, default=0)
    descuento = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    es_factura = Column(Boolean, default=False, nullable=False)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=True)
    vendedor_id = Column(Integer, ForeignKey("vendedores.id"), nullable=True)
    usuario_id = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)
    fecha_venta = Column(DateTime, server_default=func.current_timestamp(), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("empresa_id", "folio", name="uq_ventas_empresa_folio"),
    )

    # Relationships
    cliente = relationship("Cliente")
    vendedor = relationship("Vendedor")
    detalles = relationship("DetalleVenta", back_populates="venta", order_by="DetalleVenta.id")
    pagos = relationship("PagoVenta", back_populates="venta", order_by="PagoVenta.id")

class DetalleVenta(Base):
    __tablename__ = "detalle_venta"

    id = Column(Integer, primary_key=True, index=True)
    venta_id = Column(Integer, ForeignKey("ventas.id", ondelete="CASCADE"), nullable=False, index=True)
    producto_id = Column(Integer, ForeignKey("productos.id"), nullable=False, index=True)
    cantidad = Column(Integer, nullable=False)
    precio_unitario = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    # Relationships
    venta = relationship("Venta", back_populates="detalles")
    producto = relationship("Producto")

class PagoVenta(Base):
    __tablename__ = "pagos_venta"

    id = Column(Integer, primary_key=True, index=True)
    venta_id = Column(Integer, ForeignKey("ventas.id", ondelete="CASCADE"), nullable=False, index=True)
    metodo_pago = Column(String(50), nullable=False)
    monto = Column(Numeric(12, 2), nullable=False)

    # Relationships
    venta = relationship("Venta", back_populates="pagos")
