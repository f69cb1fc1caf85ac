from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base

# ===== TABLAS BASE =====

class Zone(Base):
    """Zona de reparto/cobranza"""
    __tablename__ = "zonas"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(120), nullable=False)

    # Relationships
    clientes = relationship("Client", back_populates="zona")

class Branch(Base):
    """Sucursal"""
    __tablename__ = "sucursales"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(120), nullable=False)
    direccion = Column(String(255))
    activo = Column(Boolean, default=True)

    # Relationships
    ventas = relationship("Sale", back_populates="sucursal")

class User(Base):
    """Usuario del sistema (admin, vendedor, caja)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(255), nullable=False)
    correo = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    rol = Column(String(20), default='vendedor', nullable=False)
    activo = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    ventas = relationship("Sale", back_populates="vendedor")

# ===== CLIENTES =====

class Client(Base):
    """Cliente"""
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    tipo_documento = Column(String(10), nullable=False)  # DNI, RUC, CE, PAS
    documento = Column(String(20), nullable=False, unique=True)
    nombre = Column(String(255), nullable=False, index=True)
    direccion = Column(String(255), nullable=False)
    telefono = Column(String(50))
    correo = Column(String(255))
    latitud = Column(String(50))
    longitud = Column(String(50))
    nestrella = Column(Integer, default=0)
    cestrella = Column(String(255), default='')
    zona_id = Column(Integer, ForeignKey("zonas.id"))
    created_at = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    zona = relationship("Zone", back_populates="clientes")
    ventas = relationship("Sale", back_populates="cliente")
    creditos = relationship("ClientCredit", back_populates="cliente")

class ClientCredit(Base):
    """Movimiento de cuenta corriente del cliente (cargo > 0, abono < 0)"""
    __tablename__ = "cliente_creditos"

    id = Column(Integer, primary_key=True, index=True)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=False, index=True)
    fecha = Column(DateTime, nullable=False)
    detalle = Column(String(255), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    tipo = Column(String(20), nullable=False)  # cargo / abono
    comprobante_id = Column(Integer, ForeignKey("comprobantes.id"))

    # Relationships
    cliente = relationship("Client", back_populates="creditos")

# ===== PRODUCTOS =====

class Product(Base):
    """Producto"""
    __tablename__ = "productos"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(255), nullable=False)
    descripcion = Column(Text)
    categoria = Column(String(120), index=True)
    precio = Column(Numeric(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    unidad_medida = Column(String(20), default='NIU')
    activo = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

# ===== VENTAS =====

class Sale(Base):
    """Venta"""
    __tablename__ = "ventas"

    id = Column(Integer, primary_key=True, index=True)
    numero_venta = Column(String(30), unique=True)
    id_usuario = Column(Integer, ForeignKey("users.id"), nullable=False)
    id_cliente = Column(Integer, ForeignKey("clientes.id"), nullable=False)
    sucursal_id = Column(Integer, ForeignKey("sucursales.id"))
    tipo_comprobante = Column(String(20), default='boleta', nullable=False)
    estado = Column(String(20), default='pendiente', nullable=False)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    op_gravada = Column(Numeric(12, 2), nullable=False, default=0)
    igv = Column(Numeric(12, 2), nullable=False, default=0)
    fecha = Column(DateTime, server_default=func.current_timestamp(), index=True)

    # Relationships
    vendedor = relationship("User", back_populates="ventas")
    cliente = relationship("Client", back_populates="ventas")
    sucursal = relationship("Branch", back_populates="ventas")
    detalles = relationship("SaleDetail", back_populates="venta", order_by="SaleDetail.id")
    pagos = relationship("Payment", back_populates="venta")
    comprobante = relationship("Invoice", back_populates="venta", uselist=False)

class SaleDetail(Base):
    """Línea de venta"""
    __tablename__ = "detalle_venta"

    id = Column(Integer, primary_key=True, index=True)
    id_venta = Column(Integer, ForeignKey("ventas.id"), nullable=False, index=True)
    id_producto = Column(Integer, ForeignKey("productos.id"), nullable=False)
    cantidad = Column(Integer, nullable=False)
    precio_unitario = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    # Relationships
    venta = relationship("Sale", back_populates="detalles")
    producto = relationship("Product")

class Payment(Base):
    """Pago de una venta"""
    __tablename__ = "pagos"

    id = Column(Integer, primary_key=True, index=True)
    id_venta = Column(Integer, ForeignKey("ventas.id"), nullable=False, index=True)
    tipo_comprobante = Column(String(20), nullable=False)
    metodo_pago = Column(String(30), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    igv = Column(Numeric(12, 2), nullable=False, default=0)
    pagado_en = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    venta = relationship("Sale", back_populates="pagos")

# ===== COMPROBANTES =====

class InvoiceSeries(Base):
    """Serie de comprobantes habilitada (F001, B001, ...)"""
    __tablename__ = "comprobante_series"

    id = Column(Integer, primary_key=True, index=True)
    listado = Column(String(120), nullable=False)  # etiqueta visible
    ctipdocu = Column(String(2), nullable=False)  # 01 factura, 03 boleta
    cserdocu = Column(String(4), nullable=False)
    correlativo = Column(Integer, nullable=False, default=0)
    activo = Column(Boolean, default=True)

    __table_args__ = (
        UniqueConstraint('ctipdocu', 'cserdocu', name='comprobante_series_unique'),
    )

    @property
    def ccoddocu(self):
        return f"{self.ctipdocu}-{self.cserdocu}"

class Invoice(Base):
    """Comprobante emitido (cabecera)"""
    __tablename__ = "comprobantes"

    id = Column(Integer, primary_key=True, index=True)
    id_venta = Column(Integer, ForeignKey("ventas.id"), nullable=False, unique=True)
    ctipdocu = Column(String(2), nullable=False)
    cserdocu = Column(String(4), nullable=False)
    cnumdocu = Column(String(8), nullable=False)
    fecha_emision = Column(DateTime, server_default=func.current_timestamp())
    op_gravada = Column(Numeric(12, 2), nullable=False)
    igv = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    cliente_tipo_documento = Column(String(10))
    cliente_documento = Column(String(20))
    cliente_nombre = Column(String(255))
    cliente_direccion = Column(String(255))
    hash = Column(String(64))

    __table_args__ = (
        UniqueConstraint('ctipdocu', 'cserdocu', 'cnumdocu', name='comprobantes_unique_numero'),
    )

    # Relationships
    venta = relationship("Sale", back_populates="comprobante")
