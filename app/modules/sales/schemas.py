from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

# ==================== ENUMS ====================

class SaleStatus(str, Enum):
    pendiente = "pendiente"
    aprobado = "aprobado"
    cancelado = "cancelado"

class InvoiceKind(str, Enum):
    boleta = "boleta"
    factura = "factura"

# ==================== REQUEST SCHEMAS ====================

class SaleLineRequest(BaseModel):
    id_producto: int = Field(..., description="ID del producto")
    cantidad: int = Field(..., gt=0, description="Cantidad")
    precio_unitario: Optional[Decimal] = Field(
        None, gt=0, max_digits=10, decimal_places=2,
        description="Precio unitario con IGV; si se omite se usa el precio de lista"
    )

class SaleCreateRequest(BaseModel):
    id_cliente: int = Field(..., description="ID del cliente")
    sucursal_id: Optional[int] = Field(None, description="Sucursal donde se registra")
    tipo_comprobante: InvoiceKind = Field(InvoiceKind.boleta, description="Comprobante a emitir")
    productos: List[SaleLineRequest] = Field(default_factory=list, description="Líneas de la venta")

class SaleStatusUpdate(BaseModel):
    estado: str = Field(..., description="Nuevo estado: aprobado o cancelado")

class SendInvoiceRequest(BaseModel):
    correo: Optional[str] = Field(None, description="Correo alternativo del destinatario")

# ==================== RESPONSE SCHEMAS ====================

class SaleCreatedResponse(BaseModel):
    message: str
    id: int
    numero_venta: str
    total: float
    op_gravada: float
    igv: float

class SaleSummary(BaseModel):
    id: int
    numero_venta: str
    fecha: datetime
    estado: str
    cliente_nombre: str
    cliente_telefono: Optional[str]
    total: float

class SaleByBranch(BaseModel):
    id: int
    numero_venta: str
    fecha: datetime
    estado: str
    vendedor: str

class SaleLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    id_producto: int
    producto: str
    cantidad: int
    precio_unitario: float
    subtotal: float

class SaleResponse(BaseModel):
    id: int
    numero_venta: str
    fecha: datetime
    estado: str
    tipo_comprobante: str
    id_cliente: int
    id_usuario: int
    sucursal_id: Optional[int]
    total: float
    op_gravada: float
    igv: float
    detalles: List[SaleLineResponse]
    comprobante_id: Optional[int]
