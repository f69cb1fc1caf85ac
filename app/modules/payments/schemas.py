# app/modules/payments/schemas.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from app.modules.sales.schemas import InvoiceKind
from app.modules.invoices.schemas import IssuedInvoice

class PaymentMethod(str, Enum):
    efectivo = "efectivo"
    tarjeta = "tarjeta"
    transferencia = "transferencia"
    yape = "yape"
    plin = "plin"
    credito = "credito"

class PaymentCreateRequest(BaseModel):
    id_venta: int = Field(..., gt=0, description="ID de la venta a cobrar")
    tipo_comprobante: InvoiceKind = Field(..., description="boleta o factura")
    metodo_pago: PaymentMethod = Field(..., description="Medio de pago")

class PaymentCreatedResponse(BaseModel):
    message: str
    id: int
    total: float
    igv: float
    comprobante: IssuedInvoice

class PaymentResponse(BaseModel):
    id: int
    id_venta: int
    tipo_comprobante: str
    metodo_pago: str
    total: float
    igv: float
    pagado_en: Optional[datetime]
    numero_venta: Optional[str]
    estado: str
    cliente: str
    vendedor: str
