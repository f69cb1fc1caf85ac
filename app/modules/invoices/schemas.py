# app/modules/invoices/schemas.py
from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

class InvoiceSeriesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    listado: str
    ctipdocu: str
    cserdocu: str
    ccoddocu: str

class InvoiceLineResponse(BaseModel):
    item: int
    descripcion: str
    cantidad: int
    precio_unitario: float
    subtotal: float

class InvoiceResponse(BaseModel):
    id: int
    id_venta: int
    numero_venta: Optional[str]
    tipo: str
    serie: str
    numero: str
    fecha_emision: datetime
    cliente_tipo_documento: Optional[str]
    cliente_documento: Optional[str]
    cliente_nombre: Optional[str]
    cliente_direccion: Optional[str]
    op_gravada: float
    igv: float
    total: float
    hash: Optional[str]
    qr: str
    detalles: List[InvoiceLineResponse]

class IssuedInvoice(BaseModel):
    id: int
    serie: str
    numero: str
