# app/modules/reports/schemas.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime

class DailyTotal(BaseModel):
    fecha: date
    cantidad: int
    total: float

class MonthlyTotal(BaseModel):
    mes: str
    cantidad: int
    total: float

class InvoiceKindTotal(BaseModel):
    tipo_comprobante: str
    cantidad: int
    total: float

class StatusCount(BaseModel):
    estado: str
    cantidad: int

class SalesSummaryReport(BaseModel):
    porDia: List[DailyTotal]
    porMes: List[MonthlyTotal]
    porComprobante: List[InvoiceKindTotal]
    porEstado: List[StatusCount]

class SaleReportRow(BaseModel):
    id: int
    numero_venta: Optional[str]
    fecha: datetime
    estado: str
    tipo_comprobante: str
    id_cliente: int
    id_usuario: int
    sucursal_id: Optional[int]
    total: float
    op_gravada: float
    igv: float

class DaySales(BaseModel):
    dia: date
    cantidad_ventas: int
    total_vendido: float

class TopProduct(BaseModel):
    producto: str
    total_vendido: int
    ingreso_total: float

class CategorySales(BaseModel):
    categoria: Optional[str]
    cantidad_total: int
    ingreso_total: float

class DailyAverage(BaseModel):
    promedio_diario: Optional[float]
    ingreso_promedio_diario: Optional[float]

class MonthlyAverage(BaseModel):
    promedio_mensual: Optional[float]
    ingreso_promedio_mensual: Optional[float]

class MonthSales(BaseModel):
    mes: str
    total_ventas: int
    total_monto: float
