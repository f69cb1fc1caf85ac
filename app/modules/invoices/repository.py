# app/modules/invoices/repository.py
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from app.shared.database.models import (
    Invoice, InvoiceSeries, Sale, SaleDetail
)

class InvoicesRepository:
    """
    Series y comprobantes. La emisión solo hace flush: la transacción
    pertenece al registro del pago.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_series(self) -> List[InvoiceSeries]:
        return self.db.query(InvoiceSeries).filter(
            InvoiceSeries.activo == True
        ).order_by(InvoiceSeries.ctipdocu, InvoiceSeries.cserdocu).all()

    def lock_series(self, type_code: str) -> Optional[InvoiceSeries]:
        """Primera serie activa del tipo, bloqueada hasta el commit"""
        return self.db.query(InvoiceSeries).filter(
            InvoiceSeries.ctipdocu == type_code,
            InvoiceSeries.activo == True
        ).order_by(InvoiceSeries.id).with_for_update().first()

    def create_invoice(self, **fields) -> Invoice:
        invoice = Invoice(**fields)
        self.db.add(invoice)
        self.db.flush()
        return invoice

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return self.db.query(Invoice).options(
            joinedload(Invoice.venta).joinedload(Sale.detalles).joinedload(SaleDetail.producto)
        ).filter(Invoice.id == invoice_id).first()

    def get_sale(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).options(
            joinedload(Sale.cliente),
            joinedload(Sale.comprobante),
            joinedload(Sale.detalles).joinedload(SaleDetail.producto)
        ).filter(Sale.id == sale_id).first()
