# app/modules/payments/repository.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func, desc

from app.shared.database.models import (
    Payment, Sale, SaleDetail, Client, User, ClientCredit
)

class PaymentsRepository:
    def __init__(self, db: Session):
        self.db = db

    def lock_sale(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).filter(Sale.id == sale_id).with_for_update().first()

    def get_lines_total(self, sale_id: int) -> Optional[Decimal]:
        return self.db.query(func.sum(SaleDetail.subtotal)).filter(
            SaleDetail.id_venta == sale_id
        ).scalar()

    def has_payment(self, sale_id: int) -> bool:
        return self.db.query(Payment.id).filter(Payment.id_venta == sale_id).first() is not None

    def create_payment(
        self,
        sale_id: int,
        invoice_kind: str,
        method: str,
        total: Decimal,
        igv: Decimal
    ) -> Payment:
        payment = Payment(
            id_venta=sale_id,
            tipo_comprobante=invoice_kind,
            metodo_pago=method,
            total=total,
            igv=igv,
            pagado_en=datetime.now()
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def add_credit_charge(self, client_id: int, invoice_id: int, detail: str, total: Decimal) -> ClientCredit:
        credit = ClientCredit(
            cliente_id=client_id,
            fecha=datetime.now(),
            detalle=detail,
            total=total,
            tipo="cargo",
            comprobante_id=invoice_id
        )
        self.db.add(credit)
        self.db.flush()
        return credit

    def get_credit_charge(self, invoice_id: int) -> Optional[ClientCredit]:
        return self.db.query(ClientCredit).filter(
            ClientCredit.comprobante_id == invoice_id,
            ClientCredit.tipo == "cargo"
        ).first()

    def add_credit_reversal(self, charge: ClientCredit, detail: str) -> ClientCredit:
        """Abono que anula un cargo (mismo comprobante, importe negativo)"""
        credit = ClientCredit(
            cliente_id=charge.cliente_id,
            fecha=datetime.now(),
            detalle=detail,
            total=-charge.total,
            tipo="abono",
            comprobante_id=charge.comprobante_id
        )
        self.db.add(credit)
        self.db.flush()
        return credit

    def _detail_query(self):
        return self.db.query(
            Payment.id,
            Payment.id_venta,
            Payment.tipo_comprobante,
            Payment.metodo_pago,
            Payment.total,
            Payment.igv,
            Payment.pagado_en,
            Sale.numero_venta,
            Sale.estado,
            Client.nombre.label("cliente"),
            User.nombre.label("vendedor")
        ).join(
            Sale, Payment.id_venta == Sale.id
        ).join(
            Client, Sale.id_cliente == Client.id
        ).join(
            User, Sale.id_usuario == User.id
        )

    def get_payments(self) -> List:
        return self._detail_query().order_by(desc(Payment.pagado_en), desc(Payment.id)).all()

    def get_payment(self, payment_id: int):
        return self._detail_query().filter(Payment.id == payment_id).first()
