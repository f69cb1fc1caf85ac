# app/modules/payments/service.py
import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.shared.utils.money import split_igv
from app.modules.sales.schemas import SaleStatus
from app.modules.invoices.service import InvoicesService
from app.modules.invoices.schemas import IssuedInvoice
from .repository import PaymentsRepository
from .schemas import PaymentCreateRequest, PaymentCreatedResponse, PaymentResponse, PaymentMethod

logger = logging.getLogger(__name__)

class PaymentsService:
    """
    Cobro de ventas: registra el pago, aprueba la venta y emite el comprobante
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = PaymentsRepository(db)
        self.invoices = InvoicesService(db)

    def register_payment(self, payment_data: PaymentCreateRequest) -> PaymentCreatedResponse:
        """
        Registrar el pago de una venta en una sola transacción:
        pago + venta aprobada + comprobante con el siguiente correlativo.
        Con método 'credito' el importe se carga a la cuenta del cliente.
        """
        try:
            sale = self.repository.lock_sale(payment_data.id_venta)
            lines_total = self.repository.get_lines_total(payment_data.id_venta) if sale else None
            if not sale or not lines_total:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Venta no encontrada o sin detalle"
                )

            if sale.estado == SaleStatus.cancelado.value:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="No se puede cobrar una venta cancelada"
                )

            if self.repository.has_payment(sale.id):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="La venta ya fue pagada"
                )

            taxes = split_igv(lines_total)
            invoice_kind = payment_data.tipo_comprobante.value

            payment = self.repository.create_payment(
                sale_id=sale.id,
                invoice_kind=invoice_kind,
                method=payment_data.metodo_pago.value,
                total=taxes.total,
                igv=taxes.igv
            )

            sale.tipo_comprobante = invoice_kind
            sale.total = taxes.total
            sale.op_gravada = taxes.op_gravada
            sale.igv = taxes.igv
            sale.estado = SaleStatus.aprobado.value

            invoice = self.invoices.issue_invoice(sale)

            if payment_data.metodo_pago == PaymentMethod.credito:
                self.repository.add_credit_charge(
                    client_id=sale.id_cliente,
                    invoice_id=invoice.id,
                    detail=f"Venta {sale.numero_venta} - {invoice.cserdocu}-{invoice.cnumdocu}",
                    total=taxes.total
                )

            self.db.commit()

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error al registrar pago de venta {payment_data.id_venta}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error al registrar el pago"
            )

        logger.info(
            f"Pago {payment.id} registrado para venta {sale.numero_venta}: "
            f"{payment_data.metodo_pago.value} {taxes.total}"
        )

        return PaymentCreatedResponse(
            message="Pago registrado",
            id=payment.id,
            total=float(taxes.total),
            igv=float(taxes.igv),
            comprobante=IssuedInvoice(id=invoice.id, serie=invoice.cserdocu, numero=invoice.cnumdocu)
        )

    def get_payments(self) -> List[PaymentResponse]:
        return [self._to_response(row) for row in self.repository.get_payments()]

    def get_payment(self, payment_id: int) -> PaymentResponse:
        row = self.repository.get_payment(payment_id)
        if not row:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pago no encontrado")
        return self._to_response(row)

    def _to_response(self, row) -> PaymentResponse:
        return PaymentResponse(
            id=row.id,
            id_venta=row.id_venta,
            tipo_comprobante=row.tipo_comprobante,
            metodo_pago=row.metodo_pago,
            total=float(row.total),
            igv=float(row.igv or 0),
            pagado_en=row.pagado_en,
            numero_venta=row.numero_venta,
            estado=row.estado,
            cliente=row.cliente,
            vendedor=row.vendedor
        )
