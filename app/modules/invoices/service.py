# app/modules/invoices/service.py
import logging
from datetime import datetime
from typing import List, Dict, Any, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.shared.database.models import Invoice, Sale
from app.shared.services.mailer import EmailService
from .repository import InvoicesRepository
from .pdf import InvoiceDocument, InvoiceLine, render_invoice_pdf
from .schemas import InvoiceSeriesResponse, InvoiceResponse, InvoiceLineResponse
from . import sunat

logger = logging.getLogger(__name__)


class InvoicesService:
    """
    Emisión de comprobantes (boleta/factura), PDF y envío por correo
    """

    def __init__(self, db: Session, mailer: Optional[EmailService] = None):
        self.db = db
        self.repository = InvoicesRepository(db)
        self.mailer = mailer or EmailService()

    # ==================== SERIES ====================

    def get_series(self) -> List[InvoiceSeriesResponse]:
        return [InvoiceSeriesResponse.model_validate(s) for s in self.repository.get_series()]

    # ==================== EMISIÓN ====================

    def issue_invoice(self, sale: Sale) -> Invoice:
        """
        Emitir el comprobante de una venta tomando el siguiente correlativo
        de la serie activa. No hace commit.
        """
        type_code = sunat.invoice_type_code(sale.tipo_comprobante)
        series = self.repository.lock_series(type_code)
        if not series:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"No hay una serie habilitada para {sale.tipo_comprobante}"
            )

        series.correlativo = (series.correlativo or 0) + 1
        number = sunat.format_number(series.correlativo)
        issued_at = datetime.now()
        client = sale.cliente

        qr = sunat.QrData(
            ruc=settings.company_ruc,
            type_code=type_code,
            series=series.cserdocu,
            number=number,
            igv=sale.igv,
            total=sale.total,
            issued_on=issued_at.date(),
            buyer_doc_type=sunat.buyer_document_code(client.tipo_documento if client else None),
            buyer_doc_number=client.documento if client else None
        )

        invoice = self.repository.create_invoice(
            id_venta=sale.id,
            ctipdocu=type_code,
            cserdocu=series.cserdocu,
            cnumdocu=number,
            fecha_emision=issued_at,
            op_gravada=sale.op_gravada,
            igv=sale.igv,
            total=sale.total,
            cliente_tipo_documento=client.tipo_documento if client else None,
            cliente_documento=client.documento if client else None,
            cliente_nombre=client.nombre if client else None,
            cliente_direccion=client.direccion if client else None,
            hash=qr.digest()
        )

        logger.info(f"Comprobante {series.cserdocu}-{number} emitido para venta {sale.numero_venta}")
        return invoice

    # ==================== CONSULTAS ====================

    def get_invoice(self, invoice_id: int) -> InvoiceResponse:
        invoice = self._get_or_404(invoice_id)
        sale = invoice.venta
        return InvoiceResponse(
            id=invoice.id,
            id_venta=invoice.id_venta,
            numero_venta=sale.numero_venta if sale else None,
            tipo=sunat.INVOICE_TYPE_LABELS.get(invoice.ctipdocu, invoice.ctipdocu),
            serie=invoice.cserdocu,
            numero=invoice.cnumdocu,
            fecha_emision=invoice.fecha_emision,
            cliente_tipo_documento=invoice.cliente_tipo_documento,
            cliente_documento=invoice.cliente_documento,
            cliente_nombre=invoice.cliente_nombre,
            cliente_direccion=invoice.cliente_direccion,
            op_gravada=float(invoice.op_gravada),
            igv=float(invoice.igv),
            total=float(invoice.total),
            hash=invoice.hash,
            qr=self._qr_data(invoice).payload(invoice.hash),
            detalles=[
                InvoiceLineResponse(
                    item=index,
                    descripcion=d.producto.nombre if d.producto else "",
                    cantidad=d.cantidad,
                    precio_unitario=float(d.precio_unitario),
                    subtotal=float(d.subtotal)
                )
                for index, d in enumerate(sale.detalles if sale else [], start=1)
            ]
        )

    def get_invoice_pdf(self, invoice_id: int) -> Tuple[str, bytes]:
        """Nombre de archivo y contenido del PDF"""
        invoice = self._get_or_404(invoice_id)
        return self.pdf_filename(invoice), self._render(invoice)

    def pdf_filename(self, invoice: Invoice) -> str:
        return f"comprobante-{invoice.cserdocu}-{invoice.cnumdocu}.pdf"

    def _get_or_404(self, invoice_id: int) -> Invoice:
        invoice = self.repository.get_invoice(invoice_id)
        if not invoice:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comprobante no encontrado")
        return invoice

    # ==================== PDF ====================

    def _qr_data(self, invoice: Invoice) -> sunat.QrData:
        return sunat.QrData(
            ruc=settings.company_ruc,
            type_code=invoice.ctipdocu,
            series=invoice.cserdocu,
            number=invoice.cnumdocu,
            igv=invoice.igv,
            total=invoice.total,
            issued_on=invoice.fecha_emision.date(),
            buyer_doc_type=sunat.buyer_document_code(invoice.cliente_tipo_documento),
            buyer_doc_number=invoice.cliente_documento
        )

    def build_document(self, invoice: Invoice) -> InvoiceDocument:
        sale = invoice.venta
        return InvoiceDocument(
            issuer_name=settings.company_name,
            issuer_ruc=settings.company_ruc,
            issuer_address=settings.company_address,
            type_label=sunat.INVOICE_TYPE_LABELS.get(invoice.ctipdocu, invoice.ctipdocu),
            series=invoice.cserdocu,
            number=invoice.cnumdocu,
            issued_at=invoice.fecha_emision,
            client_name=invoice.cliente_nombre or "",
            client_document=invoice.cliente_documento or "",
            client_address=invoice.cliente_direccion or "",
            op_gravada=invoice.op_gravada,
            igv=invoice.igv,
            total=invoice.total,
            igv_rate=settings.igv_rate,
            qr_payload=self._qr_data(invoice).payload(invoice.hash),
            lines=[
                InvoiceLine(
                    descripcion=d.producto.nombre if d.producto else "",
                    cantidad=d.cantidad,
                    precio=d.precio_unitario,
                    subtotal=d.subtotal,
                    unidad=d.producto.unidad_medida if d.producto else ""
                )
                for d in (sale.detalles if sale else [])
            ]
        )

    def _render(self, invoice: Invoice) -> bytes:
        try:
            return render_invoice_pdf(self.build_document(invoice))
        except Exception as e:
            logger.error(f"Error generando PDF del comprobante {invoice.id}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="No se pudo generar el PDF"
            )

    # ==================== CORREO ====================

    async def send_sale_invoice(self, sale_id: int, fallback_email: Optional[str] = None) -> Dict[str, Any]:
        """
        Enviar el comprobante de una venta al correo del cliente
        (o al correo indicado si el cliente no tiene uno registrado)
        """
        sale = self.repository.get_sale(sale_id)
        if not sale:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")

        if not sale.comprobante:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="La venta no tiene comprobante emitido"
            )

        recipient = (sale.cliente.correo if sale.cliente else None) or fallback_email
        if not recipient:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El cliente no tiene correo registrado"
            )

        invoice = sale.comprobante
        pdf_bytes = self._render(invoice)

        result = await self.mailer.send_email(
            to_email=recipient,
            subject=f"Comprobante de Venta N° {sale.numero_venta}",
            text_content=(
                f"Estimado(a) {invoice.cliente_nombre or 'cliente'},\n\n"
                f"Adjuntamos el comprobante {invoice.cserdocu}-{invoice.cnumdocu} "
                f"correspondiente a su compra.\n\n{settings.company_name}"
            ),
            attachments=[{
                'filename': self.pdf_filename(invoice),
                'content': pdf_bytes,
                'subtype': 'pdf'
            }]
        )

        if not result.get('success'):
            logger.error(f"No se pudo enviar comprobante de venta {sale_id}: {result.get('error')}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error al enviar el comprobante"
            )

        return {"message": "Comprobante enviado correctamente"}
