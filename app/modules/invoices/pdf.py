# app/modules/invoices/pdf.py
"""
Renderizado del comprobante en PDF (A4) con reportlab.

El cálculo de páginas (`paginate`) es independiente del dibujo: decide qué
líneas van en cada página y dónde se ubica el bloque de totales + QR.
"""
import io
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from app.shared.utils.money import format_currency

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 40

FIRST_HEADER_HEIGHT = 210
CONTINUATION_HEADER_HEIGHT = 40
TABLE_HEADER_HEIGHT = 22
ROW_HEIGHT = 18
FOOTER_HEIGHT = 20
BOTTOM_LIMIT = MARGIN + FOOTER_HEIGHT
TOTALS_GAP = 10
QR_SIZE = 90
TOTALS_HEIGHT = QR_SIZE + 20

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

# Columnas: (x, ancho, alineación)
COLUMNS = {
    "item": (MARGIN, 40, "left"),
    "desc": (MARGIN + 50, 250, "left"),
    "cant": (MARGIN + 310, 50, "right"),
    "precio": (MARGIN + 370, 70, "right"),
    "sub": (MARGIN + 445, 70, "right"),
}


@dataclass
class InvoiceLine:
    descripcion: str
    cantidad: int
    precio: Decimal
    subtotal: Decimal
    unidad: str = ""


@dataclass
class InvoiceDocument:
    issuer_name: str
    issuer_ruc: str
    issuer_address: str
    type_label: str
    series: str
    number: str
    issued_at: datetime
    client_name: str
    client_document: str
    client_address: str
    op_gravada: Decimal
    igv: Decimal
    total: Decimal
    igv_rate: float
    qr_payload: str
    lines: List[InvoiceLine] = field(default_factory=list)


@dataclass
class PageLayout:
    number: int
    first_row: int
    last_row: int
    table_top: float
    totals_top: Optional[float] = None

    @property
    def has_table(self) -> bool:
        return self.last_row > self.first_row or self.number == 1


def rows_that_fit(table_top: float) -> int:
    available = table_top - TABLE_HEADER_HEIGHT - BOTTOM_LIMIT
    return max(1, int(available // ROW_HEIGHT))


def paginate(row_count: int, page_height: float = PAGE_HEIGHT) -> List[PageLayout]:
    """
    Distribuir `row_count` líneas en páginas.

    La primera página reserva espacio para la cabecera completa y las
    siguientes solo para una cabecera reducida. Los totales van debajo de
    la última línea; si no caben, se crea una página adicional solo para
    ellos.
    """
    pages: List[PageLayout] = []
    table_top = page_height - MARGIN - FIRST_HEADER_HEIGHT
    row = 0

    while True:
        end = min(row_count, row + rows_that_fit(table_top))
        page = PageLayout(number=len(pages) + 1, first_row=row, last_row=end, table_top=table_top)
        pages.append(page)
        row = end
        if row >= row_count:
            break
        table_top = page_height - MARGIN - CONTINUATION_HEADER_HEIGHT

    last = pages[-1]
    table_bottom = last.table_top - TABLE_HEADER_HEIGHT - (last.last_row - last.first_row) * ROW_HEIGHT
    totals_top = table_bottom - TOTALS_GAP
    if totals_top - TOTALS_HEIGHT >= BOTTOM_LIMIT:
        last.totals_top = totals_top
    else:
        top = page_height - MARGIN - CONTINUATION_HEADER_HEIGHT
        pages.append(PageLayout(
            number=len(pages) + 1,
            first_row=row_count,
            last_row=row_count,
            table_top=top,
            totals_top=top
        ))

    return pages


def fit_text(text: str, width: float, font: str = FONT, size: int = 9) -> str:
    """Recortar el texto con '...' para que quepa en el ancho de la columna"""
    text = text or ""
    if stringWidth(text, font, size) <= width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font, size) > width:
        text = text[:-1]
    return text + ellipsis


class InvoicePdfRenderer:
    """Dibuja un InvoiceDocument sobre un canvas A4"""

    def __init__(self, document: InvoiceDocument):
        self.document = document
        self.buffer = io.BytesIO()
        self.pdf = canvas.Canvas(self.buffer, pagesize=A4)
        self.pdf.setTitle(f"{document.series}-{document.number}")
        self.pdf.setAuthor(document.issuer_name)

    def render(self) -> bytes:
        pages = paginate(len(self.document.lines))
        for page in pages:
            if page.number == 1:
                self._draw_header()
            else:
                self._draw_continuation_header()

            if page.has_table:
                y = self._draw_table_header(page.table_top)
                for index in range(page.first_row, page.last_row):
                    self._draw_row(index, y)
                    y -= ROW_HEIGHT

            if page.totals_top is not None:
                self._draw_totals(page.totals_top)

            self._draw_footer(page.number, len(pages))
            self.pdf.showPage()

        self.pdf.save()
        return self.buffer.getvalue()

    # ==================== SECCIONES ====================

    def _draw_header(self):
        doc = self.document
        pdf = self.pdf
        y = PAGE_HEIGHT - MARGIN - 14

        pdf.setFont(FONT_BOLD, 14)
        pdf.drawString(MARGIN, y, doc.issuer_name)
        pdf.setFont(FONT, 9)
        pdf.drawString(MARGIN, y - 16, f"RUC: {doc.issuer_ruc}")
        pdf.drawString(MARGIN, y - 28, doc.issuer_address)

        # Recuadro del documento
        box_w, box_h = 200, 66
        box_x = PAGE_WIDTH - MARGIN - box_w
        box_y = PAGE_HEIGHT - MARGIN - box_h
        pdf.rect(box_x, box_y, box_w, box_h)
        center = box_x + box_w / 2
        pdf.setFont(FONT_BOLD, 11)
        pdf.drawCentredString(center, box_y + box_h - 18, f"RUC {doc.issuer_ruc}")
        pdf.setFont(FONT_BOLD, 9)
        pdf.drawCentredString(center, box_y + box_h - 36, doc.type_label)
        pdf.setFont(FONT_BOLD, 11)
        pdf.drawCentredString(center, box_y + 12, f"{doc.series}-{doc.number}")

        y = PAGE_HEIGHT - MARGIN - 100
        pdf.setFont(FONT, 9)
        pdf.drawString(MARGIN, y, f"Fecha de emisión: {doc.issued_at.strftime('%d/%m/%Y')}")
        pdf.drawString(MARGIN, y - 16, f"Cliente: {fit_text(doc.client_name, 450)}")
        pdf.drawString(MARGIN, y - 32, f"Documento: {doc.client_document or '-'}")
        pdf.drawString(MARGIN, y - 48, f"Dirección: {fit_text(doc.client_address or '-', 450)}")
        pdf.drawString(MARGIN, y - 64, "Moneda: SOLES")

    def _draw_continuation_header(self):
        doc = self.document
        self.pdf.setFont(FONT_BOLD, 10)
        self.pdf.drawString(
            MARGIN,
            PAGE_HEIGHT - MARGIN - 12,
            f"{doc.type_label} {doc.series}-{doc.number} (continuación)"
        )

    def _draw_table_header(self, top: float) -> float:
        pdf = self.pdf
        y = top - 14
        pdf.setFont(FONT_BOLD, 9)
        self._cell("item", y, "Item")
        self._cell("desc", y, "Descripción")
        self._cell("cant", y, "Cant.")
        self._cell("precio", y, "Precio")
        self._cell("sub", y, "Subtotal")
        pdf.line(MARGIN, top - TABLE_HEADER_HEIGHT + 2, PAGE_WIDTH - MARGIN, top - TABLE_HEADER_HEIGHT + 2)
        pdf.setFont(FONT, 9)
        return top - TABLE_HEADER_HEIGHT - 13

    def _draw_row(self, index: int, y: float):
        line = self.document.lines[index]
        self._cell("item", y, str(index + 1).zfill(2))
        self._cell("desc", y, fit_text(line.descripcion, COLUMNS["desc"][1]))
        self._cell("cant", y, str(line.cantidad))
        self._cell("precio", y, format_currency(line.precio))
        self._cell("sub", y, format_currency(line.subtotal))

    def _draw_totals(self, top: float):
        doc = self.document
        pdf = self.pdf
        pdf.line(PAGE_WIDTH - MARGIN - 205, top, PAGE_WIDTH - MARGIN, top)

        y = top - 16
        rows = [
            ("Op. Gravada:", doc.op_gravada),
            (f"IGV ({round(doc.igv_rate * 100)}%):", doc.igv),
            ("Total:", doc.total),
        ]
        for label, value in rows:
            pdf.setFont(FONT, 9)
            pdf.drawRightString(PAGE_WIDTH - MARGIN - 90, y, label)
            pdf.setFont(FONT_BOLD, 9)
            pdf.drawRightString(PAGE_WIDTH - MARGIN, y, format_currency(value))
            y -= 16

        self._draw_qr(MARGIN, top - QR_SIZE - 4)
        pdf.setFont(FONT, 7)
        pdf.drawString(
            MARGIN + QR_SIZE + 8,
            top - QR_SIZE + 4,
            "Representación impresa del comprobante electrónico"
        )

    def _draw_qr(self, x: float, y: float):
        widget = QrCodeWidget(self.document.qr_payload)
        x1, y1, x2, y2 = widget.getBounds()
        width, height = x2 - x1, y2 - y1
        drawing = Drawing(QR_SIZE, QR_SIZE, transform=[QR_SIZE / width, 0, 0, QR_SIZE / height, 0, 0])
        drawing.add(widget)
        renderPDF.draw(drawing, self.pdf, x, y)

    def _draw_footer(self, number: int, total_pages: int):
        self.pdf.setFont(FONT, 8)
        self.pdf.drawRightString(PAGE_WIDTH - MARGIN, MARGIN, f"Página {number} de {total_pages}")

    def _cell(self, column: str, y: float, text: str):
        x, width, align = COLUMNS[column]
        if align == "right":
            self.pdf.drawRightString(x + width, y, text)
        else:
            self.pdf.drawString(x, y, text)


def render_invoice_pdf(document: InvoiceDocument) -> bytes:
    return InvoicePdfRenderer(document).render()
