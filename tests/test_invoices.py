from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.modules.invoices import pdf as invoice_pdf
from app.modules.invoices.pdf import (
    InvoiceDocument, InvoiceLine, paginate, render_invoice_pdf,
    BOTTOM_LIMIT, ROW_HEIGHT, TABLE_HEADER_HEIGHT, TOTALS_HEIGHT
)
from app.shared.database.models import Client
from app.shared.services.mailer import EmailService


def _document(line_count):
    return InvoiceDocument(
        issuer_name="Empresa Ejemplo S.A.C.",
        issuer_ruc="20123456789",
        issuer_address="Av. Siempre Viva 123",
        type_label="BOLETA DE VENTA ELECTRÓNICA",
        series="B001",
        number="00000001",
        issued_at=datetime(2024, 5, 1, 12, 0),
        client_name="Juan Pérez",
        client_document="45678912",
        client_address="Av. Arequipa 123",
        op_gravada=Decimal("52.37"),
        igv=Decimal("9.43"),
        total=Decimal("61.80"),
        igv_rate=0.18,
        qr_payload="20123456789|03|B001|00000001|9.43|61.80|2024-05-01|1|45678912|hash",
        lines=[
            InvoiceLine(
                descripcion=f"Producto con una descripción bastante larga número {i}",
                cantidad=1,
                precio=Decimal("1.00"),
                subtotal=Decimal("1.00")
            )
            for i in range(line_count)
        ]
    )


# ==================== PAGINACIÓN ====================

def test_paginate_short_invoice_fits_one_page():
    pages = paginate(5)
    assert len(pages) == 1
    assert (pages[0].first_row, pages[0].last_row) == (0, 5)
    assert pages[0].totals_top is not None


def test_paginate_empty_invoice():
    pages = paginate(0)
    assert len(pages) == 1
    assert pages[0].totals_top is not None


@pytest.mark.parametrize("rows", [1, 27, 28, 29, 64, 65, 100, 250])
def test_paginate_layout_invariants(rows):
    pages = paginate(rows)

    # Filas contiguas, sin huecos ni repeticiones
    assert pages[0].first_row == 0
    assert pages[-1].last_row == rows
    for previous, current in zip(pages, pages[1:]):
        assert current.first_row == previous.last_row
    assert [p.number for p in pages] == list(range(1, len(pages) + 1))

    for page in pages:
        used = (page.last_row - page.first_row) * ROW_HEIGHT
        assert page.table_top - TABLE_HEADER_HEIGHT - used >= BOTTOM_LIMIT

    # Totales solo en la última página y sin cruzar el margen inferior
    assert [p.totals_top is not None for p in pages] == [False] * (len(pages) - 1) + [True]
    assert pages[-1].totals_top - TOTALS_HEIGHT >= BOTTOM_LIMIT


def test_paginate_moves_totals_to_new_page_when_full():
    capacity = paginate(1000)[0].last_row
    pages = paginate(capacity)

    assert len(pages) == 2
    assert pages[1].first_row == pages[1].last_row == capacity
    assert pages[1].totals_top is not None


def test_paginate_long_invoice_has_several_pages():
    assert len(paginate(120)) > 2


# ==================== PDF ====================

def test_render_pdf_bytes():
    content = render_invoice_pdf(_document(3))
    assert content.startswith(b"%PDF")
    assert len(content) > 1000


def test_render_long_pdf():
    content = render_invoice_pdf(_document(80))
    assert content.startswith(b"%PDF")


def test_fit_text_truncates():
    text = invoice_pdf.fit_text("x" * 500, 50)
    assert text.endswith("...")
    assert invoice_pdf.stringWidth(text, invoice_pdf.FONT, 9) <= 50
    assert invoice_pdf.fit_text("corto", 200) == "corto"


# ==================== ENDPOINTS ====================

@pytest.fixture()
def paid_sale(client, cashier_headers, register_sale, products, invoice_series):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 2}, {"id_producto": products[1].id, "cantidad": 1}])
    payment = client.post(
        "/api/pagos",
        json={"id_venta": sale["id"], "tipo_comprobante": "boleta", "metodo_pago": "efectivo"},
        headers=cashier_headers
    ).json()
    return {"sale": sale, "invoice": payment["comprobante"]}


def test_list_series(client, seller_headers, invoice_series):
    response = client.get("/api/comprobantes", headers=seller_headers)

    assert response.status_code == 200
    assert {s["ccoddocu"] for s in response.json()} == {"01-F001", "03-B001"}
    assert response.json()[0] == {"listado": "Factura F001", "ctipdocu": "01", "cserdocu": "F001", "ccoddocu": "01-F001"}


def test_get_invoice(client, cashier_headers, paid_sale):
    response = client.get(f"/api/comprobantes/{paid_sale['invoice']['id']}", headers=cashier_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["tipo"] == "BOLETA DE VENTA ELECTRÓNICA"
    assert body["serie"] == "B001"
    assert body["numero"] == "00000001"
    assert body["total"] == 61.8
    assert [d["descripcion"] for d in body["detalles"]] == ["Arroz 5kg", "Aceite 1L"]

    qr_fields = body["qr"].split("|")
    assert qr_fields[:4] == ["20123456789", "03", "B001", "00000001"]
    assert qr_fields[4:6] == ["9.43", "61.80"]
    assert qr_fields[7:9] == ["1", "45678912"]
    assert qr_fields[9] == body["hash"]


def test_get_missing_invoice(client, cashier_headers):
    response = client.get("/api/comprobantes/999", headers=cashier_headers)
    assert response.status_code == 404


def test_invoice_pdf_endpoint(client, cashier_headers, paid_sale):
    response = client.get(f"/api/comprobantes/{paid_sale['invoice']['id']}/pdf", headers=cashier_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'inline; filename="comprobante-B001-00000001.pdf"'
    assert response.content.startswith(b"%PDF")


def test_invoice_pdf_failure(client, cashier_headers, paid_sale, monkeypatch):
    def broken(document):
        raise RuntimeError("fallo de render")

    monkeypatch.setattr("app.modules.invoices.service.render_invoice_pdf", broken)

    response = client.get(f"/api/comprobantes/{paid_sale['invoice']['id']}/pdf", headers=cashier_headers)
    assert response.status_code == 500
    assert response.json()["message"] == "No se pudo generar el PDF"


# ==================== CORREO ====================

@pytest.fixture()
def mail_mock(monkeypatch):
    mock = AsyncMock(return_value={"success": True})
    monkeypatch.setattr(EmailService, "send_email", mock)
    return mock


def test_send_invoice_to_client_email(client, cashier_headers, paid_sale, mail_mock):
    sale = paid_sale["sale"]
    response = client.post(f"/api/ventas/{sale['id']}/enviar-comprobante", headers=cashier_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Comprobante enviado correctamente"}

    kwargs = mail_mock.call_args.kwargs
    assert kwargs["to_email"] == "juan@example.com"
    assert kwargs["subject"] == f"Comprobante de Venta N° {sale['numero_venta']}"
    attachment = kwargs["attachments"][0]
    assert attachment["filename"] == "comprobante-B001-00000001.pdf"
    assert attachment["content"].startswith(b"%PDF")


def test_send_invoice_uses_fallback_email(client, cashier_headers, paid_sale, mail_mock, customer, db_session):
    db_session.get(Client, customer.id).correo = None
    db_session.commit()

    response = client.post(
        f"/api/ventas/{paid_sale['sale']['id']}/enviar-comprobante",
        json={"correo": "otro@example.com"},
        headers=cashier_headers
    )

    assert response.status_code == 200
    assert mail_mock.call_args.kwargs["to_email"] == "otro@example.com"


def test_send_invoice_without_recipient(client, cashier_headers, paid_sale, mail_mock, customer, db_session):
    db_session.get(Client, customer.id).correo = None
    db_session.commit()

    response = client.post(f"/api/ventas/{paid_sale['sale']['id']}/enviar-comprobante", headers=cashier_headers)

    assert response.status_code == 400
    mail_mock.assert_not_called()


def test_send_invoice_for_unpaid_sale(client, cashier_headers, register_sale, products, mail_mock):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])

    response = client.post(f"/api/ventas/{sale['id']}/enviar-comprobante", headers=cashier_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "La venta no tiene comprobante emitido"


def test_send_invoice_for_missing_sale(client, cashier_headers, mail_mock):
    response = client.post("/api/ventas/999/enviar-comprobante", headers=cashier_headers)
    assert response.status_code == 404


def test_send_invoice_mail_failure(client, cashier_headers, paid_sale, monkeypatch):
    monkeypatch.setattr(
        EmailService, "send_email",
        AsyncMock(return_value={"success": False, "error": "SMTP caído"})
    )

    response = client.post(f"/api/ventas/{paid_sale['sale']['id']}/enviar-comprobante", headers=cashier_headers)

    assert response.status_code == 500
    assert response.json()["message"] == "Error al enviar el comprobante"
