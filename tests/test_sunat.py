import base64
import hashlib
from datetime import date
from decimal import Decimal

import pytest

from app.modules.invoices import sunat


def _qr(**overrides):
    data = dict(
        ruc="20123456789",
        type_code="03",
        series="B001",
        number="00000001",
        igv=Decimal("9.43"),
        total=Decimal("61.8"),
        issued_on=date(2024, 5, 1),
        buyer_doc_type="1",
        buyer_doc_number="45678912"
    )
    data.update(overrides)
    return sunat.QrData(**data)


def test_qr_payload_format():
    payload = _qr().payload()
    fields = payload.split("|")

    assert len(fields) == 10
    assert fields[:9] == [
        "20123456789", "03", "B001", "00000001", "9.43", "61.80", "2024-05-01", "1", "45678912"
    ]
    expected = base64.b64encode(hashlib.sha256("|".join(fields[:9]).encode()).digest()).decode()
    assert fields[9] == expected


def test_qr_payload_without_buyer_document():
    qr = _qr(buyer_doc_type=sunat.buyer_document_code(None), buyer_doc_number=None)
    assert qr.fields()[7:] == ["-", "-"]


def test_qr_payload_uses_stored_digest():
    assert _qr().payload("abc").endswith("|abc")


def test_document_codes():
    assert sunat.invoice_type_code("factura") == "01"
    assert sunat.invoice_type_code("boleta") == "03"
    assert sunat.buyer_document_code("RUC") == "6"
    assert sunat.buyer_document_code("dni") == "1"
    assert sunat.buyer_document_code("CE") == "4"
    assert sunat.buyer_document_code("PAS") == "7"
    with pytest.raises(ValueError):
        sunat.invoice_type_code("ticket")


def test_format_number():
    assert sunat.format_number(1) == "00000001"
    assert sunat.format_number(12345678) == "12345678"
    with pytest.raises(ValueError):
        sunat.format_number(0)
    with pytest.raises(ValueError):
        sunat.format_number(100000000)
