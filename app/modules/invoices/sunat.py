# app/modules/invoices/sunat.py
"""
Códigos SUNAT y texto del código QR de comprobantes electrónicos.

Formato del QR:
    RUC|TIPO|SERIE|NUMERO|IGV|TOTAL|FECHA|TIPO_DOC_ADQ|NUM_DOC_ADQ|HASH
"""
import base64
import hashlib
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from app.shared.utils.money import to_money

INVOICE_TYPE_CODES = {
    "factura": "01",
    "boleta": "03",
}

INVOICE_TYPE_LABELS = {
    "01": "FACTURA ELECTRÓNICA",
    "03": "BOLETA DE VENTA ELECTRÓNICA",
}

BUYER_DOCUMENT_CODES = {
    "DNI": "1",
    "CE": "4",
    "RUC": "6",
    "PAS": "7",
}

NO_DOCUMENT = "-"

NUMBER_WIDTH = 8


def invoice_type_code(kind: str) -> str:
    try:
        return INVOICE_TYPE_CODES[kind]
    except KeyError:
        raise ValueError(f"Tipo de comprobante no soportado: {kind}")


def buyer_document_code(document_type: Optional[str]) -> str:
    return BUYER_DOCUMENT_CODES.get((document_type or "").upper(), NO_DOCUMENT)


def format_number(correlative: int) -> str:
    """Correlativo con ceros a la izquierda (8 dígitos)"""
    if correlative < 1 or correlative >= 10 ** NUMBER_WIDTH:
        raise ValueError(f"Correlativo fuera de rango: {correlative}")
    return str(correlative).zfill(NUMBER_WIDTH)


@dataclass(frozen=True)
class QrData:
    ruc: str
    type_code: str
    series: str
    number: str
    igv: Decimal
    total: Decimal
    issued_on: date
    buyer_doc_type: str = NO_DOCUMENT
    buyer_doc_number: Optional[str] = None

    def fields(self) -> List[str]:
        return [
            self.ruc,
            self.type_code,
            self.series,
            self.number,
            f"{to_money(self.igv):.2f}",
            f"{to_money(self.total):.2f}",
            self.issued_on.strftime("%Y-%m-%d"),
            self.buyer_doc_type or NO_DOCUMENT,
            self.buyer_doc_number or NO_DOCUMENT,
        ]

    def digest(self) -> str:
        """
        SHA-256 en base64 de los nueve primeros campos unidos por '|'
        """
        content = "|".join(self.fields())
        return base64.b64encode(hashlib.sha256(content.encode("utf-8")).digest()).decode("ascii")

    def payload(self, digest: Optional[str] = None) -> str:
        return "|".join(self.fields() + [digest or self.digest()])
