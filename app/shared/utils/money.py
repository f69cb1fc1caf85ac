# app/shared/utils/money.py
"""
Aritmética monetaria: redondeo a céntimos y desglose de IGV.

Los precios de venta incluyen IGV, por lo que la base imponible
(operación gravada) se obtiene dividiendo el total entre (1 + tasa).
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Union

from app.config.settings import settings

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


class TaxBreakdown(NamedTuple):
    op_gravada: Decimal
    igv: Decimal
    total: Decimal


def to_money(value: Number) -> Decimal:
    """Convertir a Decimal redondeado a 2 decimales (half-up)"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value or 0))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_subtotal(quantity: int, unit_price: Number) -> Decimal:
    return to_money(Decimal(quantity) * to_money(unit_price))


def split_igv(total: Number, rate: Number = None) -> TaxBreakdown:
    """
    Desglosar un total con IGV incluido en base imponible e impuesto.
    op_gravada + igv == total siempre.
    """
    total = to_money(total)
    rate = Decimal(str(settings.igv_rate if rate is None else rate))
    op_gravada = to_money(total / (Decimal("1") + rate))
    return TaxBreakdown(op_gravada=op_gravada, igv=total - op_gravada, total=total)


def format_currency(value: Number) -> str:
    """Formato de moneda peruana: S/ 1,234.50"""
    return f"S/ {to_money(value):,.2f}"
