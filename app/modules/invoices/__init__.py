# app/modules/invoices/__init__.py
"""
Módulo de comprobantes electrónicos

Series, emisión con correlativo, código QR SUNAT, PDF A4 y envío por correo.
"""

from .router import router as invoices_router
from .service import InvoicesService
from .repository import InvoicesRepository

__all__ = [
    "invoices_router",
    "InvoicesService",
    "InvoicesRepository"
]
