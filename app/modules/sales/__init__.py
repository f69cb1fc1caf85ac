# app/modules/sales/__init__.py
"""
Módulo de Ventas

- Registro de ventas en una transacción (precios, IGV, stock)
- Consulta de ventas (todas, pendientes, del día, por sucursal)
- Aprobación y cancelación con devolución de stock
- Envío del comprobante por correo
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]
