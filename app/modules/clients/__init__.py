# app/modules/clients/__init__.py
"""
Módulo de Clientes

- CRUD de clientes
- Búsqueda por nombre y por zona
- Estado de cuenta (deuda y detalle de movimientos)
- Catálogos de zonas y sucursales
"""

from .router import router as clients_router, zones_router, branches_router
from .service import ClientsService
from .repository import ClientsRepository

__all__ = [
    "clients_router",
    "zones_router",
    "branches_router",
    "ClientsService",
    "ClientsRepository"
]
