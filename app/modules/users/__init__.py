# app/modules/users/__init__.py
"""
Módulo de Usuarios - Gestión de cuentas (solo administrador)
"""

from .router import router as users_router
from .service import UsersService
from .repository import UsersRepository

__all__ = [
    "users_router",
    "UsersService",
    "UsersRepository"
]
