# app/modules/payments/__init__.py
from .router import router as payments_router
from .service import PaymentsService
from .repository import PaymentsRepository

__all__ = [
    "payments_router",
    "PaymentsService",
    "PaymentsRepository"
]
