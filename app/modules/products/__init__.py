# app/modules/products/__init__.py
from .router import router as products_router
from .service import ProductsService
from .repository import ProductsRepository

__all__ = [
    "products_router",
    "ProductsService",
    "ProductsRepository"
]
