# app/modules/products/service.py
import logging
from typing import List, Dict, Any

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.shared.database.models import Product
from .repository import ProductsRepository
from .schemas import ProductCreate, ProductUpdate, ProductResponse

logger = logging.getLogger(__name__)

class ProductsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductsRepository(db)

    def _get_or_404(self, product_id: int) -> Product:
        product = self.repository.get_by_id(product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")
        return product

    def list_products(self) -> List[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_all()]

    def get_product(self, product_id: int) -> ProductResponse:
        return ProductResponse.model_validate(self._get_or_404(product_id))

    def create_product(self, product_data: ProductCreate) -> Dict[str, Any]:
        product = self.repository.create(product_data.model_dump())
        logger.info(f"Producto {product.id} registrado: {product.nombre}")
        return {"message": "Producto registrado correctamente", "productoId": product.id}

    def update_product(self, product_id: int, update_data: ProductUpdate) -> Dict[str, Any]:
        product = self._get_or_404(product_id)
        self.repository.update(product, update_data.model_dump(exclude_unset=True))
        return {"message": "Producto actualizado correctamente"}

    def delete_product(self, product_id: int) -> Dict[str, Any]:
        product = self._get_or_404(product_id)

        if self.repository.count_sale_lines(product_id) > 0:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No se puede eliminar un producto con ventas registradas"
            )

        self.repository.delete(product)
        logger.info(f"Producto {product_id} eliminado")
        return {"message": "Producto eliminado correctamente"}
