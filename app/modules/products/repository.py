# app/modules/products/repository.py
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.shared.database.models import Product, SaleDetail

class ProductsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.nombre).all()

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def create(self, data: Dict[str, Any]) -> Product:
        product = Product(**data, activo=True)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update(self, product: Product, data: Dict[str, Any]) -> Product:
        for field, value in data.items():
            setattr(product, field, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: Product):
        self.db.delete(product)
        self.db.commit()

    def count_sale_lines(self, product_id: int) -> int:
        return self.db.query(func.count(SaleDetail.id)).filter(
            SaleDetail.id_producto == product_id
        ).scalar() or 0
