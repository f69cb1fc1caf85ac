# app/modules/products/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import User
from .service import ProductsService
from .schemas import ProductCreate, ProductUpdate, ProductResponse

router = APIRouter(prefix="/productos", tags=["Productos"])

@router.get("", response_model=List[ProductResponse])
async def get_products(
    current_user: User = Depends(require_roles(["admin", "vendedor", "caja"])),
    db: Session = Depends(get_db)
):
    return ProductsService(db).list_products()

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    current_user: User = Depends(require_roles(["admin", "vendedor", "caja"])),
    db: Session = Depends(get_db)
):
    return ProductsService(db).get_product(product_id)

@router.post("", status_code=201)
async def create_product(
    product_data: ProductCreate,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    return ProductsService(db).create_product(product_data)

@router.put("/{product_id}")
async def update_product(
    product_id: int,
    update_data: ProductUpdate,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    return ProductsService(db).update_product(product_id, update_data)

@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    return ProductsService(db).delete_product(product_id)
