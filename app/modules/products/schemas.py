# app/modules/products/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from decimal import Decimal

class ProductCreate(BaseModel):
    nombre: str = Field(..., min_length=1, description="Nombre del producto")
    descripcion: Optional[str] = Field(None, description="Descripción")
    categoria: Optional[str] = Field(None, description="Categoría")
    precio: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Precio de lista (incluye IGV)")
    stock: int = Field(0, ge=0, description="Stock inicial")
    unidad_medida: str = Field("NIU", description="Unidad de medida SUNAT")

class ProductUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1)
    descripcion: Optional[str] = None
    categoria: Optional[str] = None
    precio: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    unidad_medida: Optional[str] = None
    activo: Optional[bool] = None

    @field_validator('nombre', 'precio', 'stock', 'activo')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError('Este campo no puede ser nulo')
        return v

class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    descripcion: Optional[str]
    categoria: Optional[str]
    precio: float
    stock: int
    unidad_medida: Optional[str]
    activo: bool
