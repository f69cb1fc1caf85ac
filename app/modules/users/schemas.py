# app/modules/users/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum

class UserRole(str, Enum):
    admin = "admin"
    vendedor = "vendedor"
    caja = "caja"

class UserCreate(BaseModel):
    nombre: str = Field(..., min_length=1, description="Nombre completo")
    correo: str = Field(..., min_length=3, description="Correo único")
    password: str = Field(..., min_length=1, description="Contraseña")
    rol: UserRole = Field(UserRole.vendedor, description="Rol del usuario")

    @field_validator('correo')
    @classmethod
    def normalize_email(cls, v: str):
        return v.strip().lower()

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    correo: str
    rol: str
    activo: bool
