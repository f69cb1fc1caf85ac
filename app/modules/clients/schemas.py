# app/modules/clients/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

class DocumentType(str, Enum):
    DNI = "DNI"
    RUC = "RUC"
    CE = "CE"
    PAS = "PAS"

class ClientCreate(BaseModel):
    tipo_documento: DocumentType = Field(..., description="Tipo de documento")
    documento: str = Field(..., min_length=1, max_length=20, description="Número de documento")
    nombre: str = Field(..., min_length=1, description="Nombre o razón social")
    direccion: str = Field(..., min_length=1, description="Dirección")
    telefono: Optional[str] = None
    correo: Optional[str] = None
    latitud: Optional[str] = None
    longitud: Optional[str] = None
    nestrella: int = Field(0, ge=0, le=5)
    cestrella: str = ""
    zona_id: Optional[int] = None

    @field_validator('documento', 'nombre', 'direccion')
    @classmethod
    def strip_required(cls, v: str):
        if not v or not v.strip():
            raise ValueError('Este campo no puede estar vacío')
        return v.strip()

class ClientUpdate(BaseModel):
    tipo_documento: Optional[DocumentType] = None
    documento: Optional[str] = Field(None, min_length=1, max_length=20)
    nombre: Optional[str] = Field(None, min_length=1)
    direccion: Optional[str] = Field(None, min_length=1)
    telefono: Optional[str] = None
    correo: Optional[str] = None
    latitud: Optional[str] = None
    longitud: Optional[str] = None
    nestrella: Optional[int] = Field(None, ge=0, le=5)
    cestrella: Optional[str] = None
    zona_id: Optional[int] = None

    # Omitir el campo lo deja igual; enviarlo en null no está permitido
    @field_validator('tipo_documento')
    @classmethod
    def document_type_not_null(cls, v):
        if v is None:
            raise ValueError('Este campo no puede ser nulo')
        return v

    @field_validator('documento', 'nombre', 'direccion')
    @classmethod
    def strip_not_null(cls, v):
        if v is None or not v.strip():
            raise ValueError('Este campo no puede estar vacío')
        return v.strip()

class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tipo_documento: str
    documento: str
    nombre: str
    direccion: str
    telefono: Optional[str]
    correo: Optional[str]
    latitud: Optional[str]
    longitud: Optional[str]
    nestrella: Optional[int]
    cestrella: Optional[str]
    zona_id: Optional[int]

class ClientSearchResult(BaseModel):
    id: int
    documento: str
    nombre: str
    direccion: str
    nestrella: int
    cestrella: str
    latitud: str
    longitud: str

class ClientBalance(BaseModel):
    id: int
    nombre: str
    saldo: float

class CreditMovement(BaseModel):
    fecha: datetime
    detalle: str
    tipo: str
    total: float
    saldo: float
    comprobante_id: Optional[int]

class ZoneResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str

class BranchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    direccion: Optional[str]
