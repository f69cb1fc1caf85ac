# app/api/v1/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user
from app.core.auth.security import verify_password, create_access_token
from app.shared.database.models import User

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    correo: str = Field(..., min_length=3, description="Correo del usuario")
    password: str = Field(..., min_length=1, description="Contraseña")


class LoginUser(BaseModel):
    id: int
    nombre: str
    correo: str
    rol: str


class LoginResponse(BaseModel):
    token: str
    user: LoginUser


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Iniciar sesión con correo y contraseña, devuelve un JWT
    """
    user = db.query(User).filter(User.correo == credentials.correo.strip().lower()).first()

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")

    if not verify_password(credentials.password, user.password):
        logger.warning(f"Intento de login fallido para {user.correo}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Contraseña incorrecta")

    if not user.activo:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Usuario inactivo")

    token = create_access_token({
        "id": user.id,
        "rol": user.rol,
        "nombre": user.nombre
    })

    logger.info(f"Login exitoso: usuario {user.id} ({user.rol})")

    return LoginResponse(
        token=token,
        user=LoginUser(id=user.id, nombre=user.nombre, correo=user.correo, rol=user.rol)
    )


@router.get("/")
async def protected_root(current_user: User = Depends(get_current_user)):
    """Ruta protegida: devuelve el usuario autenticado"""
    return {
        "message": "Ruta protegida",
        "user": {
            "id": current_user.id,
            "nombre": current_user.nombre,
            "rol": current_user.rol
        }
    }
