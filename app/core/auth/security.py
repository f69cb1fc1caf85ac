# app/core/auth/security.py
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import jwt
from passlib.context import CryptContext

from app.config.settings import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(payload: Dict[str, Any], expires_minutes: int = None) -> str:
    """
    Firmar un JWT con el payload del usuario (id, rol, nombre)
    """
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    to_encode = dict(payload)
    to_encode.update({"sub": str(payload["id"]), "exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decodificar y validar un JWT. Lanza JWTError si no es válido."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
