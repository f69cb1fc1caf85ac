# app/modules/users/service.py
import logging
from typing import Dict, Any, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth.security import hash_password
from .repository import UsersRepository
from .schemas import UserCreate, UserResponse

logger = logging.getLogger(__name__)

class UsersService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = UsersRepository(db)

    def list_users(self) -> List[UserResponse]:
        return [UserResponse.model_validate(u) for u in self.repository.get_all()]

    def create_user(self, user_data: UserCreate) -> Dict[str, Any]:
        """
        Registrar un usuario nuevo con contraseña hasheada
        """
        if self.repository.get_by_email(user_data.correo):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El correo ya está registrado"
            )

        user = self.repository.create(
            nombre=user_data.nombre.strip(),
            correo=user_data.correo,
            password_hash=hash_password(user_data.password),
            rol=user_data.rol.value
        )
        logger.info(f"Usuario {user.id} creado con rol {user.rol}")

        return {"message": "Usuario creado correctamente", "userId": user.id}
