# app/modules/users/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import User
from .service import UsersService
from .schemas import UserCreate, UserResponse

router = APIRouter(prefix="/users", tags=["Usuarios"])

@router.get("", response_model=List[UserResponse])
async def get_users(
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    """Listar todos los usuarios"""
    return UsersService(db).list_users()

@router.post("/register", status_code=201)
async def register_user(
    user_data: UserCreate,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    """Registrar nuevo usuario (admin, vendedor o caja)"""
    return UsersService(db).create_user(user_data)
