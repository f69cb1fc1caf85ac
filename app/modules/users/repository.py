# app/modules/users/repository.py
from typing import List, Optional
from sqlalchemy.orm import Session

from app.shared.database.models import User

class UsersRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def get_by_email(self, correo: str) -> Optional[User]:
        return self.db.query(User).filter(User.correo == correo).first()

    def create(self, nombre: str, correo: str, password_hash: str, rol: str) -> User:
        user = User(nombre=nombre, correo=correo, password=password_hash, rol=rol, activo=True)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
