# app/modules/clients/repository.py
from typing import List, Optional, Dict, Any, Tuple
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.shared.database.models import Client, ClientCredit, Zone, Branch, Sale

class ClientsRepository:
    """
    Repositorio de clientes, zonas, sucursales y cuenta corriente
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== CLIENTES ====================

    def get_all(self) -> List[Client]:
        return self.db.query(Client).order_by(Client.nombre).all()

    def get_by_id(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def get_by_document(self, documento: str) -> Optional[Client]:
        return self.db.query(Client).filter(Client.documento == documento).first()

    def create(self, data: Dict[str, Any]) -> Client:
        client = Client(**data)
        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client

    def update(self, client: Client, data: Dict[str, Any]) -> Client:
        for field, value in data.items():
            setattr(client, field, value)
        self.db.commit()
        self.db.refresh(client)
        return client

    def delete(self, client: Client):
        self.db.delete(client)
        self.db.commit()

    def count_sales(self, client_id: int) -> int:
        return self.db.query(func.count(Sale.id)).filter(Sale.id_cliente == client_id).scalar() or 0

    def search_by_name(self, query: str, limit: int = 10) -> List[Client]:
        return self.db.query(Client).filter(
            Client.nombre.ilike(f"%{query}%")
        ).order_by(Client.nombre).limit(limit).all()

    # ==================== CUENTA CORRIENTE ====================

    def _balance_query(self):
        return self.db.query(
            Client.id,
            Client.nombre,
            func.coalesce(func.sum(ClientCredit.total), 0).label("saldo")
        ).outerjoin(
            ClientCredit, ClientCredit.cliente_id == Client.id
        ).group_by(Client.id, Client.nombre)

    def get_balances_by_zone(self, zona_id: int) -> List[Tuple[int, str, Decimal]]:
        return self._balance_query().filter(
            Client.zona_id == zona_id
        ).order_by(Client.nombre).all()

    def get_balance(self, client_id: int) -> Optional[Tuple[int, str, Decimal]]:
        return self._balance_query().filter(Client.id == client_id).first()

    def get_credit_movements(self, client_id: int) -> List[ClientCredit]:
        return self.db.query(ClientCredit).filter(
            ClientCredit.cliente_id == client_id
        ).order_by(ClientCredit.fecha, ClientCredit.id).all()

    # ==================== CATÁLOGOS ====================

    def get_zones(self) -> List[Zone]:
        return self.db.query(Zone).order_by(Zone.nombre).all()

    def get_branches(self) -> List[Branch]:
        return self.db.query(Branch).filter(Branch.activo == True).order_by(Branch.nombre).all()
