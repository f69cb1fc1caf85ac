# app/modules/clients/service.py
import logging
from decimal import Decimal
from typing import List, Dict, Any

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.shared.database.models import Client
from .repository import ClientsRepository
from .schemas import (
    ClientCreate, ClientUpdate, ClientResponse, ClientSearchResult,
    ClientBalance, CreditMovement
)

logger = logging.getLogger(__name__)

NO_LOCATION = "Sin ubicación"

class ClientsService:
    """
    Lógica de negocio de clientes
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = ClientsRepository(db)

    def _get_or_404(self, client_id: int) -> Client:
        client = self.repository.get_by_id(client_id)
        if not client:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")
        return client

    def _ensure_unique_document(self, documento: str, exclude_id: int = None):
        existing = self.repository.get_by_document(documento)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe un cliente con documento {documento}"
            )

    def _duplicate_document(self, documento: str):
        """Otro registro tomó el documento entre la verificación y el commit"""
        self.db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ya existe un cliente con documento {documento}"
        )

    # ==================== CRUD ====================

    def list_clients(self) -> List[ClientResponse]:
        return [ClientResponse.model_validate(c) for c in self.repository.get_all()]

    def get_client(self, client_id: int) -> ClientResponse:
        return ClientResponse.model_validate(self._get_or_404(client_id))

    def create_client(self, client_data: ClientCreate) -> Dict[str, Any]:
        self._ensure_unique_document(client_data.documento)

        data = client_data.model_dump()
        data["tipo_documento"] = client_data.tipo_documento.value
        try:
            client = self.repository.create(data)
        except IntegrityError:
            self._duplicate_document(client_data.documento)
        logger.info(f"Cliente {client.id} registrado ({client.tipo_documento} {client.documento})")

        return {"message": "Cliente registrado correctamente", "clienteId": client.id}

    def update_client(self, client_id: int, update_data: ClientUpdate) -> Dict[str, Any]:
        client = self._get_or_404(client_id)

        data = update_data.model_dump(exclude_unset=True)
        if "tipo_documento" in data and data["tipo_documento"] is not None:
            data["tipo_documento"] = update_data.tipo_documento.value
        if data.get("documento"):
            self._ensure_unique_document(data["documento"], exclude_id=client_id)

        try:
            self.repository.update(client, data)
        except IntegrityError:
            if "documento" not in data:
                self.db.rollback()
                raise
            self._duplicate_document(data["documento"])
        return {"message": "Cliente actualizado correctamente"}

    def delete_client(self, client_id: int) -> Dict[str, Any]:
        client = self._get_or_404(client_id)

        if self.repository.count_sales(client_id) > 0:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No se puede eliminar un cliente con ventas registradas"
            )

        self.repository.delete(client)
        logger.info(f"Cliente {client_id} eliminado")
        return {"message": "Cliente eliminado correctamente"}

    # ==================== BÚSQUEDAS ====================

    def search_clients(self, query: str) -> List[ClientSearchResult]:
        if not query or not query.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Debe enviar el parámetro q")

        return [
            ClientSearchResult(
                id=c.id,
                documento=c.documento,
                nombre=c.nombre,
                direccion=c.direccion,
                nestrella=c.nestrella or 0,
                cestrella=c.cestrella or "",
                latitud=c.latitud or NO_LOCATION,
                longitud=c.longitud or NO_LOCATION
            )
            for c in self.repository.search_by_name(query.strip())
        ]

    # ==================== CUENTA CORRIENTE ====================

    def get_clients_by_zone(self, zona_id: int) -> List[ClientBalance]:
        return [
            ClientBalance(id=row.id, nombre=row.nombre, saldo=float(row.saldo))
            for row in self.repository.get_balances_by_zone(zona_id)
        ]

    def get_client_debt(self, client_id: int) -> ClientBalance:
        row = self.repository.get_balance(client_id)
        if not row:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")
        return ClientBalance(id=row.id, nombre=row.nombre, saldo=float(row.saldo))

    def get_client_debt_detail(self, client_id: int) -> List[CreditMovement]:
        """
        Movimientos en orden cronológico con saldo acumulado
        """
        self._get_or_404(client_id)

        running = Decimal("0")
        movements = []
        for credit in self.repository.get_credit_movements(client_id):
            running += credit.total
            movements.append(CreditMovement(
                fecha=credit.fecha,
                detalle=credit.detalle,
                tipo=credit.tipo,
                total=float(credit.total),
                saldo=float(running),
                comprobante_id=credit.comprobante_id
            ))
        return movements
