# app/modules/clients/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user, require_roles
from app.shared.database.models import User
from .service import ClientsService
from .schemas import (
    ClientCreate, ClientUpdate, ClientResponse, ClientSearchResult,
    ClientBalance, CreditMovement, ZoneResponse, BranchResponse
)

router = APIRouter(prefix="/clientes", tags=["Clientes"])
zones_router = APIRouter(prefix="/zonas", tags=["Zonas"])
branches_router = APIRouter(prefix="/sucursales", tags=["Sucursales"])

# ==================== BÚSQUEDAS ====================

@router.get("/buscar", response_model=List[ClientSearchResult])
async def search_clients(
    q: Optional[str] = Query(None, description="Texto a buscar en el nombre"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Buscar clientes por nombre o razón social (máximo 10)"""
    return ClientsService(db).search_clients(q)

@router.get("/por-zona", response_model=List[ClientBalance])
async def get_clients_by_zone(
    zona_id: int = Query(..., description="ID de la zona"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Clientes de una zona con su saldo"""
    return ClientsService(db).get_clients_by_zone(zona_id)

# ==================== CRUD ====================

@router.get("", response_model=List[ClientResponse])
async def get_clients(
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return ClientsService(db).list_clients()

@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return ClientsService(db).get_client(client_id)

@router.post("", status_code=201)
async def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return ClientsService(db).create_client(client_data)

@router.put("/{client_id}")
async def update_client(
    client_id: int,
    update_data: ClientUpdate,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return ClientsService(db).update_client(client_id, update_data)

@router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    return ClientsService(db).delete_client(client_id)

# ==================== CUENTA CORRIENTE ====================

@router.get("/{client_id}/deuda", response_model=ClientBalance)
async def get_client_debt(
    client_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Saldo pendiente del cliente"""
    return ClientsService(db).get_client_debt(client_id)

@router.get("/{client_id}/deuda/detalle", response_model=List[CreditMovement])
async def get_client_debt_detail(
    client_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Detalle de movimientos con saldo acumulado"""
    return ClientsService(db).get_client_debt_detail(client_id)

# ==================== CATÁLOGOS ====================

@zones_router.get("", response_model=List[ZoneResponse])
async def get_zones(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return ClientsService(db).repository.get_zones()

@branches_router.get("", response_model=List[BranchResponse])
async def get_branches(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return ClientsService(db).repository.get_branches()
