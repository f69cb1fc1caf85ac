# app/modules/sales/router.py
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, List

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user, require_roles
from app.shared.database.models import User
from app.modules.invoices.service import InvoicesService
from .service import SalesService
from .schemas import (
    SaleCreateRequest, SaleCreatedResponse, SaleSummary, SaleByBranch,
    SaleResponse, SaleStatusUpdate, SendInvoiceRequest
)

router = APIRouter(prefix="/ventas", tags=["Ventas"])

# ==================== REGISTRO ====================

@router.post("/registro", response_model=SaleCreatedResponse, status_code=201)
async def create_sale(
    sale_data: SaleCreateRequest,
    current_user: User = Depends(require_roles(["admin", "vendedor"])),
    db: Session = Depends(get_db)
):
    """
    Registrar venta con sus líneas de detalle

    - Precio por línea opcional (por defecto, precio de lista)
    - Verificación y descuento de stock
    - Cálculo de operación gravada e IGV
    - Todo en una sola transacción
    """
    service = SalesService(db)
    return service.create_sale(sale_data, seller_id=current_user.id)

# ==================== CONSULTAS ====================

@router.get("", response_model=List[SaleSummary])
async def get_sales(
    estado: Optional[str] = Query(None, description="Filtrar por estado"),
    current_user: User = Depends(require_roles(["admin", "vendedor"])),
    db: Session = Depends(get_db)
):
    return SalesService(db).get_sales(estado)

@router.get("/pendientes", response_model=List[SaleSummary])
async def get_pending_sales(
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    """Ventas pendientes de cobro"""
    return SalesService(db).get_pending_sales()

@router.get("/hoy", response_model=List[SaleSummary])
async def get_my_sales_today(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Ventas del vendedor autenticado en el día actual"""
    return SalesService(db).get_seller_sales_for_day(current_user.id, date.today())

@router.get("/por-sucursal", response_model=List[SaleByBranch])
async def get_sales_by_branch(
    sucursal_id: int = Query(..., description="ID de la sucursal"),
    desde: date = Query(..., description="Fecha inicial (YYYY-MM-DD)"),
    hasta: date = Query(..., description="Fecha final (YYYY-MM-DD)"),
    current_user: User = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    return SalesService(db).get_sales_by_branch(sucursal_id, desde, hasta)

@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: int,
    current_user: User = Depends(require_roles(["admin", "vendedor", "caja"])),
    db: Session = Depends(get_db)
):
    return SalesService(db).get_sale(sale_id)

# ==================== ESTADO ====================

@router.put("/{sale_id}/estado")
async def update_sale_status(
    sale_id: int,
    status_data: SaleStatusUpdate,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    """
    Aprobar o cancelar una venta. Cancelar devuelve el stock.
    """
    return SalesService(db).update_status(sale_id, status_data.estado)

@router.post("/{sale_id}/cancelar")
async def cancel_sale(
    sale_id: int,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return SalesService(db).cancel_sale(sale_id)

# ==================== COMPROBANTE POR CORREO ====================

@router.post("/{sale_id}/enviar-comprobante")
async def send_invoice_by_email(
    sale_id: int,
    request_data: Optional[SendInvoiceRequest] = None,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    """
    Generar el PDF del comprobante de la venta y enviarlo por correo
    """
    service = InvoicesService(db)
    return await service.send_sale_invoice(
        sale_id=sale_id,
        fallback_email=request_data.correo if request_data else None
    )
