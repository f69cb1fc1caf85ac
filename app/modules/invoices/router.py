# app/modules/invoices/router.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user, require_roles
from app.shared.database.models import User
from .service import InvoicesService
from .schemas import InvoiceSeriesResponse, InvoiceResponse

router = APIRouter(prefix="/comprobantes", tags=["Comprobantes"])

@router.get("", response_model=List[InvoiceSeriesResponse])
async def get_invoice_series(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Series de comprobante habilitadas"""
    return InvoicesService(db).get_series()

@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return InvoicesService(db).get_invoice(invoice_id)

@router.get("/{invoice_id}/pdf")
async def get_invoice_pdf(
    invoice_id: int,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    """Representación impresa del comprobante (A4)"""
    filename, content = InvoicesService(db).get_invoice_pdf(invoice_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'}
    )
