# app/modules/payments/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import User
from .service import PaymentsService
from .schemas import PaymentCreateRequest, PaymentCreatedResponse, PaymentResponse

router = APIRouter(prefix="/pagos", tags=["Pagos"])

@router.post("", response_model=PaymentCreatedResponse, status_code=201)
async def register_payment(
    payment_data: PaymentCreateRequest,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    """
    Cobrar una venta pendiente

    - Total tomado de las líneas de la venta, con desglose de IGV
    - Aprueba la venta
    - Emite boleta o factura con el siguiente correlativo de la serie
    """
    return PaymentsService(db).register_payment(payment_data)

@router.get("", response_model=List[PaymentResponse])
async def get_payments(
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return PaymentsService(db).get_payments()

@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int,
    current_user: User = Depends(require_roles(["admin", "caja"])),
    db: Session = Depends(get_db)
):
    return PaymentsService(db).get_payment(payment_id)
