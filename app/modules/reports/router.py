# app/modules/reports/router.py
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional, List

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import User
from .service import ReportsService
from .schemas import (
    SalesSummaryReport, SaleReportRow, DaySales, TopProduct, CategorySales,
    DailyAverage, MonthlyAverage, MonthSales
)

router = APIRouter(prefix="/reportes", tags=["Reportes"])

REPORT_ROLES = ["admin", "caja"]

@router.get("/ventas", response_model=SalesSummaryReport)
async def get_sales_summary(
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    """Totales cobrados por día, por mes, por tipo de comprobante y ventas por estado"""
    return ReportsService(db).get_sales_summary()

@router.get("/ventas/detalle", response_model=List[SaleReportRow])
async def get_sales_detail(
    fecha_inicio: Optional[date] = Query(None, description="Desde (YYYY-MM-DD)"),
    fecha_fin: Optional[date] = Query(None, description="Hasta (YYYY-MM-DD)"),
    estado: Optional[str] = Query(None, description="Estado de la venta"),
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    return ReportsService(db).get_sales_detail(fecha_inicio, fecha_fin, estado)

@router.get("/ventas-por-dia", response_model=List[DaySales])
async def get_sales_by_day(
    mes: Optional[int] = Query(None, ge=1, le=12),
    anio: Optional[int] = Query(None, ge=2000),
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    return ReportsService(db).get_sales_by_day(mes, anio)

@router.get("/productos-mas-vendidos", response_model=List[TopProduct])
async def get_top_products(
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    return ReportsService(db).get_top_products()

@router.get("/ventas-por-categoria", response_model=List[CategorySales])
async def get_sales_by_category(
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    return ReportsService(db).get_sales_by_category()

@router.get("/promedio-diario", response_model=DailyAverage)
async def get_daily_average(
    mes: Optional[int] = Query(None, ge=1, le=12),
    anio: Optional[int] = Query(None, ge=2000),
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    return ReportsService(db).get_daily_average(mes, anio)

@router.get("/promedio-mensual", response_model=MonthlyAverage)
async def get_monthly_average(
    anio: Optional[int] = Query(None, ge=2000),
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    return ReportsService(db).get_monthly_average(anio)

@router.get("/mensual", response_model=List[MonthSales])
async def get_last_months(
    current_user: User = Depends(require_roles(REPORT_ROLES)),
    db: Session = Depends(get_db)
):
    """Últimos 6 meses con ventas aprobadas"""
    return ReportsService(db).get_last_months()
