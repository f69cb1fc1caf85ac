# app/modules/reports/service.py
from datetime import date
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from .repository import ReportsRepository
from .schemas import (
    SalesSummaryReport, DailyTotal, MonthlyTotal, InvoiceKindTotal, StatusCount,
    SaleReportRow, DaySales, TopProduct, CategorySales, DailyAverage,
    MonthlyAverage, MonthSales
)

class ReportsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ReportsRepository(db)

    def get_sales_summary(self) -> SalesSummaryReport:
        """Resumen: últimos 30 días, últimos 12 meses, por comprobante y por estado"""
        return SalesSummaryReport(
            porDia=[
                DailyTotal(fecha=row.fecha, cantidad=row.cantidad, total=float(row.total or 0))
                for row in self.repository.paid_sales_by_day(30)
            ],
            porMes=[
                MonthlyTotal(mes=self._month_key(row.anio, row.mes), cantidad=row.cantidad, total=float(row.total or 0))
                for row in self.repository.paid_sales_by_month(12)
            ],
            porComprobante=[
                InvoiceKindTotal(
                    tipo_comprobante=row.tipo_comprobante,
                    cantidad=row.cantidad,
                    total=float(row.total or 0)
                )
                for row in self.repository.payments_by_invoice_kind()
            ],
            porEstado=[
                StatusCount(estado=row.estado, cantidad=row.cantidad)
                for row in self.repository.sales_by_status()
            ]
        )

    def get_sales_detail(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        estado: Optional[str] = None
    ) -> List[SaleReportRow]:
        if date_from and date_to and date_from > date_to:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La fecha inicial no puede ser mayor que la final"
            )

        return [
            SaleReportRow(
                id=sale.id,
                numero_venta=sale.numero_venta,
                fecha=sale.fecha,
                estado=sale.estado,
                tipo_comprobante=sale.tipo_comprobante,
                id_cliente=sale.id_cliente,
                id_usuario=sale.id_usuario,
                sucursal_id=sale.sucursal_id,
                total=float(sale.total or 0),
                op_gravada=float(sale.op_gravada or 0),
                igv=float(sale.igv or 0)
            )
            for sale in self.repository.get_sales(date_from, date_to, estado)
        ]

    def get_sales_by_day(self, month: Optional[int], year: Optional[int]) -> List[DaySales]:
        self._require_month_and_year(month, year)
        return [
            DaySales(
                dia=row.dia,
                cantidad_ventas=row.cantidad_ventas,
                total_vendido=float(row.total_vendido or 0)
            )
            for row in self.repository.approved_sales_by_day(month, year)
        ]

    def get_top_products(self) -> List[TopProduct]:
        return [
            TopProduct(
                producto=row.producto,
                total_vendido=int(row.total_vendido or 0),
                ingreso_total=float(row.ingreso_total or 0)
            )
            for row in self.repository.top_products(10)
        ]

    def get_sales_by_category(self) -> List[CategorySales]:
        return [
            CategorySales(
                categoria=row.categoria,
                cantidad_total=int(row.cantidad_total or 0),
                ingreso_total=float(row.ingreso_total or 0)
            )
            for row in self.repository.sales_by_category()
        ]

    def get_daily_average(self, month: Optional[int], year: Optional[int]) -> DailyAverage:
        """Promedio de ventas e ingreso por día con ventas en el mes"""
        self._require_month_and_year(month, year)
        count, income, days = self.repository.approved_totals_for_month(month, year)
        if not days:
            return DailyAverage(promedio_diario=None, ingreso_promedio_diario=None)
        return DailyAverage(
            promedio_diario=round(count / days, 4),
            ingreso_promedio_diario=round(float(income or 0) / days, 2)
        )

    def get_monthly_average(self, year: Optional[int]) -> MonthlyAverage:
        """Promedio de ventas e ingreso por mes con ventas en el año"""
        if not year:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Se requiere el año")
        count, income, months = self.repository.approved_totals_for_year(year)
        if not months:
            return MonthlyAverage(promedio_mensual=None, ingreso_promedio_mensual=None)
        return MonthlyAverage(
            promedio_mensual=round(count / months, 4),
            ingreso_promedio_mensual=round(float(income or 0) / months, 2)
        )

    def get_last_months(self) -> List[MonthSales]:
        return [
            MonthSales(
                mes=self._month_key(row.anio, row.mes),
                total_ventas=row.cantidad,
                total_monto=float(row.total or 0)
            )
            for row in self.repository.paid_sales_by_month(6, only_approved=True)
        ]

    def _require_month_and_year(self, month: Optional[int], year: Optional[int]):
        if not month or not year:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Se requiere mes y año")

    @staticmethod
    def _month_key(year, month) -> str:
        return f"{int(year):04d}-{int(month):02d}"
