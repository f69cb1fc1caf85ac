# app/modules/reports/repository.py
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import Date, func, desc, extract, distinct

from app.shared.database.models import Sale, SaleDetail, Payment, Product

APPROVED = 'aprobado'

class ReportsRepository:
    """
    Consultas agregadas. Los montos de venta se toman de pagos, por lo que
    solo cuentan las ventas cobradas.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _day():
        return func.date(Sale.fecha, type_=Date)

    @staticmethod
    def _year():
        return extract('year', Sale.fecha)

    @staticmethod
    def _month():
        return extract('month', Sale.fecha)

    # ==================== RESUMEN ====================

    def paid_sales_by_day(self, limit: int = 30) -> List:
        day = self._day().label('fecha')
        return self.db.query(
            day,
            func.count(Sale.id).label('cantidad'),
            func.sum(Payment.total).label('total')
        ).join(Payment, Payment.id_venta == Sale.id)\
         .group_by(day)\
         .order_by(desc('fecha'))\
         .limit(limit).all()

    def paid_sales_by_month(self, limit: int = 12, only_approved: bool = False) -> List:
        year = self._year().label('anio')
        month = self._month().label('mes')
        query = self.db.query(
            year,
            month,
            func.count(Sale.id).label('cantidad'),
            func.sum(Payment.total).label('total')
        ).join(Payment, Payment.id_venta == Sale.id)

        if only_approved:
            query = query.filter(Sale.estado == APPROVED)

        return query.group_by(year, month)\
            .order_by(desc('anio'), desc('mes'))\
            .limit(limit).all()

    def payments_by_invoice_kind(self) -> List:
        return self.db.query(
            Payment.tipo_comprobante,
            func.count(Payment.id).label('cantidad'),
            func.sum(Payment.total).label('total')
        ).group_by(Payment.tipo_comprobante).all()

    def sales_by_status(self) -> List:
        return self.db.query(
            Sale.estado,
            func.count(Sale.id).label('cantidad')
        ).group_by(Sale.estado).all()

    # ==================== DETALLE ====================

    def get_sales(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        estado: Optional[str] = None
    ) -> List[Sale]:
        query = self.db.query(Sale)
        if date_from:
            query = query.filter(self._day() >= date_from)
        if date_to:
            query = query.filter(self._day() <= date_to)
        if estado:
            query = query.filter(Sale.estado == estado)
        return query.order_by(Sale.fecha, Sale.id).all()

    # ==================== VENTAS APROBADAS ====================

    def approved_sales_by_day(self, month: int, year: int) -> List:
        day = self._day().label('dia')
        return self.db.query(
            day,
            func.count(Sale.id).label('cantidad_ventas'),
            func.sum(Payment.total).label('total_vendido')
        ).join(Payment, Payment.id_venta == Sale.id)\
         .filter(
             Sale.estado == APPROVED,
             self._month() == month,
             self._year() == year
         ).group_by(day)\
         .order_by('dia').all()

    def top_products(self, limit: int = 10) -> List:
        return self.db.query(
            Product.nombre.label('producto'),
            func.sum(SaleDetail.cantidad).label('total_vendido'),
            func.sum(SaleDetail.subtotal).label('ingreso_total')
        ).join(Sale, SaleDetail.id_venta == Sale.id)\
         .join(Product, SaleDetail.id_producto == Product.id)\
         .filter(Sale.estado == APPROVED)\
         .group_by(Product.id, Product.nombre)\
         .order_by(desc('total_vendido'))\
         .limit(limit).all()

    def sales_by_category(self) -> List:
        return self.db.query(
            Product.categoria,
            func.sum(SaleDetail.cantidad).label('cantidad_total'),
            func.sum(SaleDetail.subtotal).label('ingreso_total')
        ).join(Product, SaleDetail.id_producto == Product.id)\
         .join(Sale, SaleDetail.id_venta == Sale.id)\
         .filter(Sale.estado == APPROVED)\
         .group_by(Product.categoria)\
         .order_by(desc('ingreso_total')).all()

    def approved_totals_for_month(self, month: int, year: int):
        """(ventas, ingreso, días con ventas)"""
        return self.db.query(
            func.count(Sale.id),
            func.sum(Payment.total),
            func.count(distinct(self._day()))
        ).join(Payment, Payment.id_venta == Sale.id)\
         .filter(
             Sale.estado == APPROVED,
             self._month() == month,
             self._year() == year
         ).one()

    def approved_totals_for_year(self, year: int):
        """(ventas, ingreso, meses con ventas)"""
        return self.db.query(
            func.count(Sale.id),
            func.sum(Payment.total),
            func.count(distinct(self._month()))
        ).join(Payment, Payment.id_venta == Sale.id)\
         .filter(
             Sale.estado == APPROVED,
             self._year() == year
         ).one()
