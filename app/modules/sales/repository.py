# app/modules/sales/repository.py
from datetime import datetime, date
from typing import List, Optional, Dict, Iterable
from decimal import Decimal
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import Date, func, desc

from app.shared.database.models import (
    Sale, SaleDetail, Product, Client, Branch, User
)

class SalesRepository:
    """
    Repositorio para todas las operaciones de datos relacionadas con ventas.

    Los métodos de escritura solo hacen flush; el commit/rollback lo controla
    el servicio para que el registro de una venta sea una única transacción.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== REFERENCIAS ====================

    def get_client(self, client_id: int) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def get_branch(self, branch_id: int) -> Optional[Branch]:
        return self.db.query(Branch).filter(Branch.id == branch_id).first()

    def lock_products(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Obtener productos bloqueando sus filas (SELECT ... FOR UPDATE)
        hasta el fin de la transacción. Orden por id para evitar deadlocks.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        products = self.db.query(Product).filter(
            Product.id.in_(ids)
        ).order_by(Product.id).with_for_update().all()
        return {p.id: p for p in products}

    # ==================== ESCRITURA ====================

    def create_sale(
        self,
        seller_id: int,
        client_id: int,
        branch_id: Optional[int],
        invoice_kind: str
    ) -> Sale:
        sale = Sale(
            id_usuario=seller_id,
            id_cliente=client_id,
            sucursal_id=branch_id,
            tipo_comprobante=invoice_kind,
            estado='pendiente',
            fecha=datetime.now()
        )
        self.db.add(sale)
        self.db.flush()
        return sale

    def add_detail(
        self,
        sale_id: int,
        product_id: int,
        quantity: int,
        unit_price: Decimal,
        subtotal: Decimal
    ) -> SaleDetail:
        detail = SaleDetail(
            id_venta=sale_id,
            id_producto=product_id,
            cantidad=quantity,
            precio_unitario=unit_price,
            subtotal=subtotal
        )
        self.db.add(detail)
        self.db.flush()
        return detail

    def adjust_stock(self, product: Product, delta: int):
        product.stock = (product.stock or 0) + delta
        self.db.flush()

    def lock_sale(self, sale_id: int) -> Optional[Sale]:
        """Cabecera de la venta bloqueada hasta el commit, con el estado vigente"""
        return self.db.query(Sale).filter(
            Sale.id == sale_id
        ).populate_existing().with_for_update().first()

    # ==================== CONSULTAS ====================

    def get_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).options(
            joinedload(Sale.detalles).joinedload(SaleDetail.producto),
            joinedload(Sale.comprobante)
        ).filter(Sale.id == sale_id).first()

    def _summary_query(self):
        return self.db.query(
            Sale.id,
            Sale.numero_venta,
            Sale.fecha,
            Sale.estado,
            Client.nombre.label("cliente_nombre"),
            Client.telefono.label("cliente_telefono"),
            Sale.total
        ).join(Client, Sale.id_cliente == Client.id)

    def get_sales(self, estado: Optional[str] = None) -> List:
        query = self._summary_query()
        if estado:
            query = query.filter(Sale.estado == estado)
        return query.order_by(desc(Sale.fecha), desc(Sale.id)).all()

    def get_sales_by_seller_and_date(self, seller_id: int, date_filter: date) -> List:
        return self._summary_query().filter(
            Sale.id_usuario == seller_id,
            func.date(Sale.fecha, type_=Date) == date_filter
        ).order_by(desc(Sale.fecha), desc(Sale.id)).all()

    def get_sales_by_branch_and_dates(self, branch_id: int, date_from: date, date_to: date) -> List:
        return self.db.query(
            Sale.id,
            Sale.numero_venta,
            Sale.fecha,
            Sale.estado,
            User.nombre.label("vendedor")
        ).join(
            User, User.id == Sale.id_usuario
        ).filter(
            Sale.sucursal_id == branch_id,
            func.date(Sale.fecha, type_=Date).between(date_from, date_to)
        ).order_by(desc(Sale.fecha), desc(Sale.id)).all()
