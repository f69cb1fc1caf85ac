# app/modules/sales/service.py
import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import List, Dict, Any

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.shared.database.models import Sale, Product
from app.shared.utils.money import line_subtotal, split_igv, to_money
from app.modules.payments.repository import PaymentsRepository
from .repository import SalesRepository
from .schemas import (
    SaleCreateRequest, SaleCreatedResponse, SaleSummary, SaleByBranch,
    SaleResponse, SaleLineResponse, SaleStatus
)

logger = logging.getLogger(__name__)

ALLOWED_STATUS_UPDATES = (SaleStatus.aprobado.value, SaleStatus.cancelado.value)

class SalesService:
    """
    Servicio principal para el registro y ciclo de vida de las ventas
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)
        self.payments = PaymentsRepository(db)

    # ==================== REGISTRO DE VENTA ====================

    def create_sale(self, sale_data: SaleCreateRequest, seller_id: int) -> SaleCreatedResponse:
        """
        Registrar una venta completa en una única transacción:

        1. Validar cliente, sucursal y productos
        2. Resolver precios (precio enviado o precio de lista)
        3. Verificar stock con las filas de producto bloqueadas
        4. Insertar cabecera y líneas, descontar stock
        5. Calcular total, operación gravada e IGV
        """
        if not sale_data.productos:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Debe agregar al menos un producto"
            )

        try:
            if not self.repository.get_client(sale_data.id_cliente):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")

            if sale_data.sucursal_id is not None and not self.repository.get_branch(sale_data.sucursal_id):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sucursal no encontrada")

            products = self.repository.lock_products(item.id_producto for item in sale_data.productos)
            lines = self._resolve_lines(sale_data, products)
            self._validate_stock(lines, products)

            sale = self.repository.create_sale(
                seller_id=seller_id,
                client_id=sale_data.id_cliente,
                branch_id=sale_data.sucursal_id,
                invoice_kind=sale_data.tipo_comprobante.value
            )

            total = Decimal("0")
            for line in lines:
                self.repository.add_detail(
                    sale_id=sale.id,
                    product_id=line["product"].id,
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    subtotal=line["subtotal"]
                )
                self.repository.adjust_stock(line["product"], -line["quantity"])
                total += line["subtotal"]

            taxes = split_igv(total)
            sale.total = taxes.total
            sale.op_gravada = taxes.op_gravada
            sale.igv = taxes.igv
            sale.numero_venta = f"V-{sale.id:08d}"

            self.db.commit()

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error al registrar venta: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error al registrar la venta"
            )

        logger.info(f"Venta {sale.numero_venta} registrada por usuario {seller_id}: total {taxes.total}")

        return SaleCreatedResponse(
            message="Venta registrada",
            id=sale.id,
            numero_venta=sale.numero_venta,
            total=float(taxes.total),
            op_gravada=float(taxes.op_gravada),
            igv=float(taxes.igv)
        )

    def _resolve_lines(
        self,
        sale_data: SaleCreateRequest,
        products: Dict[int, Product]
    ) -> List[Dict[str, Any]]:
        """
        Precio enviado por el vendedor o, en su defecto, precio de lista
        """
        lines = []
        for item in sale_data.productos:
            product = products.get(item.id_producto)
            if not product:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Producto ID {item.id_producto} no encontrado"
                )
            if not product.activo:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"El producto \"{product.nombre}\" no está disponible"
                )

            unit_price = to_money(item.precio_unitario if item.precio_unitario is not None else product.precio)
            if unit_price <= 0:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"El producto \"{product.nombre}\" no tiene precio"
                )

            lines.append({
                "product": product,
                "quantity": item.cantidad,
                "unit_price": unit_price,
                "subtotal": line_subtotal(item.cantidad, unit_price)
            })
        return lines

    def _validate_stock(self, lines: List[Dict[str, Any]], products: Dict[int, Product]):
        # Un mismo producto puede aparecer en varias líneas
        required = OrderedDict()
        for line in lines:
            required[line["product"].id] = required.get(line["product"].id, 0) + line["quantity"]

        for product_id, quantity in required.items():
            product = products[product_id]
            if (product.stock or 0) < quantity:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=(
                        f"Stock insuficiente para el producto \"{product.nombre}\". "
                        f"Stock actual: {product.stock}, requerido: {quantity}"
                    )
                )

    # ==================== CAMBIOS DE ESTADO ====================

    def update_status(self, sale_id: int, new_status: str) -> Dict[str, Any]:
        """
        Transiciones permitidas:
        pendiente -> aprobado | cancelado, aprobado -> cancelado.
        Cancelar devuelve el stock descontado al registrar la venta.
        """
        if new_status not in ALLOWED_STATUS_UPDATES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Estado inválido")

        try:
            # Estado releído con la fila bloqueada hasta el commit
            sale = self.repository.lock_sale(sale_id)
            if not sale:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")

            previous = sale.estado
            if previous == new_status:
                self.db.rollback()
                return {"message": f"Venta {new_status} correctamente"}

            if previous == SaleStatus.cancelado.value:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="La venta ya fue cancelada y no puede cambiar de estado"
                )

            if new_status == SaleStatus.cancelado.value:
                products = self.repository.lock_products(d.id_producto for d in sale.detalles)
                for detail in sale.detalles:
                    self.repository.adjust_stock(products[detail.id_producto], detail.cantidad)
                self._reverse_credit_charge(sale)

            sale.estado = new_status
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error al actualizar estado de venta {sale_id}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error al actualizar el estado de la venta"
            )

        logger.info(f"Venta {sale.numero_venta}: {previous} -> {new_status}")
        return {"message": f"Venta {new_status} correctamente"}

    def _reverse_credit_charge(self, sale: Sale):
        """Anular la deuda generada por un cobro a crédito de la venta"""
        if not sale.comprobante:
            return

        charge = self.payments.get_credit_charge(sale.comprobante.id)
        if charge:
            self.payments.add_credit_reversal(charge, f"Anulación venta {sale.numero_venta}")
            logger.info(f"Deuda de venta {sale.numero_venta} anulada ({charge.total})")

    def cancel_sale(self, sale_id: int) -> Dict[str, Any]:
        self.update_status(sale_id, SaleStatus.cancelado.value)
        return {"message": "Venta cancelada correctamente"}

    # ==================== CONSULTAS ====================

    def get_sales(self, estado: str = None) -> List[SaleSummary]:
        return [self._to_summary(row) for row in self.repository.get_sales(estado)]

    def get_pending_sales(self) -> List[SaleSummary]:
        return self.get_sales(SaleStatus.pendiente.value)

    def get_seller_sales_for_day(self, seller_id: int, day: date) -> List[SaleSummary]:
        return [
            self._to_summary(row)
            for row in self.repository.get_sales_by_seller_and_date(seller_id, day)
        ]

    def get_sales_by_branch(self, branch_id: int, date_from: date, date_to: date) -> List[SaleByBranch]:
        if date_from > date_to:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La fecha inicial no puede ser mayor que la final"
            )

        rows = self.repository.get_sales_by_branch_and_dates(branch_id, date_from, date_to)
        if not rows:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")

        return [
            SaleByBranch(
                id=row.id,
                numero_venta=row.numero_venta,
                fecha=row.fecha,
                estado=row.estado,
                vendedor=row.vendedor
            )
            for row in rows
        ]

    def get_sale(self, sale_id: int) -> SaleResponse:
        sale = self.repository.get_sale_by_id(sale_id)
        if not sale:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")
        return self._to_response(sale)

    def _to_summary(self, row) -> SaleSummary:
        return SaleSummary(
            id=row.id,
            numero_venta=row.numero_venta,
            fecha=row.fecha,
            estado=row.estado,
            cliente_nombre=row.cliente_nombre,
            cliente_telefono=row.cliente_telefono,
            total=float(row.total or 0)
        )

    def _to_response(self, sale: Sale) -> SaleResponse:
        return SaleResponse(
            id=sale.id,
            numero_venta=sale.numero_venta,
            fecha=sale.fecha,
            estado=sale.estado,
            tipo_comprobante=sale.tipo_comprobante,
            id_cliente=sale.id_cliente,
            id_usuario=sale.id_usuario,
            sucursal_id=sale.sucursal_id,
            total=float(sale.total),
            op_gravada=float(sale.op_gravada),
            igv=float(sale.igv),
            detalles=[
                SaleLineResponse(
                    id=d.id,
                    id_producto=d.id_producto,
                    producto=d.producto.nombre if d.producto else "",
                    cantidad=d.cantidad,
                    precio_unitario=float(d.precio_unitario),
                    subtotal=float(d.subtotal)
                )
                for d in sale.detalles
            ],
            comprobante_id=sale.comprobante.id if sale.comprobante else None
        )
