"""Sales Service - the till cart, checkout and sales history (/sales).

Checkout is blocked locally, before any request, when the cart is empty
or the tenders do not cover the total. Tender amounts travel in cents;
a USD tender carries the exchange rate captured at checkout time.

Example Usage:
    >>> cart = Cart()
    >>> cart.add(product, 2)
    >>> checkout(ctx, cart, nio_amount=50, usd_amount=2)
    MutationResult(ok=True, ...)
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from ..models.api_record import json_number
from ..models.product import Product
from ..models.sale import Sale
from ..utils.constants import SALE_VOIDED, ZERO
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import EmptyCart, ValidationError
from .logging_utils import get_service_logger
from .mutations import MutationResult, perform_mutation
from .payment_service import (
    PaymentReconciliation,
    reconcile_payment,
    require_sufficient_payment,
    tender_payload,
    tenders_from_amounts,
)

logger = get_service_logger(__name__)

SALES_PATH = "/sales"
CHECKOUT_PATH = f"{SALES_PATH}/checkout"
REPORT_PATH = f"{SALES_PATH}/report/excel"


def _is_whole(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class CartItem:
    product: Product
    cantidad: int

    @property
    def subtotal(self) -> Decimal:
        return self.product.precio_venta * self.cantidad


class Cart:
    """
    Products picked at the till.

    Quantities are whole units, at least one per line, and never exceed the
    product's available stock. A bad quantity raises ValidationError and
    leaves the cart unchanged.
    """

    def __init__(self):
        self._items: Dict[str, CartItem] = {}

    def add(self, product: Product, cantidad: int = 1) -> CartItem:
        if not _is_whole(cantidad) or cantidad <= 0:
            raise ValidationError([f"{product.nombre}: cantidad inválida {cantidad!r}"])
        if product.stock_disponible <= 0:
            raise ValidationError([f"{product.nombre}: producto sin stock"])
        item = self._items.get(product.id)
        current = item.cantidad if item else 0
        if current + cantidad > product.stock_disponible:
            raise ValidationError([f"{product.nombre}: no hay más stock disponible"])
        if item is None:
            item = self._items[product.id] = CartItem(product=product, cantidad=cantidad)
        else:
            item.cantidad += cantidad
        return item

    def update_quantity(self, product_id: str, delta: int) -> Optional[CartItem]:
        """Change a line by delta; a line reaching zero is removed (returns None)."""
        if not _is_whole(delta):
            raise ValidationError([f"Cantidad inválida {delta!r}"])
        item = self._items.get(product_id)
        if item is None:
            return None
        quantity = item.cantidad + delta
        if quantity <= 0:
            del self._items[product_id]
            return None
        if quantity > item.product.stock_disponible:
            raise ValidationError([f"{item.product.nombre}: no hay más stock disponible"])
        item.cantidad = quantity
        return item

    def remove(self, product_id: str) -> None:
        self._items.pop(product_id, None)

    def clear(self) -> None:
        self._items.clear()

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    @property
    def total(self) -> Decimal:
        return sum((item.subtotal for item in self._items.values()), ZERO)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


def quote_checkout(ctx, cart: Cart, nio_amount=0, usd_amount=0) -> PaymentReconciliation:
    """
    Reconcile the till inputs against the cart total without submitting.

    Raises:
        InvalidExchangeRate: A USD amount is given and no valid rate is loaded
    """
    tenders = tenders_from_amounts(nio_amount, usd_amount, ctx.exchange_rate)
    return reconcile_payment(cart.total, tenders)


def checkout(ctx, cart: Cart, nio_amount=0, usd_amount=0) -> MutationResult:
    """
    POST /sales/checkout {items, pagos}.

    The cart is cleared after a successful sale.

    Raises:
        EmptyCart: The cart has no items
        InsufficientPayment: The tenders do not cover the total
        InvalidExchangeRate: A USD amount is given and no valid rate is loaded
    """
    if cart.is_empty():
        raise EmptyCart()
    tenders = tenders_from_amounts(nio_amount, usd_amount, ctx.exchange_rate)
    reconciliation = require_sufficient_payment(reconcile_payment(cart.total, tenders))

    payload = {
        "items": [
            {"productoId": item.product.id, "cantidad": json_number(item.cantidad)}
            for item in cart.items
        ],
        "pagos": [tender_payload(tender) for tender in tenders],
    }
    logger.debug(f"Checkout total {reconciliation.total_due}, change {reconciliation.change}")
    result = perform_mutation(
        ctx,
        Mutation.CHECKOUT,
        lambda: ctx.client.post(CHECKOUT_PATH, json=payload),
        success_message="Venta procesada exitosamente",
        failure_message="Error al procesar venta",
    )
    if result.ok:
        cart.clear()
    return result


def _range_params(date_from: Optional[str], date_to: Optional[str]) -> Optional[dict]:
    params = {}
    if date_from:
        params["from"] = date_from
    if date_to:
        params["to"] = date_to
    return params or None


def list_sales(ctx, date_from: Optional[str] = None, date_to: Optional[str] = None, force: bool = False) -> List[Sale]:
    """Sales in a date range; an empty range sends no query parameters."""
    params = _range_params(date_from, date_to)
    return ctx.cache.fetch(
        keys.sales(date_from or None, date_to or None),
        lambda: [Sale.from_api(row) for row in ctx.client.get(SALES_PATH, params=params) or []],
        force=force,
    )


def sales_total(sales: List[Sale]) -> Decimal:
    """Sum of the listed sales, voided ones excluded."""
    return sum((sale.total_nio for sale in sales if sale.estado != SALE_VOIDED), ZERO)


def cancel_sale(ctx, sale_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.CANCEL_SALE,
        lambda: ctx.client.delete(f"{SALES_PATH}/{sale_id}"),
        success_message="Venta anulada exitosamente",
        failure_message="Error al anular venta",
    )


def download_receipt_pdf(ctx, sale_id: str) -> bytes:
    """Invoice PDF for one sale (factura-<id>.pdf)."""
    return ctx.client.get_raw(f"{SALES_PATH}/{sale_id}/pdf")


def download_sales_report(ctx, date_from: Optional[str] = None, date_to: Optional[str] = None) -> bytes:
    """Excel workbook of the sales in a date range (reporte-ventas.xlsx)."""
    return ctx.client.get_raw(REPORT_PATH, params=_range_params(date_from, date_to))
