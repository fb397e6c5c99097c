"""Orders Service - customer orders for later delivery (/sales/orders).

An order (encargo) is created with its items and a delivery date,
collects deposits (abonos) while pending, and is finalized with the
remaining payment, which may mix NIO and USD.

Example Usage:
    >>> create_order(ctx, {"cliente": "Ana", "fechaEntrega": "2025-03-20",
    ...                    "items": [{"productoId": "p1", "cantidad": 2}]})
    >>> add_deposit(ctx, order.id, {"monto": 200, "medioPago": "EFECTIVO"})
    >>> outstanding_balance(order)
"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from ..models.api_record import json_number
from ..models.order import Order, OrderDeposit
from ..utils.constants import (
    DEPOSIT_METHODS,
    ORDER_CANCELLED,
    ORDER_DELIVERED,
    ORDER_UPCOMING_DAYS,
    PRIMARY_CURRENCY,
    SECONDARY_CURRENCY,
    ZERO,
)
from ..utils.datetime_utils import utc_now
from ..utils.validators import (
    to_decimal,
    validate_deposit_data,
    validate_finalize_data,
    validate_order_data,
)
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

ORDERS_PATH = "/sales/orders"

DUE_DELIVERED = "Entregado"
DUE_CANCELLED = "Cancelado"
DUE_OVERDUE = "Vencido"
DUE_UPCOMING = "Próximo"
DUE_ON_TIME = "En tiempo"

_SECONDS_PER_DAY = 24 * 60 * 60


def list_orders(ctx, status: Optional[str] = None, force: bool = False) -> List[Order]:
    """Orders sorted by delivery date; status filters locally (None = all)."""

    def fetch() -> List[Order]:
        orders = [Order.from_api(row) for row in ctx.client.get(ORDERS_PATH) or []]
        if status is not None:
            orders = [order for order in orders if order.estado == status]
        return sorted(orders, key=lambda order: (order.fecha_entrega is None, order.fecha_entrega or utc_now()))

    return ctx.cache.fetch(keys.orders(status), fetch, force=force)


def get_order(ctx, order_id: str, force: bool = False) -> Order:
    return ctx.cache.fetch(
        keys.order_detail(order_id),
        lambda: Order.from_api(ctx.client.get(f"{ORDERS_PATH}/{order_id}")),
        force=force,
    )


def sum_deposits(deposits: Iterable[OrderDeposit]) -> Decimal:
    return sum((deposit.monto for deposit in deposits), ZERO)


def outstanding_balance(order: Order) -> Decimal:
    """Estimated total minus deposits, never below zero."""
    remaining = (order.total_estimado or ZERO) - sum_deposits(order.abonos)
    return remaining if remaining > 0 else ZERO


def due_status(order: Order, now: Optional[datetime] = None) -> str:
    """
    Delivery label for an order.

    Delivered and cancelled orders report their state. Pending ones are
    Vencido once the delivery date has passed, Próximo when it falls
    within the next two days (rounded up) and En tiempo otherwise.
    """
    if order.estado == ORDER_DELIVERED:
        return DUE_DELIVERED
    if order.estado == ORDER_CANCELLED:
        return DUE_CANCELLED
    if order.fecha_entrega is None:
        return DUE_ON_TIME
    now = now or utc_now()
    days = math.ceil((order.fecha_entrega - now).total_seconds() / _SECONDS_PER_DAY)
    if days < 0:
        return DUE_OVERDUE
    if days <= ORDER_UPCOMING_DAYS:
        return DUE_UPCOMING
    return DUE_ON_TIME


def order_payload(data: dict) -> dict:
    """
    Validate and shape a new order; item rows without a product or a
    positive quantity are dropped.

    Raises:
        ValidationError: Missing client or date, or no usable item
    """
    is_valid, errors = validate_order_data(data)
    if not is_valid:
        raise ValidationError(errors)
    items = []
    for row in data.get("items") or []:
        quantity = to_decimal(row.get("cantidad"))
        if row.get("productoId") and quantity is not None and quantity > 0:
            items.append({"productoId": str(row["productoId"]), "cantidad": json_number(quantity)})
    return {"cliente": data["cliente"].strip(), "fechaEntrega": data["fechaEntrega"], "items": items}


def create_order(ctx, data: dict) -> MutationResult:
    payload = order_payload(data)
    return perform_mutation(
        ctx,
        Mutation.CREATE_ORDER,
        lambda: ctx.client.post(ORDERS_PATH, json=payload),
        success_message="Encargo creado",
        failure_message="No se pudo crear el encargo",
    )


def add_deposit(ctx, order_id: str, data: dict) -> MutationResult:
    """
    POST /sales/orders/{id}/deposits {monto, medioPago}.

    Raises:
        ValidationError: monto <= 0 or an unknown payment method
    """
    is_valid, errors = validate_deposit_data(data)
    method = data.get("medioPago") or DEPOSIT_METHODS[0]
    if method not in DEPOSIT_METHODS:
        is_valid = False
        errors.append(f"Medio de pago: debe ser uno de {', '.join(DEPOSIT_METHODS)}")
    if not is_valid:
        raise ValidationError(errors)
    payload = {"monto": json_number(data["monto"]), "medioPago": method}
    return perform_mutation(
        ctx,
        Mutation.ADD_DEPOSIT,
        lambda: ctx.client.post(f"{ORDERS_PATH}/{order_id}/deposits", json=payload),
        success_message="Abono registrado",
        failure_message="No se pudo registrar el abono",
        order_id=order_id,
    )


def finalize_payload(data: dict, default_rate=None) -> dict:
    """
    Payments that close an order: {pagos: [{moneda, cantidad, tasa?}], descuento: 0}.

    A USD payment carries tasaUSD when given, else default_rate.

    Raises:
        ValidationError: No payment in either currency, or a bad rate
    """
    is_valid, errors = validate_finalize_data(data)
    if not is_valid:
        raise ValidationError(errors)
    nio = to_decimal(data.get("pagoNIO") or 0) or ZERO
    usd = to_decimal(data.get("pagoUSD") or 0) or ZERO
    pagos = []
    if nio > 0:
        pagos.append({"moneda": PRIMARY_CURRENCY, "cantidad": json_number(nio)})
    if usd > 0:
        pago = {"moneda": SECONDARY_CURRENCY, "cantidad": json_number(usd)}
        rate = data.get("tasaUSD") or default_rate
        if rate not in (None, ""):
            pago["tasa"] = json_number(rate)
        pagos.append(pago)
    return {"pagos": pagos, "descuento": 0}


def finalize_order(ctx, order_id: str, data: dict) -> MutationResult:
    payload = finalize_payload(data, ctx.exchange_rate)
    return perform_mutation(
        ctx,
        Mutation.FINALIZE_ORDER,
        lambda: ctx.client.post(f"{ORDERS_PATH}/{order_id}/finalize", json=payload),
        success_message="Encargo finalizado",
        failure_message="No se pudo finalizar el encargo",
        order_id=order_id,
    )


def update_order(ctx, order_id: str, data: dict) -> MutationResult:
    """PUT /sales/orders/{id} with the same fields as a new order."""
    payload = order_payload(data)
    return perform_mutation(
        ctx,
        Mutation.UPDATE_ORDER,
        lambda: ctx.client.put(f"{ORDERS_PATH}/{order_id}", json=payload),
        success_message="Encargo actualizado",
        failure_message="No se pudo actualizar el encargo",
        order_id=order_id,
    )
