"""Customer order (encargo) records with deposits."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Mapping, Optional

from ..utils.constants import ORDER_PENDING
from ..utils.datetime_utils import parse_api_datetime
from .api_record import decimal_or_none, decimal_or_zero, str_or_none


@dataclass(frozen=True)
class OrderItem:
    producto_id: str
    cantidad: Decimal
    precio_unitario: Optional[Decimal] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "OrderItem":
        return cls(
            producto_id=str(data.get("productoId", "")),
            cantidad=decimal_or_zero(data, "cantidad"),
            precio_unitario=decimal_or_none(data, "precioUnitario"),
        )


@dataclass(frozen=True)
class OrderDeposit:
    """Advance payment (abono) toward an order."""

    monto: Decimal
    medio_pago: Optional[str] = None
    fecha: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "OrderDeposit":
        return cls(
            monto=decimal_or_zero(data, "monto"),
            medio_pago=str_or_none(data, "medioPago"),
            fecha=parse_api_datetime(data.get("fecha")),
            id=str_or_none(data, "id"),
        )


@dataclass(frozen=True)
class Order:
    """
    Special order for later delivery.

    Attributes:
        id: Server identifier
        cliente: Customer name
        fecha_entrega: Delivery date
        estado: PENDIENTE, ENTREGADO or CANCELADO
        total_estimado: Estimated total, if priced
        items: Ordered products
        abonos: Deposits received so far
    """

    id: str
    cliente: str
    fecha_entrega: Optional[datetime]
    estado: str = ORDER_PENDING
    total_estimado: Optional[Decimal] = None
    items: List[OrderItem] = field(default_factory=list)
    abonos: List[OrderDeposit] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Mapping) -> "Order":
        return cls(
            id=str(data["id"]),
            cliente=data.get("cliente", ""),
            fecha_entrega=parse_api_datetime(data.get("fechaEntrega")),
            estado=data.get("estado", ORDER_PENDING),
            total_estimado=decimal_or_none(data, "totalEstimado"),
            items=[OrderItem.from_api(item) for item in data.get("items") or []],
            abonos=[OrderDeposit.from_api(item) for item in data.get("abonos") or []],
        )
