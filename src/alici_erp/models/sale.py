"""Sale (venta) and waste (descarte) records."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Mapping, Optional

from ..utils.constants import SALE_COMPLETE
from ..utils.datetime_utils import parse_api_datetime
from .api_record import decimal_or_zero, str_or_none
from .payment import PaymentTender


@dataclass(frozen=True)
class SaleItem:
    producto_id: str
    producto_nombre: str
    cantidad: Decimal
    precio_unitario: Decimal
    subtotal: Decimal

    @classmethod
    def from_api(cls, data: Mapping) -> "SaleItem":
        return cls(
            producto_id=str(data.get("productoId", "")),
            producto_nombre=data.get("productoNombre", ""),
            cantidad=decimal_or_zero(data, "cantidad"),
            precio_unitario=decimal_or_zero(data, "precioUnitario"),
            subtotal=decimal_or_zero(data, "subtotal"),
        )


@dataclass(frozen=True)
class Sale:
    """Completed (or voided) sale."""

    id: str
    fecha: Optional[datetime]
    total_nio: Decimal
    estado: str = SALE_COMPLETE
    items: List[SaleItem] = field(default_factory=list)
    pagos: List[PaymentTender] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Mapping) -> "Sale":
        return cls(
            id=str(data["id"]),
            fecha=parse_api_datetime(data.get("fecha")),
            total_nio=decimal_or_zero(data, "totalNIO"),
            estado=data.get("estado", SALE_COMPLETE),
            items=[SaleItem.from_api(item) for item in data.get("items") or []],
            pagos=[PaymentTender.from_api(item) for item in data.get("pagos") or []],
        )


@dataclass(frozen=True)
class WasteItem:
    """Registered product waste."""

    id: str
    producto_id: str
    cantidad: Decimal
    motivo: str
    fecha: Optional[datetime] = None
    producto_nombre: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "WasteItem":
        return cls(
            id=str(data["id"]),
            producto_id=str(data.get("productoId", "")),
            cantidad=decimal_or_zero(data, "cantidad"),
            motivo=data.get("motivo", ""),
            fecha=parse_api_datetime(data.get("fecha") or data.get("createdAt")),
            producto_nombre=str_or_none(data, "productoNombre"),
        )
