"""Ingredient (insumo) record as served by the inventory API."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from .api_record import decimal_or_zero, str_or_none


@dataclass(frozen=True)
class Ingredient:
    """
    Raw material tracked in inventory.

    Stock and average cost are both expressed in the ingredient's native
    unit (unidad). Stock changes happen server-side; the client only reads
    the average cost for recipe costing.

    Attributes:
        id: Server identifier
        nombre: Display name
        unidad: Native unit of measure (e.g. "KG")
        stock: Current stock in native units
        costo_promedio: Average cost per native unit (primary currency)
        proveedor_principal_id: Main provider, if assigned
    """

    id: str
    nombre: str
    unidad: str
    stock: Decimal = Decimal("0")
    costo_promedio: Decimal = Decimal("0")
    proveedor_principal_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "Ingredient":
        return cls(
            id=str(data["id"]),
            nombre=data.get("nombre", ""),
            unidad=data.get("unidad", ""),
            stock=decimal_or_zero(data, "stock"),
            costo_promedio=decimal_or_zero(data, "costoPromedio"),
            proveedor_principal_id=str_or_none(data, "proveedorPrincipalId"),
        )
