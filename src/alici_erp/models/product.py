"""Product (producto) and inventory category records."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from .api_record import decimal_or_none, decimal_or_zero, str_or_none


@dataclass(frozen=True)
class Product:
    """
    Finished product sold at the counter.

    Attributes:
        id: Server identifier
        nombre: Display name
        precio_venta: Sale price (primary currency)
        stock_disponible: Units available for sale
        categoria: Free-text category label, if any
        categoria_id: Inventory category reference, if any
        costo_unitario: Production cost per unit, if known
        precio_unitario: Purchase price per unit for resale items, if known
    """

    id: str
    nombre: str
    precio_venta: Decimal = Decimal("0")
    stock_disponible: Decimal = Decimal("0")
    categoria: Optional[str] = None
    categoria_id: Optional[str] = None
    costo_unitario: Optional[Decimal] = None
    precio_unitario: Optional[Decimal] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "Product":
        # Older endpoints report stock as "stock"
        stock_key = "stockDisponible" if "stockDisponible" in data else "stock"
        return cls(
            id=str(data["id"]),
            nombre=data.get("nombre", ""),
            precio_venta=decimal_or_zero(data, "precioVenta"),
            stock_disponible=decimal_or_zero(data, stock_key),
            categoria=str_or_none(data, "categoria"),
            categoria_id=str_or_none(data, "categoriaId"),
            costo_unitario=decimal_or_none(data, "costoUnitario"),
            precio_unitario=decimal_or_none(data, "precioUnitario"),
        )

    @property
    def unit_cost(self) -> Optional[Decimal]:
        """Resale purchase price when present, else production cost."""
        if self.precio_unitario is not None:
            return self.precio_unitario
        return self.costo_unitario


@dataclass(frozen=True)
class Category:
    """Inventory category; tipo is PRODUCCION or REVENTA."""

    id: str
    nombre: str
    tipo: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "Category":
        return cls(id=str(data["id"]), nombre=data.get("nombre", ""), tipo=str_or_none(data, "tipo"))


@dataclass(frozen=True)
class Provider:
    """Ingredient supplier."""

    id: str
    nombre: str
    contacto: Optional[str] = None
    telefono: Optional[str] = None
    email: Optional[str] = None
    frecuencia: Optional[str] = None
    notas: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "Provider":
        return cls(
            id=str(data["id"]),
            nombre=data.get("nombre", ""),
            contacto=str_or_none(data, "contacto"),
            telefono=str_or_none(data, "telefono"),
            email=str_or_none(data, "email"),
            frecuencia=str_or_none(data, "frecuencia"),
            notas=str_or_none(data, "notas"),
        )
