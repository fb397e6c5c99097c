"""
Recipe (receta) records and unit conversion entries.

A recipe belongs to one product and yields a batch of cantidad_base units.
Each line names an ingredient, a quantity and the unit that quantity is
stated in, which may differ from the ingredient's native unit.

Example: Pan Francés
- cantidad_base: 40 units
- 2 LB harina (ingredient native unit KG)
- 0.5 OZ levadura (ingredient native unit G)
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping, Optional, Tuple

from .api_record import decimal_or_none, decimal_or_zero, str_or_none


@dataclass(frozen=True)
class RecipeLine:
    """
    One ingredient line of a recipe.

    Attributes:
        insumo_id: Ingredient identifier
        cantidad: Quantity in the stated unit
        unidad: Stated unit (upper-case, e.g. "LB")
        id: Line identifier, if persisted
    """

    insumo_id: str
    cantidad: Decimal
    unidad: str
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping, default_unit: str = "") -> "RecipeLine":
        return cls(
            insumo_id=str(data["insumoId"]),
            cantidad=decimal_or_zero(data, "cantidad"),
            unidad=(data.get("unidad") or default_unit).upper(),
            id=str_or_none(data, "id"),
        )

    def to_payload(self) -> dict:
        return {"insumoId": self.insumo_id, "cantidad": float(self.cantidad), "unidad": self.unidad}


@dataclass(frozen=True)
class Recipe:
    """
    Recipe definition used for batch costing.

    Attributes:
        producto_id: Owning product
        nombre: Recipe name
        cantidad_base: Batch yield (finished units per production run)
        costo_mano_obra: Estimated labor cost per batch
        gastos_operativos: Estimated overhead cost per batch
        lines: Ordered ingredient lines
        id: Server identifier (None until created)
    """

    producto_id: str
    nombre: str
    cantidad_base: Decimal
    costo_mano_obra: Decimal = Decimal("0")
    gastos_operativos: Decimal = Decimal("0")
    lines: Tuple[RecipeLine, ...] = field(default_factory=tuple)
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "Recipe":
        # Older payloads use "items" and "costoManoObra"
        raw_lines = data.get("insumos")
        if raw_lines is None:
            raw_lines = data.get("items") or []
        labor_key = "costoManoObraEstimado" if "costoManoObraEstimado" in data else "costoManoObra"
        return cls(
            id=str_or_none(data, "id"),
            producto_id=str(data.get("productoId", "")),
            nombre=data.get("nombre", ""),
            cantidad_base=decimal_or_zero(data, "cantidadBase"),
            costo_mano_obra=decimal_or_zero(data, labor_key),
            gastos_operativos=decimal_or_zero(data, "gastosOperativosEstimados"),
            lines=tuple(RecipeLine.from_api(line) for line in raw_lines),
        )

    def to_payload(self) -> dict:
        """Request body for create/update; includes id only once persisted."""
        payload = {
            "productoId": self.producto_id,
            "nombre": self.nombre,
            "cantidadBase": float(self.cantidad_base),
            "costoManoObraEstimado": float(self.costo_mano_obra),
            "gastosOperativosEstimados": float(self.gastos_operativos),
            "insumos": [line.to_payload() for line in self.lines],
        }
        if self.id is not None:
            payload["id"] = self.id
        return payload


@dataclass(frozen=True)
class UnitConversion:
    """
    Conversion factor between two units.

    quantity_in_destination = quantity_in_origin * factor

    Example:
        unidad_origen: "LB"
        unidad_destino: "KG"
        factor: 0.4536
    """

    unidad_origen: str
    unidad_destino: str
    factor: Decimal
    id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "UnitConversion":
        return cls(
            unidad_origen=data["unidadOrigen"],
            unidad_destino=data["unidadDestino"],
            factor=decimal_or_zero(data, "factor"),
            id=str_or_none(data, "id"),
        )


@dataclass(frozen=True)
class ServerCostLine:
    """One line of the server-computed cost breakdown."""

    insumo: str
    cantidad_receta: str
    conversion: str
    costo: Decimal


@dataclass(frozen=True)
class ServerRecipeCost:
    """
    Cost breakdown as computed by the API (GET /recipes/{id}/cost).

    The endpoint returns this object unwrapped.
    """

    costo_total: Decimal
    costo_unitario: Decimal
    costo_insumos: Decimal
    costo_overhead: Decimal
    factor_overhead: Optional[Decimal] = None
    detalles: List[ServerCostLine] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Mapping) -> "ServerRecipeCost":
        return cls(
            costo_total=decimal_or_zero(data, "costoTotal"),
            costo_unitario=decimal_or_zero(data, "costoUnitario"),
            costo_insumos=decimal_or_zero(data, "costoInsumos"),
            costo_overhead=decimal_or_zero(data, "costoOverhead"),
            factor_overhead=decimal_or_none(data, "factorOverhead"),
            detalles=[
                ServerCostLine(
                    insumo=str(line.get("insumo", "")),
                    cantidad_receta=str(line.get("cantidadReceta", "")),
                    conversion=str(line.get("conversion", "")),
                    costo=decimal_or_zero(line, "costo"),
                )
                for line in data.get("detalles") or []
            ],
        )
