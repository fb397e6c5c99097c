"""Daily production (lotes) records."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Mapping, Optional

from ..utils.datetime_utils import parse_api_datetime
from .api_record import decimal_or_none, decimal_or_zero, str_or_none


@dataclass(frozen=True)
class ProductionLot:
    """One produced batch as reported back by the API."""

    producto_id: str
    cantidad_producida: Decimal
    costo_total: Optional[Decimal] = None
    costo_unitario: Optional[Decimal] = None
    producto_nombre: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "ProductionLot":
        return cls(
            producto_id=str(data.get("productoId", "")),
            cantidad_producida=decimal_or_zero(data, "cantidadProducida"),
            costo_total=decimal_or_none(data, "costoTotal"),
            costo_unitario=decimal_or_none(data, "costoUnitario"),
            producto_nombre=str_or_none(data, "productoNombre"),
        )


@dataclass(frozen=True)
class DailyProductionSummary:
    """
    Result of a daily production submission.

    The server may omit the resumen block; totals then fall back to
    values derived from the lots.
    """

    lotes: List[ProductionLot] = field(default_factory=list)
    total_lotes: Optional[int] = None
    unidades_totales: Optional[Decimal] = None
    costo_total: Optional[Decimal] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "DailyProductionSummary":
        resumen = data.get("resumen") or {}
        total_lotes = resumen.get("totalLotes")
        return cls(
            lotes=[ProductionLot.from_api(lot) for lot in data.get("lotes") or []],
            total_lotes=int(total_lotes) if total_lotes is not None else None,
            unidades_totales=decimal_or_none(resumen, "unidadesTotales"),
            costo_total=decimal_or_none(resumen, "costoTotal"),
        )


@dataclass(frozen=True)
class ProductionRecord:
    """Historical production entry."""

    id: str
    producto_id: str
    cantidad: Decimal
    fecha: Optional[datetime] = None
    costo_ingredientes: Decimal = Decimal("0")
    costo_mano_obra: Decimal = Decimal("0")
    costo_total: Optional[Decimal] = None
    costo_unitario: Optional[Decimal] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "ProductionRecord":
        return cls(
            id=str(data["id"]),
            producto_id=str(data.get("productoId", "")),
            cantidad=decimal_or_zero(data, "cantidad"),
            fecha=parse_api_datetime(data.get("fecha")),
            costo_ingredientes=decimal_or_zero(data, "costoIngredientes"),
            costo_mano_obra=decimal_or_zero(data, "costoManoObra"),
            costo_total=decimal_or_none(data, "costoTotal"),
            costo_unitario=decimal_or_none(data, "costoUnitario"),
        )

    @property
    def total_cost(self) -> Decimal:
        """Server total when present, else ingredients plus labor."""
        if self.costo_total is not None:
            return self.costo_total
        return self.costo_ingredientes + self.costo_mano_obra
