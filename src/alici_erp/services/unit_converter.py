"""
Unit conversion table for recipe quantities.

The table is loaded once per session from the API (GET /conversions) and
is read-only afterwards. Each entry converts from one unit to another
with a multiplicative factor:

    quantity_in_destination = quantity_in_origin * factor

Lookup is an exact, case-insensitive match on the (origin, destination)
pair. There is no inference: an entry LB->KG does not imply KG->LB, and
no chaining through intermediate units. Converting a unit to itself
never consults the table.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from ..models.recipe import UnitConversion
from ..utils.validators import to_decimal
from .exceptions import ConversionNotFound, ValidationError


def normalize_unit(unit: str) -> str:
    """Canonical spelling of a unit: stripped and upper-cased."""
    return (unit or "").strip().upper()


class ConversionTable:
    """
    Read-only lookup of (origin, destination) -> factor.

    Example:
        >>> table = ConversionTable([UnitConversion("LB", "KG", Decimal("0.4536"))])
        >>> table.convert(2, "lb", "KG")
        Decimal('0.9072')
    """

    def __init__(self, entries: Iterable[UnitConversion] = ()):
        factors: Dict[Tuple[str, str], Decimal] = {}
        errors = []
        for entry in entries:
            factor = to_decimal(entry.factor)
            if factor is None or factor <= 0:
                errors.append(
                    f"Conversión {entry.unidad_origen}->{entry.unidad_destino}: factor inválido"
                )
                continue
            factors[(normalize_unit(entry.unidad_origen), normalize_unit(entry.unidad_destino))] = factor
        if errors:
            raise ValidationError(errors)
        self._factors: Mapping[Tuple[str, str], Decimal] = MappingProxyType(factors)

    @classmethod
    def from_api(cls, rows: Iterable[Mapping]) -> "ConversionTable":
        """Build a table from the bare array returned by GET /conversions."""
        return cls(UnitConversion.from_api(row) for row in rows)

    def __len__(self) -> int:
        return len(self._factors)

    def __contains__(self, pair) -> bool:
        from_unit, to_unit = pair
        return (normalize_unit(from_unit), normalize_unit(to_unit)) in self._factors

    def factor(self, from_unit: str, to_unit: str) -> Optional[Decimal]:
        """
        Factor for converting from_unit to to_unit.

        Returns:
            Decimal("1") for identical units, the table factor when an
            entry exists, otherwise None
        """
        origin, destination = normalize_unit(from_unit), normalize_unit(to_unit)
        if origin == destination:
            return Decimal("1")
        return self._factors.get((origin, destination))

    def convert(self, quantity, from_unit: str, to_unit: str) -> Decimal:
        """
        Convert quantity from from_unit to to_unit.

        Raises:
            ConversionNotFound: If units differ and no entry exists
            ValidationError: If quantity is not a number
        """
        amount = to_decimal(quantity)
        if amount is None:
            raise ValidationError([f"Cantidad inválida: {quantity!r}"])
        factor = self.factor(from_unit, to_unit)
        if factor is None:
            raise ConversionNotFound(normalize_unit(from_unit), normalize_unit(to_unit))
        return amount * factor

    def units(self) -> FrozenSet[str]:
        """Every unit that appears as an origin or destination."""
        return frozenset(unit for pair in self._factors for unit in pair)


def convert(quantity, from_unit: str, to_unit: str, table: ConversionTable) -> Decimal:
    """Module-level form of ConversionTable.convert()."""
    return table.convert(quantity, from_unit, to_unit)


def describe_conversion(quantity, from_unit: str, to_unit: str, table: ConversionTable) -> str:
    """
    Human-readable conversion for cost breakdowns.

    Example:
        '2 LB x 0.4536 = 0.9072 KG'
    """
    origin, destination = normalize_unit(from_unit), normalize_unit(to_unit)
    converted = table.convert(quantity, origin, destination)
    if origin == destination:
        return f"{_plain(quantity)} {destination}"
    factor = table.factor(origin, destination)
    return f"{_plain(quantity)} {origin} x {_plain(factor)} = {_plain(converted)} {destination}"


def _plain(value) -> str:
    number = to_decimal(value)
    if number is None:
        return str(value)
    return format(number.normalize(), "f")
