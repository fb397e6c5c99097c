"""Helpers for building domain records from API payloads.

The API sends camelCase JSON with numbers that may arrive as ints,
floats or numeric strings, and optional fields that may be missing or
null. These helpers convert them to Decimal / Optional values once, at
the record boundary, so the rest of the code never digs through raw dicts.
json_number() goes the other way, for request bodies.
"""

from decimal import Decimal
from typing import Any, Mapping, Optional

from ..utils.validators import to_decimal


def decimal_or_none(data: Mapping, key: str) -> Optional[Decimal]:
    """Decimal value of data[key], or None if absent or not a number."""
    return to_decimal(data.get(key))


def decimal_or_zero(data: Mapping, key: str) -> Decimal:
    """Decimal value of data[key], defaulting to zero."""
    value = to_decimal(data.get(key))
    return value if value is not None else Decimal("0")


def str_or_none(data: Mapping, key: str) -> Optional[str]:
    """Non-empty string value of data[key], or None."""
    value: Any = data.get(key)
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def json_number(value: Any) -> Optional[float]:
    """Form value as a JSON number for a request body (None if blank)."""
    number = to_decimal(value)
    if number is None:
        return None
    if number == number.to_integral_value():
        return int(number)
    return float(number)
