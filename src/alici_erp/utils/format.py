"""
Formatting helpers for money and dates.

Money crosses the API boundary in cents (integers) and is shown to the
user as "C$ 1,234.50" / "$ 1,234.50".
"""

from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from .constants import CENTS_PER_UNIT, CURRENCY_SYMBOLS, PRIMARY_CURRENCY
from .validators import to_decimal

Number = Union[int, float, Decimal, str]


def amount_to_cents(amount: Number) -> int:
    """
    Convert a display amount to integer cents, rounding half up.

    Args:
        amount: Display amount (e.g. 12.345)

    Returns:
        Amount in cents (e.g. 1235)

    Raises:
        ValueError: If amount is not a finite number
    """
    value = to_decimal(amount)
    if value is None:
        raise ValueError(f"Invalid amount: {amount!r}")
    return int((value * CENTS_PER_UNIT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_amount(cents: Number) -> Decimal:
    """Convert integer cents to a display amount."""
    value = to_decimal(cents)
    if value is None:
        raise ValueError(f"Invalid cents value: {cents!r}")
    return value / CENTS_PER_UNIT


def format_currency(cents: Number, currency: str = PRIMARY_CURRENCY) -> str:
    """
    Format an amount in cents for display with its currency symbol.

    Example:
        >>> format_currency(123450)
        'C$ 1,234.50'
        >>> format_currency(500, "USD")
        '$ 5.00'
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    amount = cents_to_amount(cents).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol} {amount:,.2f}"


def format_date(value: Union[str, datetime]) -> str:
    """
    Format a date for display (e.g. '15 mar 2025 14:30').

    Unparseable strings are returned unchanged.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    months = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]
    return f"{value.day:02d} {months[value.month - 1]} {value.year} {value:%H:%M}"


def to_iso_date(value: Optional[Union[str, date]]) -> Optional[str]:
    """
    Turn a 'YYYY-MM-DD' filter value into an ISO timestamp at midnight UTC.

    Empty values become None so they are dropped from query params.
    """
    if not value:
        return None
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    moment = datetime.combine(value, time.min, tzinfo=timezone.utc)
    return moment.isoformat().replace("+00:00", "Z")
