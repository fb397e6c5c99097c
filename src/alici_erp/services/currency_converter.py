"""
Currency conversion for the two-currency till.

Amounts are tendered in the primary currency (NIO, the accounting
currency) or the secondary currency (USD). One exchange rate relates
them: 1 secondary unit = rate primary units.

All functions are pure: the rate is always an explicit argument and
nothing global is read.
"""

from decimal import Decimal
from typing import Union

from ..utils.constants import ZERO
from ..utils.validators import to_decimal
from .exceptions import InvalidExchangeRate, ValidationError

Number = Union[int, float, Decimal, str]


def validate_rate(rate: Number) -> Decimal:
    """
    Check that rate is a finite number greater than zero.

    Args:
        rate: Exchange rate candidate

    Returns:
        The rate as a Decimal

    Raises:
        InvalidExchangeRate: If rate is missing, non-numeric, infinite or <= 0
    """
    value = to_decimal(rate)
    if value is None or value <= 0:
        raise InvalidExchangeRate(rate)
    return value


def _amount(value: Number, field_name: str) -> Decimal:
    amount = to_decimal(value)
    if amount is None or amount < 0:
        raise ValidationError([f"{field_name}: monto inválido {value!r}"])
    return amount


def to_primary(secondary_amount: Number, rate: Number) -> Decimal:
    """
    Convert a secondary-currency amount to the primary currency.

    Example:
        >>> to_primary(10, "36.5")
        Decimal('365.0')
    """
    return _amount(secondary_amount, "Monto") * validate_rate(rate)


def to_secondary(primary_amount: Number, rate: Number) -> Decimal:
    """Convert a primary-currency amount to the secondary currency."""
    return _amount(primary_amount, "Monto") / validate_rate(rate)


def calculate_total_payment(nio_amount: Number, usd_amount: Number, rate: Number) -> Decimal:
    """
    Total tendered in the primary currency from a mixed NIO/USD payment.

    Returns:
        nio_amount + usd_amount * rate
    """
    return _amount(nio_amount, "Pago NIO") + to_primary(usd_amount, rate)


def calculate_change(total: Number, nio_amount: Number, usd_amount: Number, rate: Number) -> Decimal:
    """
    Change owed for a mixed payment.

    Returns:
        (nio + usd * rate) - total when positive, otherwise zero
    """
    difference = calculate_total_payment(nio_amount, usd_amount, rate) - _amount(total, "Total")
    return difference if difference > 0 else ZERO
