"""Payment tender records used at checkout and order finalization."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from ..utils.constants import PRIMARY_CURRENCY, SECONDARY_CURRENCY
from .api_record import decimal_or_none, decimal_or_zero


@dataclass(frozen=True)
class PaymentTender:
    """
    Money offered toward an amount due, in one currency.

    A secondary-currency tender carries the exchange rate in effect when
    it was tendered (tasa), so a stored transaction can be recomputed
    exactly later.

    Attributes:
        moneda: Currency code (NIO or USD)
        cantidad: Tendered amount in that currency
        tasa: Exchange rate captured at tender time (secondary currency only)
    """

    moneda: str
    cantidad: Decimal
    tasa: Optional[Decimal] = None

    @classmethod
    def primary(cls, cantidad) -> "PaymentTender":
        return cls(moneda=PRIMARY_CURRENCY, cantidad=Decimal(str(cantidad)))

    @classmethod
    def secondary(cls, cantidad, tasa) -> "PaymentTender":
        return cls(moneda=SECONDARY_CURRENCY, cantidad=Decimal(str(cantidad)), tasa=Decimal(str(tasa)))

    @classmethod
    def from_api(cls, data: Mapping) -> "PaymentTender":
        amount_key = "cantidad" if "cantidad" in data else "monto"
        return cls(
            moneda=data.get("moneda", PRIMARY_CURRENCY),
            cantidad=decimal_or_zero(data, amount_key),
            tasa=decimal_or_none(data, "tasa"),
        )

    @property
    def is_secondary(self) -> bool:
        return self.moneda == SECONDARY_CURRENCY
