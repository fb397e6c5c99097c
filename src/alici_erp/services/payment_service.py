"""
Payment reconciliation for checkout and order finalization.

Given an amount due in the primary currency and up to two tenders (one
per currency), computes the total tendered, whether it covers the amount
due, and the change to hand back.

Insufficient payment is a validation outcome, not an exception:
reconcile_payment() reports it through ``sufficient`` and callers that
must block submission use require_sufficient_payment().
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Sequence

from ..models.payment import PaymentTender
from ..utils.constants import CURRENCIES, PRIMARY_CURRENCY, SECONDARY_CURRENCY, ZERO
from ..utils.format import amount_to_cents
from ..utils.validators import to_decimal
from .currency_converter import to_primary, validate_rate
from .exceptions import InsufficientPayment, ValidationError


@dataclass(frozen=True)
class PaymentReconciliation:
    """
    Result of reconciling tenders against an amount due.

    Attributes:
        total_due: Amount due (primary currency)
        total_tendered: Sum of all tenders converted to primary currency
        change: max(total_tendered - total_due, 0)
        sufficient: total_tendered >= total_due (unclamped comparison)
    """

    total_due: Decimal
    total_tendered: Decimal
    change: Decimal
    sufficient: bool

    @property
    def shortfall(self) -> Decimal:
        """Amount still missing; zero when the payment is sufficient."""
        missing = self.total_due - self.total_tendered
        return missing if missing > 0 else ZERO


def _validate_tenders(tenders: Sequence[PaymentTender]) -> None:
    errors = []
    if len(tenders) > len(CURRENCIES):
        errors.append(f"Pagos: máximo {len(CURRENCIES)} monedas por transacción")
    seen = set()
    for tender in tenders:
        if tender.moneda not in CURRENCIES:
            errors.append(f"Pagos: moneda desconocida {tender.moneda!r}")
        elif tender.moneda in seen:
            errors.append(f"Pagos: más de un pago en {tender.moneda}")
        seen.add(tender.moneda)

        amount = to_decimal(tender.cantidad)
        if amount is None or amount < 0:
            errors.append(f"Pagos: monto inválido en {tender.moneda}")
        if tender.moneda == SECONDARY_CURRENCY and tender.tasa is None:
            errors.append(f"Pagos: falta la tasa de cambio del pago en {SECONDARY_CURRENCY}")
    if errors:
        raise ValidationError(errors)


def tender_in_primary(tender: PaymentTender) -> Decimal:
    """Value of one tender in the primary currency, using its captured rate."""
    if tender.is_secondary:
        return to_primary(tender.cantidad, tender.tasa)
    return to_decimal(tender.cantidad)


def reconcile_payment(total_due, tenders: Iterable[PaymentTender]) -> PaymentReconciliation:
    """
    Reconcile tenders against the amount due.

    Args:
        total_due: Non-negative amount due in the primary currency
        tenders: 0..2 tenders, at most one per currency. A secondary
            tender must carry the rate captured when it was tendered.

    Returns:
        PaymentReconciliation

    Raises:
        ValidationError: Malformed input (negative amounts, duplicate or
            unknown currency, missing rate)
        InvalidExchangeRate: A captured rate is not > 0

    Example:
        >>> result = reconcile_payment(100, [PaymentTender.primary(60),
        ...                                  PaymentTender.secondary(1, 40)])
        >>> result.sufficient, result.change
        (True, Decimal('0'))
    """
    due = to_decimal(total_due)
    if due is None or due < 0:
        raise ValidationError([f"Total: monto inválido {total_due!r}"])

    tenders = list(tenders)
    _validate_tenders(tenders)

    total_tendered = sum((tender_in_primary(t) for t in tenders), ZERO)
    sufficient = total_tendered >= due
    change = total_tendered - due
    return PaymentReconciliation(
        total_due=due,
        total_tendered=total_tendered,
        change=change if change > 0 else ZERO,
        sufficient=sufficient,
    )


def require_sufficient_payment(reconciliation: PaymentReconciliation) -> PaymentReconciliation:
    """
    Block a transaction whose tenders do not cover the amount due.

    Raises:
        InsufficientPayment: If reconciliation.sufficient is False
    """
    if not reconciliation.sufficient:
        raise InsufficientPayment(reconciliation.total_due, reconciliation.total_tendered)
    return reconciliation


def tenders_from_amounts(nio_amount=0, usd_amount=0, rate=None) -> List[PaymentTender]:
    """
    Build tenders from the two till inputs, skipping empty ones.

    Blank or unparseable inputs count as zero. The USD tender captures
    ``rate`` at this moment.

    Raises:
        InvalidExchangeRate: If a USD amount is given without a valid rate
    """
    nio = to_decimal(nio_amount) or ZERO
    usd = to_decimal(usd_amount) or ZERO
    tenders = []
    if nio > 0:
        tenders.append(PaymentTender(moneda=PRIMARY_CURRENCY, cantidad=nio))
    if usd > 0:
        tenders.append(PaymentTender(moneda=SECONDARY_CURRENCY, cantidad=usd, tasa=validate_rate(rate)))
    return tenders


def tender_payload(tender: PaymentTender) -> dict:
    """API representation of a tender; amounts travel in cents."""
    payload = {"moneda": tender.moneda, "monto": amount_to_cents(tender.cantidad)}
    if tender.tasa is not None:
        payload["tasa"] = float(tender.tasa)
    return payload
