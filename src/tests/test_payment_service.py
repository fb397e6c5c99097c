"""
Tests for payment reconciliation.

Tests cover:
- Mixed NIO/USD tenders against an amount due
- Insufficient payment detection
- The zero total, zero tender boundary
- Tender validation and API payloads
"""

from decimal import Decimal

import pytest

from alici_erp.models.payment import PaymentTender
from alici_erp.services.exceptions import InsufficientPayment, InvalidExchangeRate, ValidationError
from alici_erp.services.payment_service import (
    reconcile_payment,
    require_sufficient_payment,
    tender_in_primary,
    tender_payload,
    tenders_from_amounts,
)


class TestReconcilePayment:
    def test_mixed_tender_covers_total_exactly(self):
        result = reconcile_payment(100, [PaymentTender.primary(60), PaymentTender.secondary(1, 40)])

        assert result.total_tendered == Decimal("100")
        assert result.sufficient is True
        assert result.change == Decimal("0")

    def test_short_tender_is_insufficient(self):
        result = reconcile_payment(100, [PaymentTender.primary(50)])

        assert result.sufficient is False
        assert result.change == Decimal("0")
        assert result.shortfall == Decimal("50")

    def test_overpayment_returns_change(self):
        result = reconcile_payment(100, [PaymentTender.primary(50), PaymentTender.secondary(2, 40)])

        assert result.total_tendered == Decimal("130")
        assert result.change == Decimal("30")
        assert result.shortfall == Decimal("0")

    def test_no_tenders_is_insufficient_for_positive_total(self):
        result = reconcile_payment("0.01", [])

        assert result.total_tendered == Decimal("0")
        assert result.sufficient is False

    def test_zero_total_with_no_tenders_is_sufficient(self):
        result = reconcile_payment(0, [])

        assert result.sufficient is True
        assert result.change == Decimal("0")

    @pytest.mark.parametrize("cantidad", ["60", 60.0, 60])
    def test_tender_amount_types(self, cantidad):
        result = reconcile_payment(100, [PaymentTender(moneda="NIO", cantidad=cantidad), PaymentTender(moneda="USD", cantidad="1", tasa=40)])

        assert result.total_tendered == Decimal("100")
        assert result.sufficient is True

    def test_secondary_uses_captured_rate(self):
        tender = PaymentTender.secondary(10, "36.5")
        assert tender_in_primary(tender) == Decimal("365.0")

    @pytest.mark.parametrize("total", [-1, None, "abc"])
    def test_invalid_total_rejected(self, total):
        with pytest.raises(ValidationError):
            reconcile_payment(total, [])

    def test_duplicate_currency_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            reconcile_payment(10, [PaymentTender.primary(5), PaymentTender.primary(5)])
        assert any("más de un pago" in error for error in exc_info.value.errors)

    def test_unknown_currency_rejected(self):
        with pytest.raises(ValidationError):
            reconcile_payment(10, [PaymentTender(moneda="EUR", cantidad=Decimal("10"))])

    def test_negative_tender_rejected(self):
        with pytest.raises(ValidationError):
            reconcile_payment(10, [PaymentTender(moneda="NIO", cantidad=Decimal("-1"))])

    def test_secondary_without_rate_rejected(self):
        with pytest.raises(ValidationError):
            reconcile_payment(10, [PaymentTender(moneda="USD", cantidad=Decimal("1"))])

    def test_secondary_with_zero_rate_rejected(self):
        with pytest.raises(InvalidExchangeRate):
            reconcile_payment(10, [PaymentTender(moneda="USD", cantidad=Decimal("1"), tasa=Decimal("0"))])


class TestRequireSufficientPayment:
    def test_passes_sufficient_payment_through(self):
        result = reconcile_payment(100, [PaymentTender.primary(100)])
        assert require_sufficient_payment(result) is result

    def test_blocks_insufficient_payment(self):
        result = reconcile_payment(100, [PaymentTender.primary(50)])

        with pytest.raises(InsufficientPayment) as exc_info:
            require_sufficient_payment(result)

        assert exc_info.value.total_due == Decimal("100")
        assert exc_info.value.total_tendered == Decimal("50")


class TestTendersFromAmounts:
    def test_skips_empty_inputs(self):
        assert tenders_from_amounts("", None, 36.5) == []

    def test_builds_both_tenders(self):
        tenders = tenders_from_amounts("50", "2", "36.5")

        assert [t.moneda for t in tenders] == ["NIO", "USD"]
        assert tenders[1].tasa == Decimal("36.5")

    def test_usd_without_rate_rejected(self):
        with pytest.raises(InvalidExchangeRate):
            tenders_from_amounts(0, 5, None)

    def test_nio_only_needs_no_rate(self):
        tenders = tenders_from_amounts(100, 0, None)
        assert tenders == [PaymentTender(moneda="NIO", cantidad=Decimal("100"))]


class TestTenderPayload:
    def test_amounts_travel_in_cents(self):
        assert tender_payload(PaymentTender.primary("12.345")) == {"moneda": "NIO", "monto": 1235}

    def test_secondary_carries_rate(self):
        payload = tender_payload(PaymentTender.secondary(2, "36.5"))
        assert payload == {"moneda": "USD", "monto": 200, "tasa": 36.5}
