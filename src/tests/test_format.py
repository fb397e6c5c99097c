"""Tests for money and date formatting helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from alici_erp.utils.datetime_utils import parse_api_datetime
from alici_erp.utils.format import (
    amount_to_cents,
    cents_to_amount,
    format_currency,
    format_date,
    to_iso_date,
)


class TestCents:
    @pytest.mark.parametrize(
        "amount,cents",
        [(12.345, 1235), ("12.344", 1234), (0, 0), (Decimal("0.005"), 1), (100, 10000)],
    )
    def test_amount_to_cents_rounds_half_up(self, amount, cents):
        assert amount_to_cents(amount) == cents

    def test_amount_to_cents_rejects_garbage(self):
        with pytest.raises(ValueError):
            amount_to_cents("abc")

    def test_cents_to_amount(self):
        assert cents_to_amount(12345) == Decimal("123.45")


class TestFormatCurrency:
    def test_primary(self):
        assert format_currency(123450) == "C$ 1,234.50"

    def test_secondary(self):
        assert format_currency(500, "USD") == "$ 5.00"

    def test_zero(self):
        assert format_currency(0) == "C$ 0.00"


class TestDates:
    def test_format_date(self):
        assert format_date("2025-03-15T14:30:00.000Z") == "15 mar 2025 14:30"

    def test_format_date_unparseable(self):
        assert format_date("mañana") == "mañana"

    def test_format_date_from_datetime(self):
        assert format_date(datetime(2025, 12, 1, 8, 5)) == "01 dic 2025 08:05"

    def test_to_iso_date(self):
        assert to_iso_date("2025-03-01") == "2025-03-01T00:00:00Z"
        assert to_iso_date(date(2025, 3, 1)) == "2025-03-01T00:00:00Z"

    @pytest.mark.parametrize("value", [None, ""])
    def test_to_iso_date_empty(self, value):
        assert to_iso_date(value) is None

    def test_parse_api_datetime(self):
        parsed = parse_api_datetime("2025-03-01T10:00:00.000Z")
        assert parsed.hour == 10
        assert parsed.utcoffset().total_seconds() == 0

    def test_parse_api_datetime_naive_is_utc(self):
        assert parse_api_datetime("2025-03-01T10:00:00").tzinfo is not None

    @pytest.mark.parametrize("value", [None, "", "ayer"])
    def test_parse_api_datetime_invalid(self, value):
        assert parse_api_datetime(value) is None
