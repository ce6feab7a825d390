"""Tests for money formatting and amount validation helpers"""
from datetime import date
from decimal import Decimal

import pytest

from app.utils.money import format_money, format_percent
from app.utils.validation import (
    validate_and_normalize_amount, parse_non_negative_amount, parse_optional_date, parse_number,
)


class TestFormatMoney:
    def test_usd(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"

    def test_negative(self):
        assert format_money(-1200.5) == "-$1,200.50"

    def test_other_currency(self):
        assert format_money(300, "EUR") == "300.00 EUR"

    def test_string_amount(self):
        assert format_money("15000") == "$15,000.00"

    def test_percent(self):
        assert format_percent(40.0) == "40%"
        assert format_percent(-150.5) == "-150.5%"


class TestValidation:
    def test_comma_decimal(self):
        assert validate_and_normalize_amount("10,5") == "10.5"

    def test_too_many_decimals(self):
        with pytest.raises(ValueError):
            validate_and_normalize_amount("1.234")

    def test_non_negative(self):
        assert parse_non_negative_amount("0") == Decimal("0")
        with pytest.raises(ValueError):
            parse_non_negative_amount("-1")

    def test_optional_date(self):
        assert parse_optional_date("2025-03-10") == date(2025, 3, 10)
        assert parse_optional_date("") is None
        assert parse_optional_date(None) is None

    def test_parse_number(self):
        assert parse_number("12,5") == Decimal("12.5")
        assert parse_number(3) == Decimal("3")
        for raw in ("nan", "Infinity", "-inf", Decimal("NaN"), float("inf")):
            with pytest.raises(ValueError, match="число"):
                parse_number(raw)
