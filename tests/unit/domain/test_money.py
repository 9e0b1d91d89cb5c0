"""Unit tests for money helpers"""

import pytest
from decimal import Decimal
from src.domain.money import format_kes, from_cents, to_cents


class TestToCents:
    """Test conversion of display amounts to cents"""

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("1500.00"), 150000),
            ("0.10", 10),
            (0.1, 10),
            (0.29, 29),
            (12, 1200),
            ("19.995", 2000),
            ("-20.00", -2000),
        ],
    )
    def test_converts_amounts(self, amount, expected):
        assert to_cents(amount) == expected

    def test_float_sum_does_not_drift(self):
        """0.1 + 0.2 as floats is 0.30000000000000004, still 30 cents"""
        assert to_cents(0.1 + 0.2) == 30


class TestFromCents:
    """Test conversion of cents to display amounts"""

    def test_two_decimal_places(self):
        assert from_cents(150000) == Decimal("1500.00")
        assert str(from_cents(5)) == "0.05"

    def test_format_kes(self):
        assert format_kes(150000) == "KES 1,500.00"
        assert format_kes(-2000) == "KES -20.00"
