"""Tests for cashflow.domain.validation pure functions."""

from datetime import date

import pytest

from cashflow.domain.validation import (
    coerce_amount,
    coerce_int,
    safe_divide,
    validate_category,
    validate_currency,
    validate_date,
    validate_recurring_transaction,
    validate_string,
    validate_transaction,
)

TODAY = date(2024, 6, 30)


class TestCoerceAmount:
    """Tests for coerce_amount."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (12.5, 12.5),
            (3, 3.0),
            ("42.10", 42.1),
            ("$1,234.56", 1234.56),
            ("£10", 10.0),
            ("  -7 ", -7.0),
        ],
    )
    def test_numeric_values(self, value: object, expected: float) -> None:
        """Should coerce numbers and numeric strings."""
        assert coerce_amount(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "abc", float("nan"), float("inf"), "-inf", True, [1]])
    def test_unusable_values_fall_back(self, value: object) -> None:
        """Should return the default for empty, non-numeric or non-finite input."""
        assert coerce_amount(value) == 0.0
        assert coerce_amount(value, default=-1.0) == -1.0


class TestCoerceInt:
    """Tests for coerce_int."""

    def test_truncates(self) -> None:
        """Should truncate floats and parse strings."""
        assert coerce_int(3.9) == 3
        assert coerce_int("17") == 17
        assert coerce_int(None, default=5) == 5


class TestSafeDivide:
    """Tests for safe_divide."""

    def test_divides(self) -> None:
        """Should divide normally."""
        assert safe_divide(10, 4) == 2.5

    def test_zero_denominator(self) -> None:
        """Should return the default instead of raising."""
        assert safe_divide(10, 0) == 0.0
        assert safe_divide(10, 0, default=1.0) == 1.0


class TestValidateCurrency:
    """Tests for validate_currency."""

    def test_valid(self) -> None:
        """Should accept zero and positive amounts."""
        assert validate_currency(0) == []
        assert validate_currency(99.99) == []

    @pytest.mark.parametrize(
        ("value", "message"),
        [
            ("12", "Amount must be a valid number"),
            (float("nan"), "Amount must be a valid number"),
            (True, "Amount must be a valid number"),
            (-1, "Amount cannot be negative"),
            (1_000_000_000, "Amount is too large"),
        ],
    )
    def test_invalid(self, value: object, message: str) -> None:
        """Should report a single message for invalid amounts."""
        assert validate_currency(value) == [message]


class TestValidateDate:
    """Tests for validate_date."""

    def test_valid(self) -> None:
        """Should accept dates between 2000-01-01 and today."""
        assert validate_date(date(2000, 1, 1), TODAY) == []
        assert validate_date(TODAY, TODAY) == []

    def test_invalid(self) -> None:
        """Should reject missing, future and too-old dates."""
        assert validate_date(None, TODAY) == ["Date is required"]
        assert validate_date(date(2024, 7, 1), TODAY) == ["Date cannot be in the future"]
        assert validate_date(date(1999, 12, 31), TODAY) == ["Date is too far in the past"]


class TestValidateString:
    """Tests for validate_string."""

    def test_lengths(self) -> None:
        """Should check trimmed length against the bounds."""
        assert validate_string("Food", 1, 50) == []
        assert validate_string("", 1, 50) == ["This field is required"]
        assert validate_string("   ", 1, 50) == ["Minimum 1 characters required"]
        assert validate_string("x" * 51, 1, 50) == ["Maximum 50 characters allowed"]
        assert validate_string(123, 1, 50) == ["This field is required"]


class TestValidateTransaction:
    """Tests for validate_transaction."""

    def test_valid(self) -> None:
        """Should accept a complete transaction."""
        result = validate_transaction(50.0, "Groceries", date(2024, 6, 1), "expense", "Food", today=TODAY)

        assert result.is_valid
        assert result.errors == {}

    def test_collects_errors_per_field(self) -> None:
        """Should report every invalid field."""
        result = validate_transaction(-5, "", date(2025, 1, 1), "transfer", "", today=TODAY)

        assert not result.is_valid
        assert set(result.errors) == {"amount", "description", "date", "type", "category"}
        assert result.errors["type"] == ["Transaction type must be either income or expense"]


class TestValidateCategory:
    """Tests for validate_category."""

    def test_budget_optional(self) -> None:
        """Should accept a name without budget."""
        assert validate_category("Food").is_valid

    def test_negative_budget(self) -> None:
        """Should reject a negative budget."""
        result = validate_category("Food", -10)

        assert not result.is_valid
        assert result.errors == {"budgeted": ["Amount cannot be negative"]}


class TestValidateRecurringTransaction:
    """Tests for validate_recurring_transaction."""

    def test_valid(self) -> None:
        """Should accept a complete definition."""
        assert validate_recurring_transaction(1200, "Rent", "monthly", "expense", "Housing").is_valid

    def test_unknown_frequency(self) -> None:
        """Should reject frequencies outside the fixed set."""
        result = validate_recurring_transaction(10, "Gym", "daily", "expense", "Health")

        assert result.errors == {"frequency": ["Please select a valid frequency"]}
