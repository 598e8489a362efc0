"""Pure functions for numeric coercion and record validation.

This module contains the functional core for input checking:
- No I/O operations (no database, no console, no files)
- Never raises on malformed input; coercion falls back to a default
- Validation reports errors instead of raising

The aggregator relies on coerce_amount and safe_divide so that no public
operation can produce NaN or Infinity.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any

MAX_AMOUNT = 999_999_999
EARLIEST_DATE = date(2000, 1, 1)

TRANSACTION_TYPES = ("income", "expense")
FREQUENCIES = ("weekly", "bi-weekly", "monthly", "quarterly", "yearly")


@dataclass(frozen=True)
class ValidationResult:
    """Immutable outcome of validating a record."""

    is_valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)


def finite(value: float, default: float = 0.0) -> float:
    """Return value unless it is NaN or infinite."""
    return value if math.isfinite(value) else default


def coerce_amount(value: Any, default: float = 0.0) -> float:
    """Coerce an amount-like value to a finite float.

    Args:
        value: Number, numeric string (currency symbols and thousands
            separators are tolerated) or anything else.
        default: Value returned when coercion fails.

    Returns:
        Finite float, or default for empty, non-numeric, NaN or infinite input.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        return finite(float(value), default)

    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("$", "").replace("£", "").replace("€", "")
        if not cleaned:
            return default
        try:
            return finite(float(cleaned), default)
        except ValueError:
            return default

    try:
        return finite(float(value), default)
    except (TypeError, ValueError):
        return default


def coerce_int(value: Any, default: int = 0) -> int:
    """Coerce an id-like value to int, truncating floats."""
    number = coerce_amount(value, float(default))
    return int(number)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning default instead of raising or producing NaN/Infinity."""
    if denominator == 0:
        return default
    return finite(numerator / denominator, default)


def validate_currency(amount: Any) -> list[str]:
    """Validate a currency amount.

    Returns:
        List of error messages (empty when valid).
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
        return ["Amount must be a valid number"]
    if amount < 0:
        return ["Amount cannot be negative"]
    if amount > MAX_AMOUNT:
        return ["Amount is too large"]
    return []


def validate_date(value: date | None, today: date | None = None) -> list[str]:
    """Validate a transaction date is present and within the supported range."""
    if value is None:
        return ["Date is required"]
    today = today or date.today()
    if value > today:
        return ["Date cannot be in the future"]
    if value < EARLIEST_DATE:
        return ["Date is too far in the past"]
    return []


def validate_string(value: Any, min_length: int = 1, max_length: int = 255) -> list[str]:
    """Validate a required text field by trimmed length."""
    if not value or not isinstance(value, str):
        return ["This field is required"]
    trimmed = value.strip()
    if len(trimmed) < min_length:
        return [f"Minimum {min_length} characters required"]
    if len(trimmed) > max_length:
        return [f"Maximum {max_length} characters allowed"]
    return []


def _result(errors: dict[str, list[str]]) -> ValidationResult:
    errors = {key: messages for key, messages in errors.items() if messages}
    return ValidationResult(is_valid=not errors, errors=errors)


def validate_transaction(
    amount: Any,
    description: Any,
    txn_date: date | None,
    txn_type: Any,
    category: Any,
    today: date | None = None,
) -> ValidationResult:
    """Validate the user-entered fields of a transaction."""
    errors = {
        "amount": validate_currency(amount),
        "description": validate_string(description, 1, 100),
        "date": validate_date(txn_date, today),
        "type": [] if txn_type in TRANSACTION_TYPES else ["Transaction type must be either income or expense"],
        "category": validate_string(category, 1, 50),
    }
    return _result(errors)


def validate_category(name: Any, budgeted: Any = None) -> ValidationResult:
    """Validate a category name and optional budget."""
    errors = {
        "name": validate_string(name, 1, 50),
        "budgeted": validate_currency(budgeted) if budgeted is not None else [],
    }
    return _result(errors)


def validate_recurring_transaction(
    amount: Any,
    name: Any,
    frequency: Any,
    txn_type: Any,
    category: Any,
) -> ValidationResult:
    """Validate the user-entered fields of a recurring definition."""
    errors = {
        "amount": validate_currency(amount),
        "name": validate_string(name, 1, 100),
        "frequency": [] if frequency in FREQUENCIES else ["Please select a valid frequency"],
        "type": [] if txn_type in TRANSACTION_TYPES else ["Transaction type must be either income or expense"],
        "category": validate_string(category, 1, 50),
    }
    return _result(errors)
