"""Domain models and types for cashflow.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from cashflow.domain.models import (
    AppState,
    CategoryName,
    ExpenseCategory,
    Frequency,
    IncomeCategory,
    Money,
    RecurringTransaction,
    Transaction,
    TransactionType,
)

__all__ = [
    "AppState",
    "CategoryName",
    "ExpenseCategory",
    "Frequency",
    "IncomeCategory",
    "Money",
    "RecurringTransaction",
    "Transaction",
    "TransactionType",
]
