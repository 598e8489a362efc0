"""Tests for cashflow.domain.models record conversion."""

from datetime import date

import pytest

from cashflow.domain.models import (
    AppState,
    CategoryName,
    ExpenseCategory,
    Frequency,
    MonthEntry,
    RecurringTransaction,
    Transaction,
    TransactionType,
)


class TestTransactionFromDict:
    """Tests for Transaction.from_dict."""

    def test_parses_persisted_shape(self) -> None:
        """Should read camelCase keys and timestamp-style dates."""
        txn = Transaction.from_dict(
            {
                "id": 7,
                "date": "2024-01-15T00:00:00.000Z",
                "type": "income",
                "category": "Salary",
                "amount": "5000",
                "description": "January pay",
                "recurring": True,
                "recurringId": 3,
            }
        )

        assert txn.id == 7
        assert txn.date == date(2024, 1, 15)
        assert txn.type == TransactionType.INCOME
        assert txn.amount == 5000
        assert txn.recurring is True
        assert txn.recurring_id == 3

    def test_malformed_amount_becomes_zero(self) -> None:
        """Should coerce a non-numeric amount to 0."""
        txn = Transaction.from_dict({"id": 1, "date": "2024-01-01", "type": "expense", "amount": "lots"})

        assert txn.amount == 0
        assert txn.category == ""
        assert txn.recurring_id is None

    def test_invalid_date_raises(self) -> None:
        """Should raise ValueError for an unparseable date."""
        with pytest.raises(ValueError):
            Transaction.from_dict({"id": 1, "date": "yesterday", "type": "expense", "amount": 1})

    def test_to_dict_omits_missing_recurring_id(self) -> None:
        """Should only write recurringId for generated transactions."""
        txn = Transaction(1, date(2024, 1, 1), TransactionType.EXPENSE, CategoryName("Food"), 10.0)

        data = txn.to_dict()
        assert data["date"] == "2024-01-01"
        assert data["type"] == "expense"
        assert "recurringId" not in data


class TestRecurringTransactionFromDict:
    """Tests for RecurringTransaction.from_dict."""

    def test_unknown_frequency_defaults_to_monthly(self) -> None:
        """Should fall back to monthly for an unknown frequency."""
        recurring = RecurringTransaction.from_dict(
            {"id": 2, "name": "Gym", "type": "expense", "category": "Health", "amount": 40, "frequency": "daily"}
        )

        assert recurring.frequency == Frequency.MONTHLY
        assert recurring.is_active is True
        assert recurring.start_date is None

    def test_to_dict(self) -> None:
        """Should write camelCase keys."""
        recurring = RecurringTransaction(
            1,
            "Rent",
            TransactionType.EXPENSE,
            CategoryName("Housing"),
            1200.0,
            Frequency.MONTHLY,
            start_date=date(2024, 1, 1),
            is_active=False,
        )

        data = recurring.to_dict()
        assert data["startDate"] == "2024-01-01"
        assert data["isActive"] is False
        assert data["frequency"] == "monthly"


class TestAppState:
    """Tests for AppState conversion and id allocation."""

    def test_defaults(self) -> None:
        """Should start with twelve months and the default categories."""
        state = AppState()

        assert len(state.months) == 12
        assert state.months[0] == MonthEntry("January")
        assert [c.name for c in state.expense_categories] == ["Housing", "Food & Dining", "Transportation"]
        assert [c.name for c in state.income_categories] == ["Salary", "Freelance"]
        assert state.theme == "light"

    def test_missing_keys_use_defaults(self) -> None:
        """Should fill absent keys with defaults."""
        state = AppState.from_dict({"fixedIncome": 3000, "currentYear": 2023})

        assert state.fixed_income == 3000
        assert state.current_year == 2023
        assert len(state.months) == 12
        assert state.transactions == []

    def test_round_trip(self) -> None:
        """Should reproduce the same state from its persisted shape."""
        state = AppState(
            fixed_income=2500.0,
            transactions=[Transaction(1, date(2024, 3, 3), TransactionType.EXPENSE, CategoryName("Food"), 12.5)],
            expense_categories=[ExpenseCategory(CategoryName("Food"), 100.0)],
            current_year=2024,
            theme="dark",
        )

        assert AppState.from_dict(state.to_dict()) == state

    def test_next_ids(self) -> None:
        """Should allocate ids above the current maximum."""
        state = AppState(
            transactions=[
                Transaction(4, date(2024, 1, 1), TransactionType.EXPENSE, CategoryName("Food"), 1.0),
                Transaction(9, date(2024, 1, 2), TransactionType.EXPENSE, CategoryName("Food"), 1.0),
            ]
        )

        assert state.next_transaction_id() == 10
        assert state.next_recurring_id() == 1
