"""Tests for cashflow.domain.recurring pure functions."""

from datetime import date

import pytest

from cashflow.domain.models import CategoryName, Frequency, Money, RecurringTransaction, TransactionType
from cashflow.domain.recurring import (
    compute_recurring_monthly_total,
    generate_recurring_transactions,
    monthly_equivalent,
    toggle_recurring,
)


def make_recurring(
    recurring_id: int,
    txn_type: TransactionType,
    amount: float,
    frequency: Frequency = Frequency.MONTHLY,
    is_active: bool = True,
) -> RecurringTransaction:
    return RecurringTransaction(
        id=recurring_id,
        name=f"Item {recurring_id}",
        type=txn_type,
        category=CategoryName("Bills"),
        amount=Money(amount),
        frequency=frequency,
        is_active=is_active,
    )


class TestMonthlyEquivalent:
    """Tests for monthly_equivalent."""

    @pytest.mark.parametrize(
        ("frequency", "expected"),
        [
            (Frequency.WEEKLY, 433.0),
            (Frequency.BI_WEEKLY, 217.0),
            (Frequency.MONTHLY, 100.0),
            (Frequency.QUARTERLY, 100 / 3),
            (Frequency.YEARLY, 100 / 12),
        ],
    )
    def test_frequency_factors(self, frequency: Frequency, expected: float) -> None:
        """Should convert each frequency with its fixed factor."""
        recurring = make_recurring(1, TransactionType.EXPENSE, 100, frequency)
        assert monthly_equivalent(recurring) == pytest.approx(expected)

    def test_non_finite_amount(self) -> None:
        """Should treat a NaN amount as zero."""
        recurring = make_recurring(1, TransactionType.EXPENSE, float("nan"), Frequency.WEEKLY)
        assert monthly_equivalent(recurring) == 0


class TestComputeRecurringMonthlyTotal:
    """Tests for compute_recurring_monthly_total."""

    def test_single_monthly_expense(self) -> None:
        """Should return the amount of a single monthly expense."""
        recurring = [make_recurring(1, TransactionType.EXPENSE, 100)]
        assert compute_recurring_monthly_total(recurring, "expense") == pytest.approx(100)

    def test_single_weekly_income(self) -> None:
        """Should multiply weekly amounts by 4.33."""
        recurring = [make_recurring(1, TransactionType.INCOME, 50, Frequency.WEEKLY)]
        assert compute_recurring_monthly_total(recurring, TransactionType.INCOME) == pytest.approx(216.5)

    def test_yearly_expense(self) -> None:
        """Should divide a yearly 1200 into exactly 100 per month."""
        recurring = [make_recurring(1, TransactionType.EXPENSE, 1200, Frequency.YEARLY)]
        assert compute_recurring_monthly_total(recurring, "expense") == 100

    def test_inactive_contributes_nothing(self) -> None:
        """Should ignore inactive definitions regardless of amount."""
        recurring = [make_recurring(1, TransactionType.EXPENSE, 99999, is_active=False)]
        assert compute_recurring_monthly_total(recurring, "expense") == 0

    def test_filters_by_type(self) -> None:
        """Should only sum definitions of the requested type."""
        recurring = [
            make_recurring(1, TransactionType.EXPENSE, 100),
            make_recurring(2, TransactionType.INCOME, 3000),
            make_recurring(3, TransactionType.EXPENSE, 300, Frequency.QUARTERLY),
        ]
        assert compute_recurring_monthly_total(recurring, "expense") == pytest.approx(200)
        assert compute_recurring_monthly_total(recurring, "income") == pytest.approx(3000)

    def test_empty(self) -> None:
        """Should return 0 without definitions."""
        assert compute_recurring_monthly_total([], "income") == 0

    def test_unknown_type_is_zero(self) -> None:
        """Should return 0 instead of raising for an unknown type."""
        recurring = [make_recurring(1, TransactionType.EXPENSE, 100)]
        assert compute_recurring_monthly_total(recurring, "transfer") == 0


class TestGenerateRecurringTransactions:
    """Tests for generate_recurring_transactions."""

    def test_generates_for_active_definitions(self) -> None:
        """Should create one transaction per active definition, dated to the first of the month."""
        recurring = [
            make_recurring(1, TransactionType.INCOME, 3000),
            make_recurring(2, TransactionType.EXPENSE, 50, is_active=False),
            make_recurring(3, TransactionType.EXPENSE, 1200),
        ]
        generated = generate_recurring_transactions(recurring, date(2024, 5, 17), next_id=10)

        assert [t.id for t in generated] == [10, 11]
        assert all(t.date == date(2024, 5, 1) for t in generated)
        assert all(t.recurring for t in generated)
        assert [t.recurring_id for t in generated] == [1, 3]
        assert generated[0].description == "Item 1 (Recurring)"
        assert generated[1].type == TransactionType.EXPENSE
        assert generated[1].amount == 1200

    def test_nothing_active(self) -> None:
        """Should return an empty list when every definition is paused."""
        recurring = [make_recurring(1, TransactionType.INCOME, 3000, is_active=False)]
        assert generate_recurring_transactions(recurring, date(2024, 5, 17), next_id=1) == []


class TestToggleRecurring:
    """Tests for toggle_recurring."""

    def test_toggles_matching_definition(self) -> None:
        """Should flip is_active on the matching id only."""
        recurring = [make_recurring(1, TransactionType.INCOME, 10), make_recurring(2, TransactionType.INCOME, 20)]
        updated, toggled = toggle_recurring(recurring, 2)

        assert toggled is not None
        assert toggled.is_active is False
        assert updated[0].is_active is True
        assert updated[1].is_active is False
        assert recurring[1].is_active is True  # Input unchanged

    def test_unknown_id(self) -> None:
        """Should return None when no definition matches."""
        recurring = [make_recurring(1, TransactionType.INCOME, 10)]
        updated, toggled = toggle_recurring(recurring, 42)

        assert toggled is None
        assert updated == recurring
