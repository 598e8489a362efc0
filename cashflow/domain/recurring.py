"""Pure functions for recurring transaction logic.

This module contains the functional core for recurring definitions:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test
"""

from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from cashflow.dates import first_of_month
from cashflow.domain.models import Frequency, Money, RecurringTransaction, Transaction, TransactionType
from cashflow.domain.validation import coerce_amount, finite

# Average weeks per month approximation; kept exact for numeric compatibility
MONTHLY_MULTIPLIERS: dict[Frequency, float] = {
    Frequency.WEEKLY: 4.33,
    Frequency.BI_WEEKLY: 2.17,
    Frequency.MONTHLY: 1.0,
}

MONTHLY_DIVISORS: dict[Frequency, int] = {
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}


def monthly_equivalent(recurring: RecurringTransaction) -> Money:
    """Convert a recurring amount to its monthly equivalent.

    Args:
        recurring: Recurring definition.

    Returns:
        Monthly amount; 0 for an unknown frequency.
    """
    amount = coerce_amount(recurring.amount)

    if recurring.frequency in MONTHLY_MULTIPLIERS:
        return Money(finite(amount * MONTHLY_MULTIPLIERS[recurring.frequency]))

    if recurring.frequency in MONTHLY_DIVISORS:
        return Money(amount / MONTHLY_DIVISORS[recurring.frequency])

    return Money(0.0)


def compute_recurring_monthly_total(
    recurring_transactions: Iterable[RecurringTransaction],
    txn_type: TransactionType | str,
) -> Money:
    """Sum the monthly equivalents of active definitions of one type.

    Args:
        recurring_transactions: Recurring definitions.
        txn_type: "income" or "expense".

    Returns:
        Monthly total; inactive definitions and unknown types contribute nothing.
    """
    try:
        wanted = TransactionType(txn_type)
    except ValueError:
        return Money(0.0)
    total = sum(
        monthly_equivalent(recurring)
        for recurring in recurring_transactions
        if recurring.type == wanted and recurring.is_active
    )
    return Money(finite(total))


def generate_recurring_transactions(
    recurring_transactions: Iterable[RecurringTransaction],
    today: date,
    next_id: int,
) -> list[Transaction]:
    """Generate this month's transaction for each active definition.

    Args:
        recurring_transactions: Recurring definitions.
        today: Reference date; generated transactions are dated to the first of its month.
        next_id: Id assigned to the first generated transaction, incremented for the rest.

    Returns:
        One transaction per active definition, in definition order.
    """
    txn_date = first_of_month(today)
    generated: list[Transaction] = []

    for recurring in recurring_transactions:
        if not recurring.is_active:
            continue
        generated.append(
            Transaction(
                id=next_id + len(generated),
                date=txn_date,
                type=recurring.type,
                category=recurring.category,
                amount=Money(coerce_amount(recurring.amount)),
                description=f"{recurring.name} (Recurring)",
                recurring=True,
                recurring_id=recurring.id,
            )
        )

    return generated


def toggle_recurring(
    recurring_transactions: list[RecurringTransaction],
    recurring_id: int,
) -> tuple[list[RecurringTransaction], RecurringTransaction | None]:
    """Flip is_active for one definition.

    Returns:
        Tuple of (updated_definitions, toggled_definition or None if not found).
    """
    updated: list[RecurringTransaction] = []
    toggled: RecurringTransaction | None = None

    for recurring in recurring_transactions:
        if recurring.id == recurring_id:
            recurring = replace(recurring, is_active=not recurring.is_active)
            toggled = recurring
        updated.append(recurring)

    return updated, toggled
