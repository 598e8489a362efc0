"""Pure functions producing chart-ready series.

Series are plain frozen records; drawing them is the caller's concern.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cashflow.domain.models import MONTH_NAMES, CategoryName, ExpenseCategory, Money, Transaction, TransactionType
from cashflow.domain.validation import coerce_amount, finite, safe_divide

FORECAST_WINDOW = 3


@dataclass(frozen=True)
class MonthlyPoint:
    """Immutable income/expense totals for one month of a year."""

    month: str
    income: Money
    expenses: Money
    net: Money
    cumulative: Money


@dataclass(frozen=True)
class ForecastPoint:
    """Immutable forecast for one month after the series ends."""

    label: str
    income: Money
    expenses: Money
    net: Money
    cumulative: Money


@dataclass(frozen=True)
class BudgetBar:
    """Immutable budgeted-versus-spent pair for one category."""

    category: CategoryName
    budgeted: Money
    spent: Money


@dataclass(frozen=True)
class CategoryShare:
    """Immutable share of total spending for one category."""

    category: CategoryName
    amount: Money
    percentage: float


def build_monthly_series(transactions: Iterable[Transaction], year: int) -> list[MonthlyPoint]:
    """Build twelve monthly points for a year, with running net.

    Args:
        transactions: All transactions; filtered to the year here.
        year: Calendar year.

    Returns:
        List of 12 MonthlyPoint objects, January first.
    """
    income = [0.0] * 12
    expenses = [0.0] * 12

    for txn in transactions:
        if txn.date.year != year:
            continue
        index = txn.date.month - 1
        if txn.type == TransactionType.INCOME:
            income[index] += coerce_amount(txn.amount)
        else:
            expenses[index] += coerce_amount(txn.amount)

    points: list[MonthlyPoint] = []
    cumulative = 0.0
    for index, name in enumerate(MONTH_NAMES):
        net = finite(income[index] - expenses[index])
        cumulative = finite(cumulative + net)
        points.append(
            MonthlyPoint(
                month=name,
                income=Money(finite(income[index])),
                expenses=Money(finite(expenses[index])),
                net=Money(net),
                cumulative=Money(cumulative),
            )
        )

    return points


def _growth_rate(first: float, last: float, window: int) -> float:
    return safe_divide(last - first, first) / window


def forecast_cash_flow(series: Sequence[MonthlyPoint], months_ahead: int = 6) -> list[ForecastPoint]:
    """Extend a monthly series with a simple trend forecast.

    The last three months give an average income and expense level plus a
    linear growth rate ((last - first) / first / 3); each forecast month n
    applies level * (1 + rate * n). A zero first month gives no growth.

    Args:
        series: Monthly points, oldest first.
        months_ahead: Number of months to forecast.

    Returns:
        ForecastPoint list continuing the series' cumulative balance.
    """
    if not series:
        return []

    window = list(series[-FORECAST_WINDOW:])
    avg_income = sum(p.income for p in window) / len(window)
    avg_expenses = sum(p.expenses for p in window) / len(window)

    if len(window) > 1:
        income_growth = _growth_rate(window[0].income, window[-1].income, FORECAST_WINDOW)
        expense_growth = _growth_rate(window[0].expenses, window[-1].expenses, FORECAST_WINDOW)
    else:
        income_growth = 0.0
        expense_growth = 0.0

    cumulative = series[-1].cumulative
    points: list[ForecastPoint] = []
    for step in range(1, months_ahead + 1):
        income = finite(avg_income * (1 + income_growth * step))
        expenses = finite(avg_expenses * (1 + expense_growth * step))
        net = finite(income - expenses)
        cumulative = Money(finite(cumulative + net))
        points.append(
            ForecastPoint(
                label=f"{MONTH_NAMES[(step - 1) % 12][:3]}+{(step - 1) // 12 + 1}",
                income=Money(income),
                expenses=Money(expenses),
                net=Money(net),
                cumulative=cumulative,
            )
        )

    return points


def budget_vs_actual(categories: Iterable[ExpenseCategory]) -> list[BudgetBar]:
    """Budgeted and spent amounts side by side, in category order."""
    return [
        BudgetBar(
            category=category.name,
            budgeted=Money(coerce_amount(category.budgeted)),
            spent=Money(coerce_amount(category.spent)),
        )
        for category in categories
    ]


def expense_share(categories: Iterable[ExpenseCategory]) -> list[CategoryShare]:
    """Share of total spending per category, skipping categories with no spend."""
    spending = [(c.name, coerce_amount(c.spent)) for c in categories]
    spending = [(name, amount) for name, amount in spending if amount > 0]
    total = sum(amount for _, amount in spending)

    return [
        CategoryShare(category=name, amount=Money(amount), percentage=safe_divide(amount, total) * 100)
        for name, amount in spending
    ]
