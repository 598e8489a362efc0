"""Pure functions for yearly aggregation, trends and balance projections.

This module contains the functional core for financial analysis:
- No I/O operations (no database, no console, no files)
- No side effects; inputs are never mutated
- Pure data transformations
- Easy to test

Amounts are coerced with coerce_amount before they are summed and every
division goes through safe_divide, so no operation raises on malformed
numbers and no operation returns NaN or Infinity.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from cashflow.dates import MonthKey, month_key, month_label
from cashflow.domain.models import (
    UNCATEGORIZED,
    Category,
    CategoryName,
    ExpenseCategory,
    IncomeCategory,
    MonthEntry,
    Money,
    RecurringTransaction,
    Transaction,
    TransactionType,
)
from cashflow.domain.recurring import compute_recurring_monthly_total
from cashflow.domain.validation import coerce_amount, finite, safe_divide

STANDARD_HORIZONS: tuple[int, ...] = (3, 6, 12, 24, 60, 120)

INCOME_STABILITY_THRESHOLD = 500.0

MIN_CONFIDENCE = 15.0
MAX_CONFIDENCE = 90.0


@dataclass(frozen=True)
class Insights:
    """Immutable yearly summary derived from transactions."""

    total_income: Money
    total_expenses: Money
    net_savings: Money
    savings_rate: float
    monthly_average: Money
    transaction_count: int = 0
    fixed_monthly_income: Money = Money(0.0)
    fixed_monthly_expenses: Money = Money(0.0)


@dataclass(frozen=True)
class CategoryTotal:
    """Immutable spending total for one expense category."""

    category: CategoryName
    total: Money
    count: int


@dataclass(frozen=True)
class BudgetVariance:
    """Immutable budget performance for one expense category."""

    category: CategoryName
    budgeted: Money
    spent: Money
    variance: Money
    performance_percent: float
    status: str  # "under" or "over"


@dataclass(frozen=True)
class TrendItem:
    """Immutable month-over-month change for one metric.

    percent_change is None when the previous month was zero and the recent
    month was not (an undefined increase).
    """

    metric: str  # "income" or "expenses"
    percent_change: float | None
    direction: str  # "up" or "down"
    description: str


@dataclass(frozen=True)
class Projection:
    """Immutable projected balance at one horizon."""

    period: str
    horizon_months: int
    projected_amount: Money
    monthly_net: Money
    status: str  # "debt", "warning" or "positive"
    trajectory: str  # "improving", "declining" or "stable"
    confidence_percent: float


@dataclass(frozen=True)
class LegacyCashFlow:
    """Immutable result of the fixed-plus-variable monthly model."""

    total: Money
    cumulative: list[Money]


def _in_year(transaction: Transaction, year: int) -> bool:
    return transaction.date.year == year


def _sum_amounts(transactions: Iterable[Transaction]) -> Money:
    return Money(finite(sum(coerce_amount(t.amount) for t in transactions)))


def filter_by_year(transactions: Iterable[Transaction], year: int) -> list[Transaction]:
    """Transactions dated within a calendar year."""
    return [t for t in transactions if _in_year(t, year)]


def compute_yearly_insights(
    transactions: Iterable[Transaction],
    fixed_income: float,
    fixed_expenses: float,
    year: int,
) -> Insights:
    """Compute yearly totals from the transaction list.

    Only transactions drive the totals. The fixed monthly values belong to
    the legacy monthly model (see compute_legacy_cash_flow) and are passed
    through untouched so callers can show them alongside.

    Args:
        transactions: All transactions; filtered to the year here.
        fixed_income: Fixed monthly income of the legacy model.
        fixed_expenses: Fixed monthly expenses of the legacy model.
        year: Calendar year to summarise.

    Returns:
        Insights for the year.
    """
    in_year = filter_by_year(transactions, year)

    total_income = _sum_amounts(t for t in in_year if t.type == TransactionType.INCOME)
    total_expenses = _sum_amounts(t for t in in_year if t.type == TransactionType.EXPENSE)
    net_savings = Money(finite(total_income - total_expenses))
    savings_rate = safe_divide(net_savings, total_income) * 100 if total_income > 0 else 0.0

    return Insights(
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=net_savings,
        savings_rate=finite(savings_rate),
        monthly_average=Money(net_savings / 12),
        transaction_count=len(in_year),
        fixed_monthly_income=Money(coerce_amount(fixed_income)),
        fixed_monthly_expenses=Money(coerce_amount(fixed_expenses)),
    )


def compute_category_breakdown(
    transactions: Iterable[Transaction],
    year: int,
    known_categories: Iterable[str] | None = None,
) -> dict[CategoryName, CategoryTotal]:
    """Group a year's expenses by category.

    Args:
        transactions: All transactions; filtered to the year here.
        year: Calendar year.
        known_categories: Optional category names; expenses naming any other
            category are bucketed under "Uncategorized".

    Returns:
        Dictionary of category name to CategoryTotal, in first-seen order.
    """
    known = set(known_categories) if known_categories is not None else None
    totals: dict[CategoryName, float] = {}
    counts: dict[CategoryName, int] = {}

    for txn in transactions:
        if txn.type != TransactionType.EXPENSE or not _in_year(txn, year):
            continue

        category = txn.category
        if not category or (known is not None and category not in known):
            category = UNCATEGORIZED

        totals[category] = totals.get(category, 0.0) + coerce_amount(txn.amount)
        counts[category] = counts.get(category, 0) + 1

    return {
        category: CategoryTotal(category=category, total=Money(finite(total)), count=counts[category])
        for category, total in totals.items()
    }


def find_top_spending_category(breakdown: dict[CategoryName, CategoryTotal]) -> CategoryTotal | None:
    """Return the category with the highest total.

    Ties are broken alphabetically on category name.
    """
    if not breakdown:
        return None
    return min(breakdown.values(), key=lambda entry: (-entry.total, entry.category))


def average_expense_amount(transactions: Iterable[Transaction], year: int) -> Money:
    """Average amount of a single expense transaction within the year."""
    amounts = [
        coerce_amount(t.amount) for t in transactions if t.type == TransactionType.EXPENSE and _in_year(t, year)
    ]
    return Money(safe_divide(sum(amounts), len(amounts)))


def update_category_totals(
    categories: Sequence[Category],
    transactions: Iterable[Transaction],
    year: int,
) -> list[Category]:
    """Recompute spent/actual for each category from scratch.

    Expense categories get spent from the year's expense transactions and
    income categories get actual from the year's income transactions, both
    matched by exact category name. The result depends only on the inputs,
    so applying it repeatedly gives the same values.

    Args:
        categories: Expense and/or income categories.
        transactions: All transactions; filtered to the year here.
        year: Calendar year.

    Returns:
        New list of categories in the same order.
    """
    in_year = filter_by_year(transactions, year)
    expense_totals: dict[str, float] = {}
    income_totals: dict[str, float] = {}

    for txn in in_year:
        target = income_totals if txn.type == TransactionType.INCOME else expense_totals
        target[txn.category] = target.get(txn.category, 0.0) + coerce_amount(txn.amount)

    updated: list[Category] = []
    for category in categories:
        if isinstance(category, IncomeCategory):
            actual = Money(finite(income_totals.get(category.name, 0.0)))
            updated.append(replace(category, actual=actual))
        else:
            spent = Money(finite(expense_totals.get(category.name, 0.0)))
            updated.append(replace(category, spent=spent))

    return updated


def compute_budget_variance(categories: Iterable[ExpenseCategory]) -> list[BudgetVariance]:
    """Compare budgeted and spent amounts per expense category.

    Args:
        categories: Expense categories with spent already derived.

    Returns:
        List of BudgetVariance in category order.
    """
    results: list[BudgetVariance] = []

    for category in categories:
        budgeted = coerce_amount(category.budgeted)
        spent = coerce_amount(category.spent)
        variance = finite(budgeted - spent)
        performance = safe_divide(variance, budgeted) * 100 if budgeted > 0 else 0.0

        results.append(
            BudgetVariance(
                category=category.name,
                budgeted=Money(budgeted),
                spent=Money(spent),
                variance=Money(variance),
                performance_percent=finite(performance),
                status="under" if variance >= 0 else "over",
            )
        )

    return results


def _trend_item(metric: str, recent: float, previous: float) -> TrendItem:
    title = metric.capitalize()

    if previous == 0:
        if recent > 0:
            return TrendItem(
                metric=metric,
                percent_change=None,
                direction="up",
                description=f"{title} increased from nothing last month",
            )
        return TrendItem(
            metric=metric,
            percent_change=0.0,
            direction="down",
            description=f"{title} unchanged from last month",
        )

    change = safe_divide(recent - previous, previous) * 100
    direction = "up" if change > 0 else "down"
    verb = "increased" if change > 0 else "decreased"
    return TrendItem(
        metric=metric,
        percent_change=change,
        direction=direction,
        description=f"{title} {verb} by {abs(change):.1f}% from last month",
    )


def group_by_month(transactions: Iterable[Transaction]) -> dict[MonthKey, tuple[Money, Money]]:
    """Sum income and expenses per calendar month.

    Returns:
        Dictionary of (year, month) to (income, expenses), sorted chronologically.
    """
    income: dict[MonthKey, float] = {}
    expenses: dict[MonthKey, float] = {}

    for txn in transactions:
        key = month_key(txn.date)
        income.setdefault(key, 0.0)
        expenses.setdefault(key, 0.0)
        if txn.type == TransactionType.INCOME:
            income[key] += coerce_amount(txn.amount)
        else:
            expenses[key] += coerce_amount(txn.amount)

    return {key: (Money(finite(income[key])), Money(finite(expenses[key]))) for key in sorted(income)}


def compute_month_over_month_trend(transactions: Iterable[Transaction]) -> list[TrendItem]:
    """Compare income and expenses of the two most recent months.

    All transactions are considered regardless of year.

    Returns:
        Two TrendItems (income, expenses), or an empty list with fewer than
        two distinct months.
    """
    monthly = group_by_month(transactions)
    if len(monthly) < 2:
        return []

    keys = list(monthly)
    recent_income, recent_expenses = monthly[keys[-1]]
    previous_income, previous_expenses = monthly[keys[-2]]

    return [
        _trend_item("income", recent_income, previous_income),
        _trend_item("expenses", recent_expenses, previous_expenses),
    ]


def trend_period(transactions: Iterable[Transaction]) -> tuple[str, str] | None:
    """Labels of the (previous, recent) months compared by the trend."""
    keys = list(group_by_month(transactions))
    if len(keys) < 2:
        return None
    return month_label(keys[-2]), month_label(keys[-1])


def compute_variance(values: Sequence[float]) -> float:
    """Population standard deviation of values.

    Deviations are scaled by the largest one before squaring so that large
    amounts never overflow.

    Returns:
        Standard deviation, 0.0 for an empty sequence or when the spread
        itself is not representable.
    """
    numbers = [coerce_amount(v) for v in values]
    if not numbers:
        return 0.0
    mean = sum(numbers) / len(numbers)
    if not math.isfinite(mean):
        mean = sum(v / len(numbers) for v in numbers)
    deviations = [v - mean for v in numbers]
    scale = max(abs(d) for d in deviations)
    if scale == 0 or not math.isfinite(scale):
        return 0.0
    squared = [(d / scale) * (d / scale) for d in deviations]
    return finite(scale * math.sqrt(sum(squared) / len(squared)))


def classify_income_stability(variability: float) -> str:
    """Classify income variability against the fixed 500 threshold."""
    return "stable" if variability < INCOME_STABILITY_THRESHOLD else "variable"


def compute_monthly_income_totals(transactions: Iterable[Transaction], year: int) -> dict[int, Money]:
    """Income per month number (1-12) for months of the year that have income."""
    totals: dict[int, float] = {}
    for txn in transactions:
        if txn.type == TransactionType.INCOME and _in_year(txn, year):
            totals[txn.date.month] = totals.get(txn.date.month, 0.0) + coerce_amount(txn.amount)
    return {month: Money(finite(total)) for month, total in sorted(totals.items())}


def compute_income_variability(transactions: Iterable[Transaction], year: int) -> float:
    """Standard deviation of monthly income, 0 with fewer than two months of income."""
    monthly = compute_monthly_income_totals(transactions, year)
    if len(monthly) < 2:
        return 0.0
    return compute_variance(list(monthly.values()))


def horizon_label(months: int) -> str:
    """Human-readable label for a projection horizon."""
    if months >= 12 and months % 12 == 0:
        years = months // 12
        return "1 year" if years == 1 else f"{years} years"
    return "1 month" if months == 1 else f"{months} months"


def calculate_projection_confidence(months: int, historical_net: float, projected_net: float) -> float:
    """Heuristic confidence for a projection.

    Args:
        months: Projection horizon in months.
        historical_net: Monthly net observed from transactions.
        projected_net: Monthly net including recurring definitions.

    Returns:
        Confidence percentage within [15, 90].
    """
    confidence = max(MIN_CONFIDENCE, MAX_CONFIDENCE - months * 1.2)

    if abs(historical_net - projected_net) > abs(historical_net) * 0.5:
        confidence -= 20

    # Cumulative reductions for longer horizons
    if months > 12:
        confidence -= 10
    if months > 24:
        confidence -= 15
    if months > 60:
        confidence -= 20

    return finite(max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence)), MIN_CONFIDENCE)


def project_future_balance(
    current_net_savings: float,
    monthly_income: float,
    monthly_expenses: float,
    recurring_monthly_income: float,
    recurring_monthly_expenses: float,
    horizons: Iterable[int] = STANDARD_HORIZONS,
) -> list[Projection]:
    """Project the balance forward over several horizons.

    Args:
        current_net_savings: Balance to project from.
        monthly_income: Historical monthly income.
        monthly_expenses: Historical monthly expenses.
        recurring_monthly_income: Monthly equivalent of active recurring income.
        recurring_monthly_expenses: Monthly equivalent of active recurring expenses.
        horizons: Horizons in months.

    Returns:
        One Projection per horizon, in the given order.
    """
    current = coerce_amount(current_net_savings)
    income = coerce_amount(monthly_income)
    expenses = coerce_amount(monthly_expenses)
    recurring_income = coerce_amount(recurring_monthly_income)
    recurring_expenses = coerce_amount(recurring_monthly_expenses)

    historical_net = finite(income - expenses)
    projected_net = finite((income + recurring_income) - (expenses + recurring_expenses))

    if projected_net > 0:
        trajectory = "improving"
    elif projected_net < 0:
        trajectory = "declining"
    else:
        trajectory = "stable"

    projections: list[Projection] = []
    for months in horizons:
        projected = finite(current + projected_net * months)

        if projected < 0:
            status = "debt"
        elif projected < expenses * 3:
            status = "warning"
        else:
            status = "positive"

        projections.append(
            Projection(
                period=horizon_label(months),
                horizon_months=months,
                projected_amount=Money(projected),
                monthly_net=Money(projected_net),
                status=status,
                trajectory=trajectory,
                confidence_percent=calculate_projection_confidence(months, historical_net, projected_net),
            )
        )

    return projections


def project_from_insights(
    insights: Insights,
    recurring_transactions: Iterable[RecurringTransaction],
    horizons: Iterable[int] = STANDARD_HORIZONS,
) -> list[Projection]:
    """Project from a year's insights, spreading yearly totals over twelve months."""
    recurring = list(recurring_transactions)
    return project_future_balance(
        current_net_savings=insights.net_savings,
        monthly_income=insights.total_income / 12,
        monthly_expenses=insights.total_expenses / 12,
        recurring_monthly_income=compute_recurring_monthly_total(recurring, TransactionType.INCOME),
        recurring_monthly_expenses=compute_recurring_monthly_total(recurring, TransactionType.EXPENSE),
        horizons=horizons,
    )


def compute_legacy_cash_flow(
    fixed_income: float,
    fixed_expenses: float,
    months: Iterable[MonthEntry],
) -> LegacyCashFlow:
    """Running savings of the legacy fixed-plus-variable monthly model.

    Each month contributes (fixed_income + variable_income) -
    (fixed_expenses + variable_expenses).

    Returns:
        LegacyCashFlow with the cumulative balance after each month and the total.
    """
    income = coerce_amount(fixed_income)
    expenses = coerce_amount(fixed_expenses)
    running = 0.0
    cumulative: list[Money] = []

    for entry in months:
        month_income = income + coerce_amount(entry.variable_income)
        month_expenses = expenses + coerce_amount(entry.variable_expenses)
        running = finite(running + month_income - month_expenses)
        cumulative.append(Money(running))

    return LegacyCashFlow(total=Money(running), cumulative=cumulative)
