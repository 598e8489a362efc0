"""Pure functions turning aggregates into human-readable advice.

This module composes the aggregator into a single yearly analysis and
derives insights, recommendations and alerts from it. No I/O, no side
effects.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cashflow.domain.aggregator import (
    STANDARD_HORIZONS,
    BudgetVariance,
    CategoryTotal,
    Insights,
    Projection,
    TrendItem,
    average_expense_amount,
    classify_income_stability,
    compute_budget_variance,
    compute_category_breakdown,
    compute_income_variability,
    compute_month_over_month_trend,
    compute_yearly_insights,
    filter_by_year,
    find_top_spending_category,
    project_from_insights,
    update_category_totals,
)
from cashflow.domain.models import AppState, ExpenseCategory, IncomeCategory, Transaction, TransactionType
from cashflow.domain.validation import coerce_amount, safe_divide

MIN_TRANSACTIONS_FOR_ADVICE = 3
CRITICAL_OVERRUN_PERCENT = -50.0
HIGH_VALUE_MULTIPLIER = 3
TOP_CATEGORY_SHARE = 0.4
EMERGENCY_FUND_MONTHS = 3


@dataclass(frozen=True)
class Advice:
    """Immutable piece of advice.

    level is one of positive/neutral/warning/negative/info for insights,
    high/medium for recommendations and danger/warning for alerts.
    """

    level: str
    title: str
    description: str
    action: str | None = None


@dataclass(frozen=True)
class Analysis:
    """Immutable full analysis of one year."""

    year: int
    insights: Insights
    breakdown: list[CategoryTotal]
    top_category: CategoryTotal | None
    expense_categories: list[ExpenseCategory]
    income_categories: list[IncomeCategory]
    budget: list[BudgetVariance]
    trend: list[TrendItem]
    income_variability: float
    income_stability: str
    projections: list[Projection]
    observations: list[Advice]
    recommendations: list[Advice]
    alerts: list[Advice]


def savings_rate_insight(savings_rate: float) -> Advice:
    """Band the savings rate into one insight."""
    if savings_rate >= 20:
        return Advice(
            "positive",
            "Excellent Savings Rate",
            f"Your savings rate of {savings_rate:.1f}% is excellent! You're on track for strong financial health.",
        )
    if savings_rate >= 10:
        return Advice(
            "neutral",
            "Good Savings Rate",
            f"Your savings rate of {savings_rate:.1f}% is good. "
            "Consider increasing it to 20% for optimal financial health.",
        )
    if savings_rate > 0:
        return Advice(
            "warning",
            "Low Savings Rate",
            f"Your savings rate of {savings_rate:.1f}% is below recommended levels. Aim for at least 10-20%.",
        )
    return Advice(
        "negative",
        "Negative Savings",
        "You're spending more than you earn. This is unsustainable and needs immediate attention.",
    )


def generate_insights(
    insights: Insights,
    top_category: CategoryTotal | None,
    income_variability: float,
    currency: str = "$",
) -> list[Advice]:
    """Build observations about savings, top spending and income stability.

    Args:
        insights: Yearly insights.
        top_category: Highest spending category, if any.
        income_variability: Standard deviation of monthly income.
        currency: Currency symbol used in descriptions.

    Returns:
        List of Advice in display order.
    """
    observations = [savings_rate_insight(insights.savings_rate)]

    if top_category is not None:
        share = safe_divide(top_category.total, insights.total_expenses) * 100
        observations.append(
            Advice(
                "info",
                "Top Spending Category",
                f"{top_category.category} accounts for {share:.1f}% of your total expenses "
                f"({currency}{top_category.total:,.2f}).",
            )
        )

    if classify_income_stability(income_variability) == "stable":
        observations.append(
            Advice(
                "positive",
                "Stable Income",
                "Your income is relatively stable month-to-month, which is great for financial planning.",
            )
        )
    else:
        observations.append(
            Advice(
                "warning",
                "Variable Income",
                "Your income varies significantly. Consider building a larger emergency fund.",
            )
        )

    return observations


def generate_recommendations(
    insights: Insights,
    top_category: CategoryTotal | None,
    budget: Sequence[BudgetVariance],
) -> list[Advice]:
    """Build prioritised recommendations.

    Args:
        insights: Yearly insights.
        top_category: Highest spending category, if any.
        budget: Budget variance per expense category.

    Returns:
        List of Advice with level "high" or "medium".
    """
    recommendations: list[Advice] = []

    if insights.savings_rate < 10:
        recommendations.append(
            Advice(
                "high",
                "Increase Your Savings Rate",
                "Try to save at least 10-20% of your income. Start by reviewing your largest expense categories.",
                "Review and reduce discretionary spending",
            )
        )

    overruns = [b for b in budget if b.status == "over" and b.budgeted > 0]
    if overruns:
        recommendations.append(
            Advice(
                "medium",
                "Budget Overruns Detected",
                f"You've exceeded budgets in {len(overruns)} categories. "
                "Consider adjusting budgets or reducing spending.",
                "Review budget allocations",
            )
        )

    if top_category is not None and safe_divide(top_category.total, insights.total_expenses) > TOP_CATEGORY_SHARE:
        name = top_category.category
        recommendations.append(
            Advice(
                "medium",
                f"Optimize {name} Spending",
                f"{name} represents a large portion of your expenses. Look for optimization opportunities.",
                f"Review {name} transactions for potential savings",
            )
        )

    monthly_expenses = insights.total_expenses / 12
    if insights.net_savings > 0 and monthly_expenses > 0:
        covered_months = safe_divide(insights.net_savings, monthly_expenses)
        if covered_months < EMERGENCY_FUND_MONTHS:
            recommendations.append(
                Advice(
                    "high",
                    "Build Emergency Fund",
                    "Aim to save 3-6 months of expenses for emergencies. "
                    "You currently have less than 3 months covered.",
                    "Prioritize emergency fund savings",
                )
            )

    return recommendations


def starter_recommendations() -> list[Advice]:
    """Recommendations shown before there is enough data to analyse."""
    return [
        Advice(
            "high",
            "Start Tracking Your Finances",
            "Add your income and expense transactions to get personalized recommendations.",
            "Use 'cashflow add' to record some transactions",
        ),
        Advice(
            "medium",
            "Set Up Recurring Transactions",
            "Automate tracking of regular income and expenses like salary, rent, and subscriptions.",
            "Use 'cashflow recurring add' to define them",
        ),
        Advice(
            "medium",
            "Create Budget Categories",
            "Set budgets for different expense categories to track your spending limits.",
            "Use 'cashflow category budget' to set budgets",
        ),
    ]


def generate_alerts(
    budget: Sequence[BudgetVariance],
    transactions: Iterable[Transaction],
    average_expense: float,
) -> list[Advice]:
    """Flag critical budget overruns and unusually large expenses.

    Args:
        budget: Budget variance per expense category.
        transactions: Transactions to scan for high-value expenses.
        average_expense: Average expense amount used as the baseline.

    Returns:
        List of Advice with level "danger" or "warning".
    """
    alerts = [
        Advice(
            "danger",
            f"Critical Budget Overrun: {b.category}",
            f"You've spent {abs(b.performance_percent):.1f}% more than budgeted in {b.category}.",
        )
        for b in budget
        if b.status == "over" and b.performance_percent < CRITICAL_OVERRUN_PERCENT
    ]

    threshold = average_expense * HIGH_VALUE_MULTIPLIER
    high_value = [
        t for t in transactions if t.type == TransactionType.EXPENSE and coerce_amount(t.amount) > threshold
    ]
    if high_value:
        alerts.append(
            Advice(
                "warning",
                "Unusual High-Value Transactions",
                f"{len(high_value)} transactions are significantly above your average spending.",
            )
        )

    return alerts


def build_analysis(
    state: AppState,
    year: int | None = None,
    horizons: Iterable[int] = STANDARD_HORIZONS,
    currency: str = "$",
) -> Analysis:
    """Run every aggregation for one year of state.

    Args:
        state: Application state snapshot.
        year: Year to analyse; defaults to the state's current year.
        horizons: Projection horizons in months.
        currency: Currency symbol used in advice text.

    Returns:
        Analysis with aggregates, projections and advice.
    """
    year = state.current_year if year is None else year
    transactions = state.transactions

    insights = compute_yearly_insights(transactions, state.fixed_income, state.fixed_expenses, year)

    known = [c.name for c in state.expense_categories] + [c.name for c in state.income_categories]
    breakdown = compute_category_breakdown(transactions, year, known)
    ordered = sorted(breakdown.values(), key=lambda entry: (-entry.total, entry.category))
    top_category = find_top_spending_category(breakdown)

    expense_categories = [
        c
        for c in update_category_totals(state.expense_categories, transactions, year)
        if isinstance(c, ExpenseCategory)
    ]
    income_categories = [
        c
        for c in update_category_totals(state.income_categories, transactions, year)
        if isinstance(c, IncomeCategory)
    ]
    budget = compute_budget_variance(expense_categories)

    variability = compute_income_variability(transactions, year)

    if insights.transaction_count < MIN_TRANSACTIONS_FOR_ADVICE:
        recommendations = starter_recommendations()
    else:
        recommendations = generate_recommendations(insights, top_category, budget)

    return Analysis(
        year=year,
        insights=insights,
        breakdown=ordered,
        top_category=top_category,
        expense_categories=expense_categories,
        income_categories=income_categories,
        budget=budget,
        trend=compute_month_over_month_trend(transactions),
        income_variability=variability,
        income_stability=classify_income_stability(variability),
        projections=project_from_insights(insights, state.recurring_transactions, horizons),
        observations=generate_insights(insights, top_category, variability, currency),
        recommendations=recommendations,
        alerts=generate_alerts(budget, filter_by_year(transactions, year), average_expense_amount(transactions, year)),
    )
