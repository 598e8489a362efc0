"""Tests for cashflow.domain.advice pure functions."""

from datetime import date

import pytest

from cashflow.domain.advice import (
    build_analysis,
    generate_alerts,
    generate_insights,
    generate_recommendations,
    savings_rate_insight,
    starter_recommendations,
)
from cashflow.domain.aggregator import BudgetVariance, CategoryTotal, Insights
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


def make_insights(total_income: float, total_expenses: float) -> Insights:
    net = total_income - total_expenses
    rate = net / total_income * 100 if total_income > 0 else 0.0
    return Insights(
        total_income=Money(total_income),
        total_expenses=Money(total_expenses),
        net_savings=Money(net),
        savings_rate=rate,
        monthly_average=Money(net / 12),
    )


def make_variance(category: str, budgeted: float, spent: float) -> BudgetVariance:
    variance = budgeted - spent
    performance = variance / budgeted * 100 if budgeted > 0 else 0.0
    return BudgetVariance(
        category=CategoryName(category),
        budgeted=Money(budgeted),
        spent=Money(spent),
        variance=Money(variance),
        performance_percent=performance,
        status="under" if variance >= 0 else "over",
    )


class TestSavingsRateInsight:
    """Tests for savings_rate_insight."""

    def test_bands(self) -> None:
        """Should band the savings rate into four levels."""
        assert savings_rate_insight(25).level == "positive"
        assert savings_rate_insight(20).level == "positive"
        assert savings_rate_insight(15).level == "neutral"
        assert savings_rate_insight(5).level == "warning"
        assert savings_rate_insight(0).level == "negative"
        assert savings_rate_insight(-10).title == "Negative Savings"


class TestGenerateInsights:
    """Tests for generate_insights."""

    def test_includes_top_category_share(self) -> None:
        """Should describe the top category's share of expenses."""
        top = CategoryTotal(CategoryName("Food"), Money(750), 3)
        observations = generate_insights(make_insights(5000, 1500), top, 0.0, currency="£")

        titles = [o.title for o in observations]
        assert titles == ["Excellent Savings Rate", "Top Spending Category", "Stable Income"]
        assert "50.0%" in observations[1].description
        assert "£750.00" in observations[1].description

    def test_variable_income(self) -> None:
        """Should warn about variable income."""
        observations = generate_insights(make_insights(5000, 1500), None, 1200.0)

        assert observations[-1].title == "Variable Income"
        assert observations[-1].level == "warning"


class TestGenerateRecommendations:
    """Tests for generate_recommendations."""

    def test_low_savings_rate(self) -> None:
        """Should recommend saving more below 10%."""
        recommendations = generate_recommendations(make_insights(1000, 950), None, [])

        assert recommendations[0].title == "Increase Your Savings Rate"
        assert recommendations[0].level == "high"

    def test_budget_overruns_only_for_budgeted_categories(self) -> None:
        """Should count overruns only where a budget was set."""
        budget = [make_variance("Food", 100, 200), make_variance("Fun", 0, 50), make_variance("Rent", 1000, 900)]
        recommendations = generate_recommendations(make_insights(100000, 1200), None, budget)

        overrun = next(r for r in recommendations if r.title == "Budget Overruns Detected")
        assert "1 categories" in overrun.description

    def test_dominant_category(self) -> None:
        """Should suggest optimizing a category above 40% of expenses."""
        top = CategoryTotal(CategoryName("Rent"), Money(600), 1)
        recommendations = generate_recommendations(make_insights(100000, 1000), top, [])

        assert "Optimize Rent Spending" in [r.title for r in recommendations]

    def test_emergency_fund(self) -> None:
        """Should recommend an emergency fund below three months of expenses."""
        recommendations = generate_recommendations(make_insights(12000, 10800), None, [])

        assert "Build Emergency Fund" in [r.title for r in recommendations]

    def test_no_emergency_fund_without_expenses(self) -> None:
        """Should skip the emergency fund check when there are no expenses."""
        recommendations = generate_recommendations(make_insights(12000, 0), None, [])

        assert recommendations == []

    def test_healthy_finances(self) -> None:
        """Should return nothing for healthy finances."""
        top = CategoryTotal(CategoryName("Rent"), Money(300), 1)
        recommendations = generate_recommendations(make_insights(60000, 1000), top, [])

        assert recommendations == []


class TestStarterRecommendations:
    """Tests for starter_recommendations."""

    def test_three_starters(self) -> None:
        """Should return the three getting-started recommendations."""
        titles = [r.title for r in starter_recommendations()]

        assert titles == [
            "Start Tracking Your Finances",
            "Set Up Recurring Transactions",
            "Create Budget Categories",
        ]


class TestGenerateAlerts:
    """Tests for generate_alerts."""

    def test_critical_overrun(self) -> None:
        """Should raise a danger alert below -50% performance."""
        alerts = generate_alerts([make_variance("Food", 100, 200), make_variance("Rent", 100, 120)], [], 0)

        assert len(alerts) == 1
        assert alerts[0].level == "danger"
        assert alerts[0].title == "Critical Budget Overrun: Food"
        assert "100.0%" in alerts[0].description

    def test_high_value_transactions(self) -> None:
        """Should warn about expenses above three times the average."""
        transactions = [
            Transaction(1, date(2024, 1, 1), TransactionType.EXPENSE, CategoryName("Food"), Money(50)),
            Transaction(2, date(2024, 1, 2), TransactionType.EXPENSE, CategoryName("Car"), Money(900)),
            Transaction(3, date(2024, 1, 3), TransactionType.INCOME, CategoryName("Salary"), Money(9000)),
        ]
        alerts = generate_alerts([], transactions, average_expense=100)

        assert len(alerts) == 1
        assert alerts[0].level == "warning"
        assert alerts[0].description.startswith("1 transactions")

    def test_no_alerts(self) -> None:
        """Should return nothing without overruns or outliers."""
        assert generate_alerts([make_variance("Food", 100, 50)], [], 100) == []


class TestBuildAnalysis:
    """Tests for build_analysis."""

    def test_full_analysis(self) -> None:
        """Should combine aggregates, projections and advice for the year."""
        state = AppState(
            transactions=[
                Transaction(1, date(2024, 1, 15), TransactionType.INCOME, CategoryName("Salary"), Money(5000)),
                Transaction(2, date(2024, 1, 20), TransactionType.EXPENSE, CategoryName("Food"), Money(1200)),
                Transaction(3, date(2024, 2, 1), TransactionType.EXPENSE, CategoryName("Food"), Money(300)),
            ],
            recurring_transactions=[
                RecurringTransaction(
                    1, "Gym", TransactionType.EXPENSE, CategoryName("Food"), Money(1200), Frequency.YEARLY
                )
            ],
            expense_categories=[ExpenseCategory(CategoryName("Food"), Money(1000))],
            income_categories=[IncomeCategory(CategoryName("Salary"))],
            current_year=2024,
        )
        analysis = build_analysis(state, horizons=[3, 12])

        assert analysis.year == 2024
        assert analysis.insights.savings_rate == pytest.approx(70.0)
        assert analysis.top_category is not None
        assert analysis.top_category.category == "Food"
        assert analysis.expense_categories[0].spent == 1500
        assert analysis.income_categories[0].actual == 5000
        assert analysis.budget[0].status == "over"
        assert [p.horizon_months for p in analysis.projections] == [3, 12]
        assert len(analysis.trend) == 2
        assert analysis.income_stability == "stable"
        assert "Budget Overruns Detected" in [r.title for r in analysis.recommendations]

    def test_starter_recommendations_with_little_data(self) -> None:
        """Should fall back to starter recommendations under three transactions."""
        analysis = build_analysis(AppState(current_year=2024))

        assert analysis.recommendations == starter_recommendations()
        assert analysis.alerts == []
        assert analysis.top_category is None
