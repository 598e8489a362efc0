"""Report commands: insights, budget, trend, projections, analysis and chart series."""

import json
from dataclasses import asdict

from rich.table import Table

from cashflow.commands.shared import (
    colored_money,
    console,
    fail,
    format_money,
    load_command_settings,
    resolve_state_path,
)
from cashflow.config import Settings
from cashflow.domain.advice import Advice, build_analysis
from cashflow.domain.aggregator import (
    compute_budget_variance,
    compute_category_breakdown,
    compute_legacy_cash_flow,
    compute_month_over_month_trend,
    compute_yearly_insights,
    find_top_spending_category,
    project_from_insights,
    trend_period,
    update_category_totals,
)
from cashflow.domain.models import AppState, ExpenseCategory
from cashflow.domain.series import budget_vs_actual, build_monthly_series, expense_share, forecast_cash_flow
from cashflow.store.state import load_state

LEVEL_STYLES = {
    "positive": "green",
    "neutral": "cyan",
    "info": "cyan",
    "warning": "yellow",
    "negative": "red",
    "danger": "red",
    "high": "red",
    "medium": "yellow",
}

STATUS_STYLES = {"positive": "green", "warning": "yellow", "debt": "red"}


def _load(settings: Settings) -> AppState:
    try:
        return load_state(resolve_state_path(settings))
    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def format_percentage_with_color(percentage: float) -> str:
    """Format a budget performance percentage; negative means over budget."""
    text = f"{percentage:+.1f}%"
    if percentage < -50:
        return f"[red]{text}[/red]"
    elif percentage < 0:
        return f"[yellow]{text}[/yellow]"
    else:
        return f"[green]{text}[/green]"


def render_advice(title: str, items: list[Advice]) -> None:
    """Render a titled list of advice."""
    if not items:
        return
    console.print(f"\n[bold]{title}[/bold]")
    for item in items:
        style = LEVEL_STYLES.get(item.level, "white")
        console.print(f"  [{style}]●[/{style}] [bold]{item.title}[/bold]: {item.description}")
        if item.action:
            console.print(f"    [dim]→ {item.action}[/dim]")


def report_command(year: int | None = None, as_json: bool = False) -> None:
    """Show yearly totals, savings rate and spending by category."""
    settings = load_command_settings()
    currency = settings.currency_symbol
    state = _load(settings)
    year = year or state.current_year

    insights = compute_yearly_insights(state.transactions, state.fixed_income, state.fixed_expenses, year)
    known = [c.name for c in state.expense_categories] + [c.name for c in state.income_categories]
    breakdown = compute_category_breakdown(state.transactions, year, known)
    top = find_top_spending_category(breakdown)

    if as_json:
        document = {
            "year": year,
            "insights": asdict(insights),
            "breakdown": {name: asdict(entry) for name, entry in breakdown.items()},
            "topSpendingCategory": asdict(top) if top else None,
        }
        print(json.dumps(document, indent=2))
        return

    console.print(f"[bold cyan]Cash Flow {year}[/bold cyan] [dim]({insights.transaction_count} transactions)[/dim]\n")
    console.print(f"  [bold]Total income:[/bold]    {format_money(insights.total_income, currency)}")
    console.print(f"  [bold]Total expenses:[/bold]  {format_money(insights.total_expenses, currency)}")
    console.print(f"  [bold]Net savings:[/bold]     {colored_money(insights.net_savings, currency)}")
    console.print(f"  [bold]Savings rate:[/bold]    {insights.savings_rate:.1f}%")
    console.print(f"  [bold]Monthly average:[/bold] {colored_money(insights.monthly_average, currency)}")

    if insights.fixed_monthly_income or insights.fixed_monthly_expenses:
        console.print(
            f"\n  [dim]Fixed monthly income {format_money(insights.fixed_monthly_income, currency)}, "
            f"fixed monthly expenses {format_money(insights.fixed_monthly_expenses, currency)} "
            "(see 'cashflow legacy')[/dim]"
        )

    if not breakdown:
        console.print("\n[dim]No expenses recorded for this year[/dim]")
        return

    console.print("\n[bold red]Expenses by category:[/bold red]\n")
    max_total = top.total if top else 0
    bar_width = 30
    for entry in sorted(breakdown.values(), key=lambda e: (-e.total, e.category)):
        bar_length = int(entry.total / max_total * bar_width) if max_total > 0 else 0
        amount_display = format_money(entry.total, currency)
        console.print(f"  {entry.category:20} {amount_display:>14} {entry.count:>4}x {'█' * bar_length}")

    if top:
        console.print(f"\n  [bold]Top spending category:[/bold] {top.category} ({format_money(top.total, currency)})")


def budget_command(year: int | None = None) -> None:
    """Show budget versus spending per expense category."""
    settings = load_command_settings()
    currency = settings.currency_symbol
    state = _load(settings)
    year = year or state.current_year

    categories = [
        c
        for c in update_category_totals(state.expense_categories, state.transactions, year)
        if isinstance(c, ExpenseCategory)
    ]
    variances = compute_budget_variance(categories)

    if not variances:
        console.print("[dim]No expense categories defined[/dim]")
        return

    table = Table(title=f"Budget Performance - {year}")
    table.add_column("Category", style="magenta")
    table.add_column("Budgeted", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Variance", justify="right")
    table.add_column("Performance", justify="right")
    table.add_column("Status", justify="center")

    for row in variances:
        status = "[green]under[/green]" if row.status == "under" else "[red]over[/red]"
        table.add_row(
            row.category,
            format_money(row.budgeted, currency),
            format_money(row.spent, currency),
            colored_money(row.variance, currency),
            format_percentage_with_color(row.performance_percent),
            status,
        )

    console.print(table)


def trend_command() -> None:
    """Compare income and expenses of the two most recent months."""
    state = _load(load_command_settings())

    trend = compute_month_over_month_trend(state.transactions)
    period = trend_period(state.transactions)
    if not trend or period is None:
        console.print("[dim]Need transactions in at least two different months to show a trend[/dim]")
        return

    previous, recent = period
    console.print(f"[bold cyan]{recent} vs {previous}[/bold cyan]\n")
    for item in trend:
        arrow = "▲" if item.direction == "up" else "▼"
        # Rising expenses are bad news, rising income good news
        good = (item.direction == "up") == (item.metric == "income")
        style = "green" if good else "red"
        console.print(f"  [{style}]{arrow}[/{style}] {item.description}")


def project_command(horizons: list[int] | None = None, year: int | None = None) -> None:
    """Project the balance forward from this year's totals and recurring definitions."""
    settings = load_command_settings()
    currency = settings.currency_symbol
    state = _load(settings)
    year = year or state.current_year

    chosen = [h for h in horizons if h > 0] if horizons else list(settings.projection_horizons)
    insights = compute_yearly_insights(state.transactions, state.fixed_income, state.fixed_expenses, year)
    projections = project_from_insights(insights, state.recurring_transactions, chosen)

    if not projections:
        console.print("[dim]No projection horizons given[/dim]")
        return

    console.print(
        f"[bold cyan]Future Projections[/bold cyan] [dim](from {year}, "
        f"monthly net {format_money(projections[0].monthly_net, currency, include_sign=True)}, "
        f"{projections[0].trajectory})[/dim]\n"
    )

    table = Table()
    table.add_column("Period", style="cyan")
    table.add_column("Projected", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Confidence", justify="right")

    for projection in projections:
        style = STATUS_STYLES.get(projection.status, "white")
        table.add_row(
            projection.period,
            colored_money(projection.projected_amount, currency),
            f"[{style}]{projection.status}[/{style}]",
            f"{projection.confidence_percent:.0f}%",
        )

    console.print(table)


def analyze_command(year: int | None = None, as_json: bool = False) -> None:
    """Run the full analysis: insights, recommendations and alerts."""
    settings = load_command_settings()
    currency = settings.currency_symbol
    state = _load(settings)

    analysis = build_analysis(state, year, settings.projection_horizons, currency)

    if as_json:
        print(json.dumps(asdict(analysis), indent=2))
        return

    insights = analysis.insights
    console.print(
        f"[bold cyan]Financial Analysis {analysis.year}[/bold cyan] "
        f"[dim]({insights.transaction_count} transactions)[/dim]"
    )
    console.print(
        f"  Net savings {colored_money(insights.net_savings, currency)}, "
        f"savings rate {insights.savings_rate:.1f}%, income {analysis.income_stability}"
    )

    render_advice("Insights", analysis.observations)
    render_advice("Recommendations", analysis.recommendations)
    render_advice("Alerts", analysis.alerts)

    for item in analysis.trend:
        console.print(f"  [dim]{item.description}[/dim]")


def chart_command(year: int | None = None, forecast: int = 6) -> None:
    """Show monthly income, expenses and cumulative net with a short forecast."""
    settings = load_command_settings()
    currency = settings.currency_symbol
    state = _load(settings)
    year = year or state.current_year

    series = build_monthly_series(state.transactions, year)
    table = Table(title=f"Monthly Cash Flow - {year}")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right")
    table.add_column("Expenses", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Cumulative", justify="right")

    for point in series:
        table.add_row(
            point.month,
            format_money(point.income, currency),
            format_money(point.expenses, currency),
            colored_money(point.net, currency),
            colored_money(point.cumulative, currency),
        )

    for forecast_point in forecast_cash_flow(series, forecast):
        table.add_row(
            f"[dim]{forecast_point.label}[/dim]",
            f"[dim]{format_money(forecast_point.income, currency)}[/dim]",
            f"[dim]{format_money(forecast_point.expenses, currency)}[/dim]",
            colored_money(forecast_point.net, currency),
            colored_money(forecast_point.cumulative, currency),
        )

    console.print(table)

    categories = [
        c
        for c in update_category_totals(state.expense_categories, state.transactions, year)
        if isinstance(c, ExpenseCategory)
    ]
    shares = expense_share(categories)
    if shares:
        console.print("\n[bold]Expense share by category:[/bold]")
        for share in shares:
            console.print(f"  {share.category:20} {share.percentage:5.1f}% {'█' * int(share.percentage / 2)}")

    bars = [bar for bar in budget_vs_actual(categories) if bar.budgeted > 0 or bar.spent > 0]
    if bars:
        console.print("\n[bold]Budget vs actual:[/bold]")
        largest = max(max(bar.budgeted, bar.spent) for bar in bars)
        bar_width = 30
        for bar in bars:
            budget_length = int(bar.budgeted / largest * bar_width)
            spent_length = int(bar.spent / largest * bar_width)
            style = "red" if bar.spent > bar.budgeted else "green"
            budgeted = format_money(bar.budgeted, currency)
            spent = format_money(bar.spent, currency)
            console.print(f"  {bar.category:20} budget {budgeted:>14} [dim]{'█' * budget_length}[/dim]")
            console.print(f"  {'':20} spent  {spent:>14} [{style}]{'█' * spent_length}[/{style}]")


def legacy_command() -> None:
    """Show the fixed-plus-variable monthly view with running savings."""
    settings = load_command_settings()
    currency = settings.currency_symbol
    state = _load(settings)

    cash_flow = compute_legacy_cash_flow(state.fixed_income, state.fixed_expenses, state.months)

    table = Table(title="Cash Flow (fixed + variable)")
    table.add_column("Month", style="cyan")
    table.add_column("Variable income", justify="right")
    table.add_column("Variable expenses", justify="right")
    table.add_column("Savings/Debts", justify="right")
    table.add_column("Comments", style="dim")

    for entry, running in zip(state.months, cash_flow.cumulative):
        table.add_row(
            entry.month,
            format_money(entry.variable_income, currency),
            format_money(entry.variable_expenses, currency),
            colored_money(running, currency),
            entry.comments,
        )

    console.print(table)
    console.print(f"\n[bold]Fixed income:[/bold] {format_money(state.fixed_income, currency)}")
    console.print(f"[bold]Fixed expenses:[/bold] {format_money(state.fixed_expenses, currency)}")
    console.print(f"[bold]Total savings/debts:[/bold] {colored_money(cash_flow.total, currency)}")
