"""CLI entry point for cashflow."""

import typer

from cashflow.commands.admin import (
    backup_command,
    fixed_command,
    init_command,
    month_command,
    reset_command,
    year_command,
)
from cashflow.commands.categories import (
    add_category_command,
    delete_category_command,
    list_categories_command,
    set_budget_command,
)
from cashflow.commands.data import export_command, import_command
from cashflow.commands.recurring import (
    add_recurring_command,
    delete_recurring_command,
    generate_recurring_command,
    list_recurring_command,
    toggle_recurring_command,
)
from cashflow.commands.report import (
    analyze_command,
    budget_command,
    chart_command,
    legacy_command,
    project_command,
    report_command,
    trend_command,
)
from cashflow.commands.transactions import add_command, delete_command, edit_command, list_command

app = typer.Typer(
    name="cashflow",
    help="Cash Flow Pro - track income, expenses, budgets and where your money is heading",
    add_completion=False,
)

recurring_app = typer.Typer(help="Manage recurring transactions", add_completion=False)
category_app = typer.Typer(help="Manage income and expense categories", add_completion=False)

app.add_typer(recurring_app, name="recurring")
app.add_typer(category_app, name="category")


@app.callback()
def main() -> None:
    """Cash Flow Pro - track income, expenses, budgets and where your money is heading."""
    pass


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing state and config"),
) -> None:
    """Initialize cashflow state and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: beside the state file)"),
) -> None:
    """Backup your state and configuration files."""
    backup_command(output_dir)


@app.command(name="reset")
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Reset all your data to defaults."""
    reset_command(yes)


@app.command(name="fixed")
def fixed(
    income: float = typer.Option(None, "--income", help="Fixed monthly income"),
    expenses: float = typer.Option(None, "--expenses", help="Fixed monthly expenses"),
) -> None:
    """Show or set your fixed monthly income and expenses."""
    fixed_command(income, expenses)


@app.command(name="month")
def month(
    name: str,
    income: float = typer.Option(None, "--income", help="Variable income for the month"),
    expenses: float = typer.Option(None, "--expenses", help="Variable expenses for the month"),
    comments: str = typer.Option(None, "--comments", help="Free-text comments"),
) -> None:
    """Set variable amounts for a month of the fixed-amount view."""
    month_command(name, income, expenses, comments)


@app.command(name="year")
def year(
    value: int = typer.Argument(None, help="Year to select (omit to show the current one)"),
) -> None:
    """Show or set the year your reports cover."""
    year_command(value)


@app.command(name="add")
def add(
    date: str,
    kind: str = typer.Argument(..., help="'income' or 'expense'"),
    category: str = typer.Argument(..., help="Category name"),
    amount: float = typer.Argument(..., help="Amount (non-negative)"),
    description: str = typer.Argument(..., help="Short description"),
) -> None:
    """Add a transaction."""
    add_command(date, kind, category, amount, description)


@app.command(name="list")
def list_transactions(
    year: int = typer.Option(None, "--year", help="Only show this year"),
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions."""
    list_command(year, limit, all)


@app.command(name="edit")
def edit(
    transaction_id: int,
    date: str = typer.Option(None, "--date", help="New date"),
    kind: str = typer.Option(None, "--type", help="New type ('income' or 'expense')"),
    category: str = typer.Option(None, "--category", help="New category"),
    amount: float = typer.Option(None, "--amount", help="New amount"),
    description: str = typer.Option(None, "--description", help="New description"),
) -> None:
    """Edit a transaction in place."""
    edit_command(transaction_id, date, kind, category, amount, description)


@app.command(name="delete")
def delete(transaction_id: int) -> None:
    """Delete a transaction."""
    delete_command(transaction_id)


@recurring_app.command(name="add")
def recurring_add(
    name: str,
    kind: str = typer.Argument(..., help="'income' or 'expense'"),
    category: str = typer.Argument(..., help="Category name"),
    amount: float = typer.Argument(..., help="Amount per occurrence"),
    frequency: str = typer.Option(
        "monthly", "--frequency", help="weekly, bi-weekly, monthly, quarterly or yearly"
    ),
    start_date: str = typer.Option(None, "--start", help="Start date"),
    description: str = typer.Option("", "--description", help="Notes"),
) -> None:
    """Define a recurring transaction."""
    add_recurring_command(name, kind, category, amount, frequency, start_date, description)


@recurring_app.command(name="list")
def recurring_list() -> None:
    """List your recurring transactions."""
    list_recurring_command()


@recurring_app.command(name="toggle")
def recurring_toggle(recurring_id: int) -> None:
    """Pause or resume a recurring transaction."""
    toggle_recurring_command(recurring_id)


@recurring_app.command(name="delete")
def recurring_delete(recurring_id: int) -> None:
    """Delete a recurring transaction."""
    delete_recurring_command(recurring_id)


@recurring_app.command(name="generate")
def recurring_generate(
    on: str = typer.Option(None, "--on", help="Generate for the month of this date (default: today)"),
) -> None:
    """Generate this month's transactions from active recurring definitions."""
    generate_recurring_command(on)


@category_app.command(name="add")
def category_add(
    kind: str = typer.Argument(..., help="'expense' or 'income'"),
    name: str = typer.Argument(..., help="Category name"),
    budgeted: float = typer.Option(0.0, "--budget", help="Budgeted amount"),
) -> None:
    """Add a category."""
    add_category_command(kind, name, budgeted)


@category_app.command(name="budget")
def category_budget(
    kind: str = typer.Argument(..., help="'expense' or 'income'"),
    name: str = typer.Argument(..., help="Category name"),
    budgeted: float = typer.Argument(..., help="Budgeted amount"),
) -> None:
    """Set the budget for a category."""
    set_budget_command(kind, name, budgeted)


@category_app.command(name="list")
def category_list(
    year: int = typer.Option(None, "--year", help="Year for spent/actual totals"),
) -> None:
    """List categories with budgets and totals."""
    list_categories_command(year)


@category_app.command(name="delete")
def category_delete(
    kind: str = typer.Argument(..., help="'expense' or 'income'"),
    name: str = typer.Argument(..., help="Category name"),
) -> None:
    """Delete a category."""
    delete_category_command(kind, name)


@app.command(name="report")
def report(
    year: int = typer.Option(None, "--year", help="Year to report (default: current year)"),
    as_json: bool = typer.Option(False, "--json", help="Print machine-readable JSON"),
) -> None:
    """Show your yearly totals and spending by category."""
    report_command(year, as_json)


@app.command(name="budget")
def budget(
    year: int = typer.Option(None, "--year", help="Year to report (default: current year)"),
) -> None:
    """Show your budget performance per category."""
    budget_command(year)


@app.command(name="trend")
def trend() -> None:
    """Compare your last two months."""
    trend_command()


@app.command(name="project")
def project(
    horizon: list[int] = typer.Option(None, "--horizon", help="Horizon in months (repeatable)"),
    year: int = typer.Option(None, "--year", help="Year to project from (default: current year)"),
) -> None:
    """Project your balance into the future."""
    project_command(horizon, year)


@app.command(name="analyze")
def analyze(
    year: int = typer.Option(None, "--year", help="Year to analyze (default: current year)"),
    as_json: bool = typer.Option(False, "--json", help="Print machine-readable JSON"),
) -> None:
    """Get insights, recommendations and alerts about your finances."""
    analyze_command(year, as_json)


@app.command(name="chart")
def chart(
    year: int = typer.Option(None, "--year", help="Year to chart (default: current year)"),
    forecast: int = typer.Option(6, "--forecast", help="Months to forecast"),
) -> None:
    """Show your monthly cash flow with a short forecast."""
    chart_command(year, forecast)


@app.command(name="legacy")
def legacy() -> None:
    """Show the fixed-plus-variable monthly cash flow view."""
    legacy_command()


@app.command(name="export")
def export(
    fmt: str = typer.Argument(..., help="'json' (all data) or 'csv' (transactions)"),
    output: str = typer.Option(None, "--output", "-o", help="Output file (default: dated file here)"),
) -> None:
    """Export your data."""
    export_command(fmt, output)


@app.command(name="import")
def import_data(
    fmt: str = typer.Argument(..., help="'json' (replace data) or 'csv' (append transactions)"),
    source: str = typer.Argument(..., help="File to import"),
) -> None:
    """Import data from a backup or CSV file."""
    import_command(fmt, source)


if __name__ == "__main__":
    app()
