"""Category management commands (add, budget, list, delete)."""

from dataclasses import replace

from rich.table import Table

from cashflow.commands.shared import console, fail, format_money, load_command_settings, resolve_state_path
from cashflow.domain.aggregator import update_category_totals
from cashflow.domain.models import AppState, CategoryName, ExpenseCategory, IncomeCategory, Money
from cashflow.domain.validation import validate_category
from cashflow.store.state import load_state, save_state

CATEGORY_KINDS = ("expense", "income")


def _check_kind(kind: str) -> None:
    if kind not in CATEGORY_KINDS:
        fail(f"Category kind must be one of: {', '.join(CATEGORY_KINDS)}")


def _names(state: AppState, kind: str) -> list[CategoryName]:
    if kind == "income":
        return [c.name for c in state.income_categories]
    return [c.name for c in state.expense_categories]


def add_category_command(kind: str, name: str, budgeted: float = 0.0) -> None:
    """Add an expense or income category."""
    _check_kind(kind)
    state_path = resolve_state_path()

    result = validate_category(name, budgeted)
    if not result.is_valid:
        for field_name, messages in result.errors.items():
            console.print(f"[red]{field_name}: {'; '.join(messages)}[/red]")
        fail("Category not added")

    try:
        state = load_state(state_path)
        category_name = CategoryName(name.strip())

        if category_name in _names(state, kind):
            console.print(f"[yellow]Category '{category_name}' already exists[/yellow]")
            return

        if kind == "income":
            state = replace(
                state,
                income_categories=[*state.income_categories, IncomeCategory(category_name, Money(budgeted))],
            )
        else:
            state = replace(
                state,
                expense_categories=[*state.expense_categories, ExpenseCategory(category_name, Money(budgeted))],
            )

        save_state(state, state_path)
        console.print(f"[green]✓[/green] Created {kind} category: {category_name}")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def set_budget_command(kind: str, name: str, budgeted: float) -> None:
    """Set the budgeted amount for a category."""
    _check_kind(kind)
    settings = load_command_settings()
    state_path = resolve_state_path(settings)

    result = validate_category(name, budgeted)
    if not result.is_valid:
        for field_name, messages in result.errors.items():
            console.print(f"[red]{field_name}: {'; '.join(messages)}[/red]")
        fail("Budget not updated")

    try:
        state = load_state(state_path)
        if name not in _names(state, kind):
            fail(f"Category '{name}' not found")

        if kind == "income":
            state = replace(
                state,
                income_categories=[
                    replace(c, budgeted=Money(budgeted)) if c.name == name else c for c in state.income_categories
                ],
            )
        else:
            state = replace(
                state,
                expense_categories=[
                    replace(c, budgeted=Money(budgeted)) if c.name == name else c for c in state.expense_categories
                ],
            )

        save_state(state, state_path)
        console.print(f"[green]✓ {name} budget set to {format_money(budgeted, settings.currency_symbol)}[/green]")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def delete_category_command(kind: str, name: str) -> None:
    """Delete a category; its transactions keep their category name."""
    _check_kind(kind)
    state_path = resolve_state_path()

    try:
        state = load_state(state_path)
        if name not in _names(state, kind):
            fail(f"Category '{name}' not found")

        if kind == "income":
            state = replace(state, income_categories=[c for c in state.income_categories if c.name != name])
        else:
            state = replace(state, expense_categories=[c for c in state.expense_categories if c.name != name])

        save_state(state, state_path)
        console.print(f"[green]✓[/green] Deleted {kind} category: {name}")
        console.print("[dim]Existing transactions now count as Uncategorized in breakdowns[/dim]")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def list_categories_command(year: int | None = None) -> None:
    """List categories with budgets and derived totals for a year."""
    settings = load_command_settings()
    currency = settings.currency_symbol

    try:
        state = load_state(resolve_state_path(settings))
    except (OSError, ValueError) as e:
        fail(f"State error: {e}")

    year = year or state.current_year
    expense_categories = update_category_totals(state.expense_categories, state.transactions, year)
    income_categories = update_category_totals(state.income_categories, state.transactions, year)

    table = Table(title=f"Expense Categories - {year}")
    table.add_column("Category", style="magenta")
    table.add_column("Budgeted", justify="right")
    table.add_column("Spent", justify="right")
    for category in expense_categories:
        if isinstance(category, ExpenseCategory):
            table.add_row(
                category.name, format_money(category.budgeted, currency), format_money(category.spent, currency)
            )
    console.print(table)

    table = Table(title=f"Income Categories - {year}")
    table.add_column("Category", style="magenta")
    table.add_column("Budgeted", justify="right")
    table.add_column("Actual", justify="right")
    for category in income_categories:
        if isinstance(category, IncomeCategory):
            table.add_row(
                category.name, format_money(category.budgeted, currency), format_money(category.actual, currency)
            )
    console.print(table)
