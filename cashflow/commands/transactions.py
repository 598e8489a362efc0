"""Transaction management commands (add, list, edit, delete)."""

from dataclasses import replace
from datetime import date

import pandas as pd
import typer
from rich.table import Table

from cashflow.commands.shared import (
    colored_money,
    console,
    fail,
    format_money,
    load_command_settings,
    resolve_state_path,
)
from cashflow.domain.models import (
    AppState,
    CategoryName,
    ExpenseCategory,
    IncomeCategory,
    Money,
    Transaction,
    TransactionType,
)
from cashflow.domain.validation import validate_transaction
from cashflow.store.state import load_state, save_state


def parse_cli_date(value: str) -> date:
    """Normalize a user-entered date using pandas.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    try:
        parsed = pd.to_datetime(value)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Invalid date format: {value}") from e
    if pd.isna(parsed):
        raise ValueError(f"Invalid date format: {value}")
    return parsed.date()


def ensure_category(state: AppState, category: CategoryName, txn_type: TransactionType) -> AppState | None:
    """Make sure a category exists for the transaction type, offering to create it.

    Returns:
        State (possibly with the new category), or None if the user declined.
    """
    if txn_type == TransactionType.INCOME:
        if category in [c.name for c in state.income_categories]:
            return state
    elif category in [c.name for c in state.expense_categories]:
        return state

    console.print(f"\n[yellow]{txn_type.value.capitalize()} category '{category}' doesn't exist yet[/yellow]")
    if not typer.confirm("Create it?", default=True):
        return None

    console.print(f"[green]✓[/green] Created category: {category}")
    if txn_type == TransactionType.INCOME:
        return replace(state, income_categories=[*state.income_categories, IncomeCategory(category)])
    return replace(state, expense_categories=[*state.expense_categories, ExpenseCategory(category)])


def add_command(
    txn_date: str,
    txn_type: str,
    category: str,
    amount: float,
    description: str,
) -> None:
    """Add a transaction manually.

    Args:
        txn_date: Transaction date (YYYY-MM-DD or other formats pandas understands).
        txn_type: "income" or "expense".
        category: Category name.
        amount: Non-negative amount in currency units.
        description: Transaction description.
    """
    settings = load_command_settings()
    state_path = resolve_state_path(settings)

    try:
        parsed_date = parse_cli_date(txn_date)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, MM/DD/YYYY, etc.[/dim]")
        fail("Transaction not added")

    result = validate_transaction(amount, description, parsed_date, txn_type, category)
    if not result.is_valid:
        for field_name, messages in result.errors.items():
            console.print(f"[red]{field_name}: {'; '.join(messages)}[/red]")
        fail("Transaction not added")

    try:
        state = load_state(state_path)
        kind = TransactionType(txn_type)
        category_name = CategoryName(category.strip())

        checked = ensure_category(state, category_name, kind)
        if checked is None:
            console.print("[dim]Transaction not added[/dim]")
            return

        txn = Transaction(
            id=checked.next_transaction_id(),
            date=parsed_date,
            type=kind,
            category=category_name,
            amount=Money(amount),
            description=description.strip(),
        )
        save_state(replace(checked, transactions=[*checked.transactions, txn]), state_path)

        console.print(f"[green]✓[/green] Transaction {txn.id} added:")
        console.print(f"  Date: {txn.date.isoformat()}")
        console.print(f"  Type: {txn.type.value}")
        console.print(f"  Category: {txn.category}")
        console.print(f"  Amount: {format_money(txn.amount, settings.currency_symbol)}")
        console.print(f"  Description: {txn.description}")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def list_command(
    year: int | None = None,
    limit: int = 50,
    all: bool = False,
) -> None:
    """List transactions, newest first."""
    settings = load_command_settings()
    currency = settings.currency_symbol

    try:
        state = load_state(resolve_state_path(settings))
    except (OSError, ValueError) as e:
        fail(f"State error: {e}")

    transactions = sorted(state.transactions, key=lambda t: (t.date, t.id), reverse=True)
    if year is not None:
        transactions = [t for t in transactions if t.date.year == year]
    if not all:
        transactions = transactions[:limit]

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    title = f"Transactions (showing {'all ' if all else ''}{len(transactions)})"
    table = Table(title=title)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Recurring", justify="center")

    for txn in transactions:
        signed = txn.amount if txn.type == TransactionType.INCOME else -txn.amount
        table.add_row(
            str(txn.id),
            txn.date.isoformat(),
            txn.category or "[dim]-[/dim]",
            txn.description,
            colored_money(signed, currency),
            "↻" if txn.recurring else "",
        )

    console.print(table)


def edit_command(
    transaction_id: int,
    txn_date: str | None = None,
    txn_type: str | None = None,
    category: str | None = None,
    amount: float | None = None,
    description: str | None = None,
) -> None:
    """Replace fields of an existing transaction."""
    state_path = resolve_state_path()

    try:
        state = load_state(state_path)
        existing = next((t for t in state.transactions if t.id == transaction_id), None)
        if existing is None:
            fail(f"Transaction {transaction_id} not found")

        updated = replace(
            existing,
            date=parse_cli_date(txn_date) if txn_date is not None else existing.date,
            type=TransactionType(txn_type) if txn_type is not None else existing.type,
            category=CategoryName(category.strip()) if category is not None else existing.category,
            amount=Money(amount) if amount is not None else existing.amount,
            description=description.strip() if description is not None else existing.description,
        )

        result = validate_transaction(
            updated.amount, updated.description, updated.date, updated.type.value, updated.category
        )
        if not result.is_valid:
            for field_name, messages in result.errors.items():
                console.print(f"[red]{field_name}: {'; '.join(messages)}[/red]")
            fail("Transaction not updated")

        transactions = [updated if t.id == transaction_id else t for t in state.transactions]
        save_state(replace(state, transactions=transactions), state_path)
        console.print(f"[green]✓[/green] Transaction {transaction_id} updated")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def delete_command(transaction_id: int) -> None:
    """Delete a transaction by id."""
    state_path = resolve_state_path()

    try:
        state = load_state(state_path)
        remaining = [t for t in state.transactions if t.id != transaction_id]
        if len(remaining) == len(state.transactions):
            fail(f"Transaction {transaction_id} not found")

        save_state(replace(state, transactions=remaining), state_path)
        console.print(f"[green]✓[/green] Transaction {transaction_id} deleted")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")
