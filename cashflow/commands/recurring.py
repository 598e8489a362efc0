"""Recurring transaction commands (add, list, toggle, delete, generate)."""

from dataclasses import replace
from datetime import date

from rich.table import Table

from cashflow.commands.shared import console, fail, format_money, load_command_settings, resolve_state_path
from cashflow.commands.transactions import ensure_category, parse_cli_date
from cashflow.domain.models import CategoryName, Frequency, Money, RecurringTransaction, TransactionType
from cashflow.domain.recurring import (
    compute_recurring_monthly_total,
    generate_recurring_transactions,
    monthly_equivalent,
    toggle_recurring,
)
from cashflow.domain.validation import validate_recurring_transaction
from cashflow.store.state import load_state, save_state


def add_recurring_command(
    name: str,
    txn_type: str,
    category: str,
    amount: float,
    frequency: str = "monthly",
    start_date: str | None = None,
    description: str = "",
) -> None:
    """Define a new recurring transaction."""
    settings = load_command_settings()
    state_path = resolve_state_path(settings)

    result = validate_recurring_transaction(amount, name, frequency, txn_type, category)
    if not result.is_valid:
        for field_name, messages in result.errors.items():
            console.print(f"[red]{field_name}: {'; '.join(messages)}[/red]")
        fail("Recurring transaction not added")

    try:
        state = load_state(state_path)
        kind = TransactionType(txn_type)
        category_name = CategoryName(category.strip())

        checked = ensure_category(state, category_name, kind)
        if checked is None:
            console.print("[dim]Recurring transaction not added[/dim]")
            return

        recurring = RecurringTransaction(
            id=checked.next_recurring_id(),
            name=name.strip(),
            type=kind,
            category=category_name,
            amount=Money(amount),
            frequency=Frequency(frequency),
            start_date=parse_cli_date(start_date) if start_date else None,
            is_active=True,
            description=description.strip(),
        )
        save_state(
            replace(checked, recurring_transactions=[*checked.recurring_transactions, recurring]),
            state_path,
        )

        monthly = format_money(monthly_equivalent(recurring), settings.currency_symbol)
        console.print(f"[green]✓[/green] Recurring transaction {recurring.id} added: {recurring.name}")
        console.print(f"  [dim]{recurring.frequency.value}, about {monthly} per month[/dim]")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def list_recurring_command() -> None:
    """List recurring transactions with their monthly equivalents."""
    settings = load_command_settings()
    currency = settings.currency_symbol

    try:
        state = load_state(resolve_state_path(settings))
    except (OSError, ValueError) as e:
        fail(f"State error: {e}")

    if not state.recurring_transactions:
        console.print("[yellow]No recurring transactions defined[/yellow]")
        return

    table = Table(title="Recurring Transactions")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Type")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")
    table.add_column("Frequency", style="cyan")
    table.add_column("Monthly", justify="right")
    table.add_column("Status", justify="center")

    for recurring in state.recurring_transactions:
        color = "green" if recurring.type == TransactionType.INCOME else "red"
        table.add_row(
            str(recurring.id),
            recurring.name,
            f"[{color}]{recurring.type.value}[/{color}]",
            recurring.category,
            format_money(recurring.amount, currency),
            recurring.frequency.value,
            format_money(monthly_equivalent(recurring), currency),
            "[green]active[/green]" if recurring.is_active else "[dim]paused[/dim]",
        )

    console.print(table)

    income = compute_recurring_monthly_total(state.recurring_transactions, TransactionType.INCOME)
    expenses = compute_recurring_monthly_total(state.recurring_transactions, TransactionType.EXPENSE)
    console.print(f"\n[bold]Monthly recurring income:[/bold] {format_money(income, currency)}")
    console.print(f"[bold]Monthly recurring expenses:[/bold] {format_money(expenses, currency)}")


def toggle_recurring_command(recurring_id: int) -> None:
    """Pause or resume a recurring transaction."""
    state_path = resolve_state_path()

    try:
        state = load_state(state_path)
        updated, toggled = toggle_recurring(state.recurring_transactions, recurring_id)
        if toggled is None:
            fail(f"Recurring transaction {recurring_id} not found")

        save_state(replace(state, recurring_transactions=updated), state_path)
        status = "resumed" if toggled.is_active else "paused"
        console.print(f"[green]✓[/green] {toggled.name} {status}")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def delete_recurring_command(recurring_id: int) -> None:
    """Delete a recurring transaction definition."""
    state_path = resolve_state_path()

    try:
        state = load_state(state_path)
        remaining = [r for r in state.recurring_transactions if r.id != recurring_id]
        if len(remaining) == len(state.recurring_transactions):
            fail(f"Recurring transaction {recurring_id} not found")

        save_state(replace(state, recurring_transactions=remaining), state_path)
        console.print(f"[green]✓[/green] Recurring transaction {recurring_id} deleted")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def generate_recurring_command(on: str | None = None) -> None:
    """Generate this month's transactions from active recurring definitions."""
    state_path = resolve_state_path()

    try:
        today = parse_cli_date(on) if on else date.today()
        state = load_state(state_path)

        generated = generate_recurring_transactions(
            state.recurring_transactions, today, state.next_transaction_id()
        )
        if not generated:
            console.print("[yellow]No active recurring transactions to generate[/yellow]")
            return

        save_state(replace(state, transactions=[*state.transactions, *generated]), state_path)
        console.print(
            f"[green]✓[/green] Generated {len(generated)} recurring transactions for {today.strftime('%B %Y')}"
        )

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")
