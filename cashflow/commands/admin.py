"""Admin commands for init, backup, reset and baseline settings."""

import shutil
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import typer

from cashflow.commands.shared import console, fail, format_money, load_command_settings, resolve_state_path
from cashflow.config import create_default_config, get_config_path
from cashflow.domain.models import MONTH_NAMES, Money, MonthEntry
from cashflow.domain.validation import validate_currency
from cashflow.store.state import init_state, load_state, save_state


def init_command(force: bool = False) -> None:
    """Initialize cashflow state and configuration."""
    config_path = get_config_path()
    state_path = resolve_state_path()

    state_exists = state_path.exists()
    config_exists = config_path.exists()

    # Guard: refuse to overwrite without force flag
    if not force and (state_exists or config_exists):
        console.print("[red]Initialization failed:[/red]", style="bold")
        if state_exists:
            console.print(f"  State file already exists: {state_path}")
        if config_exists:
            console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'cashflow init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating state file at {state_path}...[/cyan]")
        init_state(state_path)
        console.print("[green]✓[/green] State initialized")

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")
    except OSError as e:
        fail(f"Filesystem error: {e}")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]State: {state_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def backup_command(output_dir: str | None = None) -> None:
    """Backup state and configuration files."""
    state_path = resolve_state_path()
    config_path = get_config_path()

    if not state_path.exists():
        fail("State file not found. Run 'cashflow init' first.")

    backup_dir = Path(output_dir).expanduser() if output_dir else state_path.parent / "backups"
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)

        state_backup = backup_dir / f"state_{timestamp}.json"
        shutil.copy2(state_path, state_backup)
        console.print(f"[green]✓[/green] State backed up to: {state_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")
    except OSError as e:
        fail(f"Backup failed: {e}")

    console.print("\n[green]Backup complete![/green]", style="bold")
    console.print(f"[dim]Backup directory: {backup_dir}[/dim]")


def reset_command(yes: bool = False) -> None:
    """Reset all data to defaults."""
    state_path = resolve_state_path()

    if not yes and not typer.confirm("Reset all data? This action cannot be undone.", default=False):
        console.print("[dim]Reset cancelled[/dim]")
        return

    try:
        init_state(state_path)
    except OSError as e:
        fail(f"Filesystem error: {e}")

    console.print("[green]✓[/green] All data has been reset")


def fixed_command(income: float | None = None, expenses: float | None = None) -> None:
    """Show or set the fixed monthly income and expenses."""
    settings = load_command_settings()
    state_path = resolve_state_path(settings)
    currency = settings.currency_symbol

    for label, value in (("Income", income), ("Expenses", expenses)):
        errors = validate_currency(value) if value is not None else []
        if errors:
            fail(f"{label}: {errors[0]}")

    try:
        state = load_state(state_path)

        if income is not None or expenses is not None:
            state = replace(
                state,
                fixed_income=Money(income) if income is not None else state.fixed_income,
                fixed_expenses=Money(expenses) if expenses is not None else state.fixed_expenses,
            )
            save_state(state, state_path)
            console.print("[green]✓[/green] Fixed amounts updated")

        console.print(f"  Fixed income:   {format_money(state.fixed_income, currency)}")
        console.print(f"  Fixed expenses: {format_money(state.fixed_expenses, currency)}")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def month_command(
    month: str,
    income: float | None = None,
    expenses: float | None = None,
    comments: str | None = None,
) -> None:
    """Set variable income, expenses or comments for a month of the fixed-amount view."""
    state_path = resolve_state_path()

    names = {name.lower(): name for name in MONTH_NAMES}
    names.update({name[:3].lower(): name for name in MONTH_NAMES})
    month_name = names.get(month.strip().lower())
    if month_name is None:
        fail(f"Unknown month '{month}'")

    try:
        state = load_state(state_path)

        months: list[MonthEntry] = []
        for entry in state.months:
            if entry.month == month_name:
                entry = replace(
                    entry,
                    variable_income=Money(income) if income is not None else entry.variable_income,
                    variable_expenses=Money(expenses) if expenses is not None else entry.variable_expenses,
                    comments=comments if comments is not None else entry.comments,
                )
            months.append(entry)

        save_state(replace(state, months=months), state_path)
        console.print(f"[green]✓[/green] Updated {month_name}")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")


def year_command(year: int | None = None) -> None:
    """Show or set the year used by reports."""
    state_path = resolve_state_path()

    try:
        state = load_state(state_path)
        if year is not None:
            state = replace(state, current_year=year)
            save_state(state, state_path)
            console.print(f"[green]✓[/green] Current year set to {year}")
        else:
            console.print(f"Current year: [bold]{state.current_year}[/bold]")

    except (OSError, ValueError) as e:
        fail(f"State error: {e}")
