"""Helpers shared by command modules: state location, money display, failure exit."""

import sys
import tomllib
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from cashflow.config import Settings, get_config_path, load_settings
from cashflow.store.state import get_state_path

console = Console()


def load_command_settings() -> Settings:
    """Load settings, exiting with an error when the config file is unreadable."""
    try:
        return load_settings()
    except (OSError, tomllib.TOMLDecodeError) as e:
        fail(f"Config error in {get_config_path()}: {e}. Fix or remove the file.")


def resolve_state_path(settings: Settings | None = None) -> Path:
    """Configured state path if set, otherwise the XDG default."""
    settings = settings or load_command_settings()
    return settings.state_path or get_state_path()


def format_money(amount: float, currency: str = "$", include_sign: bool = False) -> str:
    """Format money amount for display.

    Args:
        amount: Amount in currency units.
        currency: Currency symbol.
        include_sign: Whether to include + for non-negative amounts.

    Returns:
        Formatted string (e.g., "-$123.45", "$123.45" or "+$123.45").
    """
    formatted = f"{currency}{abs(amount):,.2f}"
    if amount < 0:
        return f"-{formatted}"
    if include_sign:
        return f"+{formatted}"
    return formatted


def colored_money(amount: float, currency: str = "$") -> str:
    """Money with sign, green when non-negative and red when negative."""
    if amount < 0:
        return f"[red]{format_money(amount, currency)}[/red]"
    return f"[green]{format_money(amount, currency, include_sign=True)}[/green]"


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)
