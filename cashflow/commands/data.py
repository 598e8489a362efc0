"""Data commands for JSON/CSV export and import."""

import json
from datetime import date
from pathlib import Path

from cashflow.commands.shared import console, fail, resolve_state_path
from cashflow.store.state import load_state, save_state
from cashflow.store.transfer import ImportFormatError, export_csv, export_json, import_csv, import_json

FORMATS = ("json", "csv")


def default_export_path(fmt: str) -> Path:
    """Dated file name in the working directory."""
    stem = "cash-flow-backup" if fmt == "json" else "cash-flow-transactions"
    return Path(f"{stem}-{date.today().isoformat()}.{fmt}")


def export_command(fmt: str, output: str | None = None) -> None:
    """Export all data as JSON, or transactions as CSV."""
    if fmt not in FORMATS:
        fail(f"Format must be one of: {', '.join(FORMATS)}")

    path = Path(output).expanduser() if output else default_export_path(fmt)

    try:
        state = load_state(resolve_state_path())
        if fmt == "json":
            export_json(state, path)
            console.print(f"[green]✓[/green] Exported all data to {path}")
        else:
            count = export_csv(state.transactions, path)
            console.print(f"[green]✓[/green] Exported {count} transactions to {path}")

    except (OSError, ValueError) as e:
        fail(f"Export failed: {e}")


def import_command(fmt: str, source: str) -> None:
    """Import a JSON backup (replacing data) or CSV transactions (appending)."""
    if fmt not in FORMATS:
        fail(f"Format must be one of: {', '.join(FORMATS)}")

    path = Path(source).expanduser()
    state_path = resolve_state_path()

    try:
        state = load_state(state_path)

        if fmt == "json":
            new_state = import_json(state, path)
            save_state(new_state, state_path)
            console.print("[green]✓[/green] Data imported successfully!")
            count = len(new_state.transactions)
            console.print(f"[dim]{count} transactions, current year {new_state.current_year}[/dim]")
            return

        new_state, imported, skipped = import_csv(state, path)
        if not imported:
            console.print("[yellow]No valid transactions found in the CSV file[/yellow]")
            return

        save_state(new_state, state_path)
        console.print(f"[green]✓[/green] Successfully imported {imported} transactions!")
        if skipped:
            console.print(f"[dim]Skipped {skipped} invalid rows[/dim]")

    except json.JSONDecodeError as e:
        fail(f"Error reading file. Please make sure it's a valid JSON file: {e}")
    except ImportFormatError as e:
        fail(f"Invalid file format: {e}")
    except (OSError, ValueError) as e:
        fail(f"Import failed: {e}")
