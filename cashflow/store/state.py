"""State file persistence.

The whole application state lives in one JSON document whose top-level keys
match the layout used by exports: fixedIncome, fixedExpenses, months,
transactions, recurringTransactions, expenseCategories, incomeCategories,
currentYear and theme.
"""

import json
import os
from pathlib import Path
from typing import Any

from cashflow.domain.models import AppState

STATE_KEYS = (
    "fixedIncome",
    "fixedExpenses",
    "months",
    "transactions",
    "recurringTransactions",
    "expenseCategories",
    "incomeCategories",
    "currentYear",
    "theme",
)

RECORD_LIST_KEYS = (
    "months",
    "transactions",
    "recurringTransactions",
    "expenseCategories",
    "incomeCategories",
)


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_state_path() -> Path:
    """Get the default state file path (XDG compliant)."""
    return get_xdg_data_home() / "cashflow" / "state.json"


def state_exists(state_path: Path | None = None) -> bool:
    """Check if the state file exists.

    Args:
        state_path: Path to check. If None, uses default location.

    Returns:
        True if the state file exists, False otherwise.
    """
    if state_path is None:
        state_path = get_state_path()
    return state_path.exists()


def read_document(path: Path) -> dict[str, Any]:
    """Read a JSON object from disk.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the document is not a JSON object.
    """
    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return document


def invalid_record_lists(document: dict[str, Any]) -> list[str]:
    """Keys whose value is present but not a list of JSON objects.

    Missing and null values are allowed; they fall back to defaults.
    """
    invalid = []
    for key in RECORD_LIST_KEYS:
        value = document.get(key)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            invalid.append(key)
    return invalid


def write_document(document: dict[str, Any], path: Path) -> None:
    """Write a JSON object to disk, replacing the file atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2)
        f.write("\n")
    os.replace(tmp_path, path)


def load_state(state_path: Path | None = None) -> AppState:
    """Load application state, returning defaults when no state file exists.

    Args:
        state_path: Path to the state file. If None, uses default location.

    Returns:
        AppState snapshot.

    Raises:
        OSError: If the file exists but cannot be read.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the document is malformed.
    """
    if state_path is None:
        state_path = get_state_path()

    if not state_path.exists():
        return AppState()

    document = read_document(state_path)
    invalid = invalid_record_lists(document)
    if invalid:
        raise ValueError(f"{state_path} has malformed fields: {', '.join(invalid)}")
    return AppState.from_dict(document)


def save_state(state: AppState, state_path: Path | None = None) -> None:
    """Persist application state.

    Args:
        state: State snapshot to write.
        state_path: Path to the state file. If None, uses default location.

    Raises:
        OSError: If the file cannot be written.
    """
    if state_path is None:
        state_path = get_state_path()

    write_document(state.to_dict(), state_path)


def init_state(state_path: Path | None = None) -> AppState:
    """Write a fresh default state file and return it."""
    state = AppState()
    save_state(state, state_path)
    return state
