"""JSON and CSV export/import of application data."""

import csv
import json
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from cashflow.domain.models import AppState, CategoryName, Money, Transaction, TransactionType
from cashflow.domain.validation import coerce_amount
from cashflow.store.state import STATE_KEYS, invalid_record_lists, read_document, write_document

EXPORT_VERSION = "3.0.0"

CSV_COLUMNS = ["Date", "Type", "Category", "Amount", "Description"]

REQUIRED_IMPORT_KEYS = ("transactions", "expenseCategories", "incomeCategories", "currentYear")
LIST_IMPORT_KEYS = ("transactions", "expenseCategories", "incomeCategories")


class ImportFormatError(ValueError):
    """Raised when an import file does not have the expected structure."""


def build_export(state: AppState, now: datetime) -> dict[str, Any]:
    """Build the export document: version and timestamp followed by the state.

    Args:
        state: State snapshot to export.
        now: Export timestamp.

    Returns:
        JSON-compatible dictionary.
    """
    return {"version": EXPORT_VERSION, "exportDate": now.isoformat(), **state.to_dict()}


def export_json(state: AppState, path: Path, now: datetime | None = None) -> None:
    """Write a JSON backup of the whole state."""
    write_document(build_export(state, now or datetime.now()), path)


def validate_import_data(document: dict[str, Any]) -> None:
    """Check an import document has the required keys and list shapes.

    Raises:
        ImportFormatError: If the structure is invalid.
    """
    missing = [key for key in REQUIRED_IMPORT_KEYS if key not in document]
    if missing:
        raise ImportFormatError(f"Missing required fields: {', '.join(missing)}")

    not_lists = [key for key in LIST_IMPORT_KEYS if not isinstance(document[key], list)]
    not_lists += [key for key in invalid_record_lists(document) if key not in not_lists]
    if not_lists:
        raise ImportFormatError(f"Fields must be lists of objects: {', '.join(not_lists)}")


def merge_import(state: AppState, document: dict[str, Any]) -> AppState:
    """Replace every state key present in the import document.

    Keys absent from the document keep their current values.

    Raises:
        ImportFormatError: If the document is structurally invalid.
    """
    validate_import_data(document)

    merged = state.to_dict()
    for key in STATE_KEYS:
        if key in document and document[key] is not None:
            merged[key] = document[key]

    try:
        return AppState.from_dict(merged)
    except ValueError as e:
        raise ImportFormatError(f"Invalid data: {e}") from e


def import_json(state: AppState, path: Path) -> AppState:
    """Load a JSON backup and merge it into state.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the file is not valid JSON.
        ImportFormatError: If the document is structurally invalid.
    """
    try:
        document = read_document(path)
    except json.JSONDecodeError:
        raise
    except ValueError as e:
        raise ImportFormatError(str(e)) from e
    return merge_import(state, document)


def export_csv(transactions: list[Transaction], path: Path) -> int:
    """Write transactions as CSV with every field quoted.

    Returns:
        Number of rows written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL)
        writer.writerow(CSV_COLUMNS)
        for txn in transactions:
            writer.writerow([txn.date.isoformat(), txn.type.value, txn.category, txn.amount, txn.description])
    return len(transactions)


def parse_csv_row(row: dict[str, str], txn_id: int) -> Transaction | None:
    """Parse one CSV row into a transaction.

    Args:
        row: Row keyed by CSV_COLUMNS.
        txn_id: Id to assign.

    Returns:
        Transaction, or None when the date, type or amount is unusable.
    """
    parsed_date = pd.to_datetime(row.get("Date", "").strip(), errors="coerce")
    if pd.isna(parsed_date):
        return None

    try:
        txn_type = TransactionType(row.get("Type", "").strip().lower())
    except ValueError:
        return None

    amount = coerce_amount(row.get("Amount"))
    if amount <= 0:
        return None

    return Transaction(
        id=txn_id,
        date=parsed_date.date(),
        type=txn_type,
        category=CategoryName(row.get("Category", "").strip()),
        amount=Money(amount),
        description=row.get("Description", "").strip(),
        recurring=False,
    )


def read_csv_transactions(path: Path, first_id: int) -> tuple[list[Transaction], int]:
    """Read transactions from a CSV file.

    Args:
        path: CSV file with a Date, Type, Category, Amount, Description header.
        first_id: Id for the first parsed transaction.

    Returns:
        Tuple of (transactions, skipped_rows).

    Raises:
        OSError: If the file cannot be read.
        ImportFormatError: If required columns are missing.
    """
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError as e:
        raise ImportFormatError("CSV file is empty") from e
    frame.columns = [str(c).strip() for c in frame.columns]

    missing = [c for c in ("Date", "Type", "Amount") if c not in frame.columns]
    if missing:
        raise ImportFormatError(f"CSV is missing columns: {', '.join(missing)}")

    transactions: list[Transaction] = []
    skipped = 0
    for row in frame.to_dict(orient="records"):
        txn = parse_csv_row(row, first_id + len(transactions))
        if txn is None:
            skipped += 1
        else:
            transactions.append(txn)

    return transactions, skipped


def import_csv(state: AppState, path: Path) -> tuple[AppState, int, int]:
    """Append transactions from a CSV file to state.

    Returns:
        Tuple of (new_state, imported_count, skipped_count).
    """
    transactions, skipped = read_csv_transactions(path, state.next_transaction_id())
    new_state = replace(state, transactions=[*state.transactions, *transactions])
    return new_state, len(transactions), skipped
