"""Store layer - provides persistence for the application.

This module re-exports all public store functions for easy importing.
"""

from cashflow.store.state import get_state_path, init_state, load_state, save_state, state_exists
from cashflow.store.transfer import (
    ImportFormatError,
    export_csv,
    export_json,
    import_csv,
    import_json,
    merge_import,
)

__all__ = [
    # State
    "get_state_path",
    "init_state",
    "load_state",
    "save_state",
    "state_exists",
    # Transfer
    "ImportFormatError",
    "export_csv",
    "export_json",
    "import_csv",
    "import_json",
    "merge_import",
]
