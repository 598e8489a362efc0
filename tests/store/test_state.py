"""Tests for cashflow.store.state persistence."""

import json
import os
from datetime import date
from pathlib import Path

import pytest

from cashflow.domain.models import AppState, CategoryName, Transaction, TransactionType
from cashflow.store.state import (
    STATE_KEYS,
    get_state_path,
    init_state,
    load_state,
    read_document,
    save_state,
    state_exists,
)


class TestGetStatePath:
    """Tests for get_state_path."""

    def test_uses_xdg_data_home(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Should place the state file under XDG_DATA_HOME."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert get_state_path() == tmp_path / "cashflow" / "state.json"

    def test_falls_back_to_local_share(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should fall back to ~/.local/share without XDG_DATA_HOME."""
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)

        assert get_state_path() == Path.home() / ".local" / "share" / "cashflow" / "state.json"


class TestLoadState:
    """Tests for load_state and save_state."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Should return a default state when no file exists."""
        state_path = tmp_path / "state.json"

        assert not state_exists(state_path)
        assert load_state(state_path) == AppState()

    def test_save_then_load(self, tmp_path: Path) -> None:
        """Should persist and reload the same state."""
        state_path = tmp_path / "nested" / "state.json"
        state = AppState(
            fixed_income=1000.0,
            transactions=[Transaction(1, date(2024, 5, 5), TransactionType.INCOME, CategoryName("Salary"), 2000.0)],
            current_year=2024,
        )

        save_state(state, state_path)

        assert state_exists(state_path)
        assert load_state(state_path) == state
        assert not (tmp_path / "nested" / "state.json.tmp").exists()

    def test_document_has_all_keys(self, tmp_path: Path) -> None:
        """Should write every top-level state key."""
        state_path = tmp_path / "state.json"
        init_state(state_path)

        with open(state_path, encoding="utf-8") as f:
            document = json.load(f)
        assert set(document) == set(STATE_KEYS)

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        """Should propagate JSON decode errors."""
        state_path = tmp_path / "state.json"
        state_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            load_state(state_path)

    def test_non_object_raises(self, tmp_path: Path) -> None:
        """Should reject a document that is not a JSON object."""
        state_path = tmp_path / "state.json"
        state_path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(ValueError, match="JSON object"):
            read_document(state_path)

    def test_malformed_record_list_raises(self, tmp_path: Path) -> None:
        """Should raise ValueError naming a record field that is not a list of objects."""
        state_path = tmp_path / "state.json"
        state_path.write_text(json.dumps({"recurringTransactions": 5}), encoding="utf-8")

        with pytest.raises(ValueError, match="recurringTransactions"):
            load_state(state_path)


class TestInitState:
    """Tests for init_state."""

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        """Should replace existing data with defaults."""
        state_path = tmp_path / "state.json"
        save_state(AppState(fixed_income=999.0), state_path)

        state = init_state(state_path)

        assert state.fixed_income == 0
        assert load_state(state_path).fixed_income == 0
        assert os.path.getsize(state_path) > 0
