"""Configuration file management for cashflow."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from cashflow.domain.aggregator import STANDARD_HORIZONS

DEFAULT_CURRENCY_SYMBOL = "$"


@dataclass(frozen=True)
class Settings:
    """Immutable effective settings after defaults are applied."""

    currency_symbol: str
    projection_horizons: tuple[int, ...]
    state_path: Path | None


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "cashflow" / "config.toml"


def default_config() -> dict[str, Any]:
    return {
        "currency_symbol": DEFAULT_CURRENCY_SYMBOL,
        "projection_horizons": list(STANDARD_HORIZONS),
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def parse_settings(config: dict[str, Any]) -> Settings:
    """Apply defaults to a raw configuration dictionary.

    Invalid horizon entries are dropped; an empty horizon list falls back to
    the standard horizons.
    """
    raw_horizons = config.get("projection_horizons", STANDARD_HORIZONS)
    if not isinstance(raw_horizons, (list, tuple)):
        raw_horizons = ()
    horizons = tuple(h for h in raw_horizons if isinstance(h, int) and not isinstance(h, bool) and h > 0)

    raw_state_path = config.get("state_path")

    return Settings(
        currency_symbol=str(config.get("currency_symbol") or DEFAULT_CURRENCY_SYMBOL),
        projection_horizons=horizons or STANDARD_HORIZONS,
        state_path=Path(raw_state_path).expanduser() if raw_state_path else None,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, using defaults when no config file exists yet."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}
    return parse_settings(config)
