"""Configuration loading for tradelog.

Settings live in a TOML file, by default ``~/.config/tradelog/config.toml``.
A missing file is not an error; every setting has a default.
"""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field

from tradelog.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "tradelog"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "tradelog.db"

# NAV shown in the YTD summary before any month has one recorded
DEFAULT_NAV = 250000.0


class Settings(BaseModel):
    """Resolved tradelog settings."""

    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    default_nav: float = Field(
        default=DEFAULT_NAV, gt=0, description="Fallback NAV when none is recorded"
    )
    currency: str = Field(default="$", description="Currency symbol for display")
    holidays: dict[date, str] = Field(
        default_factory=dict, description="Extra market holidays by date"
    )

    model_config = {"frozen": True}


def get_config_path(path: Optional[Path] = None) -> Path:
    """Resolve the config file location.

    Args:
        path: Explicit path, takes precedence over the environment.

    Returns:
        Path to the config file (which may not exist).
    """
    if path is not None:
        return Path(path).expanduser()
    env_path = os.environ.get("TRADELOG_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> dict:
    """Load the raw TOML configuration.

    Args:
        path: Optional config file path.

    Returns:
        Parsed configuration, empty if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    config_path = get_config_path(path)

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return {}

    try:
        return toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Failed to read {config_path}: {e}") from e


def load_settings(
    path: Optional[Path] = None, db_path: Optional[Path] = None
) -> Settings:
    """Load settings from the config file.

    Args:
        path: Optional config file path.
        db_path: Database path override (``--db`` / ``TRADELOG_DB``).

    Returns:
        Resolved settings.

    Raises:
        ConfigError: If the file is unreadable or holds invalid values.
    """
    config = load_config(path)
    journal_config = config.get("journal", {})

    values: dict = {}
    if db_path is not None:
        values["db_path"] = Path(db_path).expanduser()
    elif journal_config.get("db_path"):
        values["db_path"] = Path(journal_config["db_path"]).expanduser()
    if "default_nav" in journal_config:
        values["default_nav"] = journal_config["default_nav"]
    if "currency" in journal_config:
        values["currency"] = journal_config["currency"]

    holidays = {}
    for day, name in config.get("holidays", {}).items():
        try:
            holidays[date.fromisoformat(str(day))] = str(name)
        except ValueError as e:
            raise ConfigError(f"Invalid holiday date in config: {day!r}") from e
    values["holidays"] = holidays

    try:
        return Settings(**values)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
