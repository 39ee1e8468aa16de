"""Configuration management for hmsrecords.

Handles loading and generating the TOML config file that points the store
at its backing files and sets the log level.
"""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_PATH = "hmsrecords.toml"

DEFAULT_RECORDS_PATH = "csv_data/Medical_Record.csv"
DEFAULT_USERS_PATH = "csv_data/User_List.csv"
DEFAULT_LOG_LEVEL = "WARNING"

DEFAULT_CONFIG_TEMPLATE = """\
# hmsrecords configuration
#
# records_path: medical records, one patient per line, no header
# users_path:   user list, first line is a header

[store]
records_path = "{records_path}"
users_path = "{users_path}"

[logging]
# DEBUG, INFO, WARNING, ERROR
level = "{log_level}"
"""


@dataclass
class StoreConfig:
    """Locations of the two backing files."""

    records_path: str = DEFAULT_RECORDS_PATH
    users_path: str = DEFAULT_USERS_PATH


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from a TOML file.

    Returns a dict with:
    - store: StoreConfig
    - logging: dict with a "level" key

    Relative store paths are resolved against the config file's directory.
    Falls back to defaults if the config file doesn't exist.
    """
    path = Path(config_path)
    if not path.exists():
        print(
            f"Warning: Config file '{config_path}' not found, using defaults. "
            f"Run 'python -m hmsrecords init-config' to generate one.",
            file=sys.stderr,
        )
        return _default_config()

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    config = _default_config()

    store = raw.get("store", {})
    base = path.parent
    for key in ("records_path", "users_path"):
        if key in store:
            value = Path(store[key])
            if not value.is_absolute():
                value = base / value
            setattr(config["store"], key, str(value))

    if "logging" in raw:
        config["logging"].update(raw["logging"])

    return config


def store_config(config: dict) -> StoreConfig:
    """Return the StoreConfig section of a loaded config."""
    return config.get("store", StoreConfig())


def log_level(config: dict) -> str:
    return str(config.get("logging", {}).get("level", DEFAULT_LOG_LEVEL)).upper()


def _default_config() -> dict:
    """Return default configuration."""
    return {
        "store": StoreConfig(),
        "logging": {"level": DEFAULT_LOG_LEVEL},
    }


def generate_config(
    config_path: str = DEFAULT_CONFIG_PATH,
    records_path: str = DEFAULT_RECORDS_PATH,
    users_path: str = DEFAULT_USERS_PATH,
) -> str:
    """Write a config file from the default template.

    Returns the path of the written config file.
    """
    content = DEFAULT_CONFIG_TEMPLATE.format(
        records_path=records_path,
        users_path=users_path,
        log_level=DEFAULT_LOG_LEVEL,
    )
    Path(config_path).write_text(content)
    return config_path
