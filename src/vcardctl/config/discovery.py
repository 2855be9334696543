"""Config file discovery and raw loading.

Resolution order for the config file:
  1. An explicit path (``--config``), which must exist.
  2. ``VCARDCTL_CONFIG`` env var, ignored when it points nowhere.
  3. Walk-up from the start directory looking for ``vcardctl.toml``,
     the way git finds ``.git/``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "vcardctl.toml"
CONFIG_ENV_VAR = "VCARDCTL_CONFIG"


class ConfigError(Exception):
    """A config file is missing or unreadable."""


def _walk_up(start: Path) -> Path | None:
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None, *, explicit: str | Path | None = None) -> Path | None:
    """Locate the config file to use, or None when there is none.

    Raises:
        ConfigError: *explicit* was given but is not a file.
    """
    if explicit is not None:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        return path if path.is_file() else None

    return _walk_up(start or Path.cwd())


def read_config_data(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        ConfigError: The file is not valid TOML.
    """
    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
