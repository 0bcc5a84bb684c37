"""Config file discovery and loading.

Walk-up finder locates primed.toml, similar to how git finds .git/.
Supports the PRIMED_CONFIG env var as an explicit override.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from primed.errors import ConfigError

CONFIG_FILENAME = "primed.toml"
CONFIG_ENV_VAR = "PRIMED_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for primed.toml.

    Returns the path to the config file, or None if not found.
    Checks PRIMED_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_config(path: Path | None) -> dict[str, Any]:
    """Parse *path* as TOML. Missing or None paths yield an empty dict.

    Raises:
        ConfigError: If the file is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
