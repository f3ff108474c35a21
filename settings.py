from __future__ import annotations

"""Loader configuration read from environment variables and ``settings.json``.

The module provides a central location for runtime options.  Environment
variables take precedence over values stored in the JSON file found next to
this module.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List

# Path to the JSON configuration file bundled with the game
SETTINGS_FILE = Path(__file__).with_name("settings.json")

# Directory holding the bundled assets, searched after any override
DEFAULT_ASSETS_DIR = Path(__file__).with_name("assets")

try:
    with SETTINGS_FILE.open("r", encoding="utf-8") as f:
        _FILE_SETTINGS: Dict[str, Any] = json.load(f)
except Exception:
    # If the settings file is missing or invalid, fall back to defaults
    _FILE_SETTINGS = {}

if not isinstance(_FILE_SETTINGS, dict):
    _FILE_SETTINGS = {}


def _get_bool(env_var: str, key: str, default: bool = False) -> bool:
    """Return a boolean setting from ``env_var`` or ``key`` in the JSON file."""
    value = os.environ.get(env_var)
    if value is not None:
        return value.lower() not in ("0", "false", "")
    return bool(_FILE_SETTINGS.get(key, default))


def _get_str(env_var: str, key: str, default: str) -> str:
    """Return a string setting from ``env_var`` or ``key`` in the JSON file."""
    value = os.environ.get(env_var)
    if value is not None:
        return value
    return str(_FILE_SETTINGS.get(key, default))


def _get_int(env_var: str, key: str, default: int) -> int:
    """Return an integer setting from environment or JSON."""
    value = os.environ.get(env_var)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            return default
    try:
        return int(_FILE_SETTINGS.get(key, default))
    except Exception:
        return default


def _get_paths(env_var: str, key: str) -> List[str]:
    """Return search directories from ``env_var`` (``os.pathsep`` list) or JSON."""
    paths: List[str] = []
    value = os.environ.get(env_var)
    if value:
        paths.extend(p for p in value.split(os.pathsep) if p)
    file_paths = _FILE_SETTINGS.get(key, [])
    if isinstance(file_paths, list):
        paths.extend(str(p) for p in file_paths)
    return paths


# ---------------------------------------------------------------------------
# Public settings
# ---------------------------------------------------------------------------
# Extra asset directories searched before the bundled ``assets`` folder
ASSETS_DIRS: List[str] = _get_paths("GF_ASSETS_DIR", "assets_dirs") + [
    str(DEFAULT_ASSETS_DIR)
]

# Emit one trace line per decoding strategy
DEBUG_ASSETS: bool = _get_bool("GF_DEBUG_ASSETS", "debug_assets", True)

# Prefix of the numbered legacy images (``images/0``, ``images/1`` ...)
IMAGE_PREFIX: str = _get_str("GF_IMAGE_PREFIX", "image_prefix", "images/")

_DEFAULT_PRELOAD_KEYS: List[str] = ["images/icon.png"]

_FILE_PRELOAD = _FILE_SETTINGS.get("preload_keys")
PRELOAD_KEYS: List[str] = (
    [str(k) for k in _FILE_PRELOAD]
    if isinstance(_FILE_PRELOAD, list)
    else list(_DEFAULT_PRELOAD_KEYS)
)

# Numbered images ``0 .. PRELOAD_NUMBERED - 1`` attempted at startup
PRELOAD_NUMBERED: int = max(0, _get_int("GF_PRELOAD_NUMBERED", "preload_numbered", 20))
