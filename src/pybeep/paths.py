"""Centralized path management for pybeep.

All path functions (not constants) so PYBEEP_DIR is checked at call time.
When PYBEEP_DIR is set, all subdirectories live under it.
Otherwise, platformdirs determines OS-appropriate locations.
"""

import os
from pathlib import Path

from platformdirs import user_cache_dir, user_config_dir

_APP_NAME = "pybeep"


def _override_root() -> Path | None:
    """Return the PYBEEP_DIR override path, or None."""
    val = os.environ.get("PYBEEP_DIR")
    return Path(val) if val else None


# -- Config ------------------------------------------------------------------

def config_dir() -> Path:
    """Config directory (config.json)."""
    root = _override_root()
    if root:
        return root / "config"
    return Path(user_config_dir(_APP_NAME))


def config_file() -> Path:
    return config_dir() / "config.json"


# -- Cache -------------------------------------------------------------------

def cache_dir() -> Path:
    """Expendable cached files (tones/)."""
    root = _override_root()
    if root:
        return root / "cache"
    return Path(user_cache_dir(_APP_NAME))


def tones_dir() -> Path:
    return cache_dir() / "tones"


# -- Helpers -----------------------------------------------------------------

def ensure_dir(path: Path) -> Path:
    """Create *path* (and parents) if missing, then return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path
