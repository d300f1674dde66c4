"""Configuration management for pybeep."""

import copy
import json
import os

from beeptone.notes import DEFAULT_A4_PITCH
from beeptone.synthesis import DEFAULT_AMPLITUDE, DEFAULT_SAMPLE_RATE

from .paths import config_dir, config_file, ensure_dir

DEFAULT_CONFIG = {
    "backend": None,  # None = platform default ("windowsapi" on Windows, else "tone")
    "a4_pitch": DEFAULT_A4_PITCH,
    "tone": {
        "sample_rate": DEFAULT_SAMPLE_RATE,
        "amplitude": DEFAULT_AMPLITUDE,
        "waveform": "square",  # "square" or "sine"
    },
}


def get_config() -> dict:
    """Load configuration, creating default if needed."""
    ensure_dir(config_dir())
    cfg_file = config_file()

    if cfg_file.exists():
        try:
            with open(cfg_file) as f:
                config = json.load(f)
            # Merge with defaults for any missing keys
            merged = copy.deepcopy(DEFAULT_CONFIG)
            for key, value in config.items():
                if isinstance(value, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **value}
                else:
                    merged[key] = value
            return merged
        except (json.JSONDecodeError, IOError):
            return copy.deepcopy(DEFAULT_CONFIG)
    else:
        save_config(DEFAULT_CONFIG)
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: dict) -> None:
    """Save configuration to file."""
    ensure_dir(config_dir())
    with open(config_file(), "w") as f:
        json.dump(config, f, indent=2)


def get_backend() -> str | None:
    """Get the configured backend name (env var overrides config file)."""
    config = get_config()
    backend = os.environ.get("PYBEEP_BACKEND") or config.get("backend")
    if not backend:
        return None
    if not isinstance(backend, str):
        raise ValueError(f"Invalid backend in configuration: {backend!r}")
    return backend.lower()


def get_a4_pitch() -> float:
    """Get the tuning reference for A4 in Hz (env var overrides config file)."""
    value = os.environ.get("PYBEEP_A4_PITCH")
    if not value:
        value = get_config().get("a4_pitch", DEFAULT_A4_PITCH)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid A4 pitch in configuration: {value!r}") from None


def get_tone_config() -> dict:
    """Get software tone generator configuration."""
    config = get_config()
    return config.get("tone", {})
