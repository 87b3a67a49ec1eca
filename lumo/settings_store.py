"""
Settings store utilities.

Persists user preferences to ~/.lumo/config.json and bridges env <-> config
so a key entered once is reused across CLI and API runs.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

CONFIG_DIR = Path.home() / ".lumo"
CONFIG_PATH = CONFIG_DIR / "config.json"

THEME_KEY = "theme_id"
PERSONA_KEY = "persona_id"
GOOGLE_KEY = "google_api_key"

# Older deployments exported the Gemini key under this name.
LEGACY_GEMINI_ENV = "GEMINI_API_KEY"
GOOGLE_ENV = "LLM_GOOGLE_API_KEY"


def _ensure_dir() -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True, mode=0o700)


def load_config() -> dict[str, Any]:
    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
                return json.load(handle)
        except json.JSONDecodeError:
            return {}
    return {}


def save_config(config: dict[str, Any]) -> None:
    _ensure_dir()
    try:
        with open(CONFIG_PATH, "w", encoding="utf-8") as handle:
            json.dump(config, handle, indent=2)
    except PermissionError:
        return


def set_value(key: str, value: str | None) -> None:
    if not value:
        return
    config = load_config()
    config[key] = value
    save_config(config)


def get_value(key: str) -> str | None:
    return load_config().get(key)


def apply_config_defaults() -> None:
    """
    Persist env values into config (one-time) and apply config to env when missing.

    GEMINI_API_KEY is accepted as an alias for LLM_GOOGLE_API_KEY.
    """
    config = load_config()

    env_google = os.getenv(GOOGLE_ENV) or os.getenv(LEGACY_GEMINI_ENV)

    if env_google and GOOGLE_KEY not in config:
        config[GOOGLE_KEY] = env_google
        save_config(config)

    if not os.getenv(GOOGLE_ENV):
        resolved = env_google or config.get(GOOGLE_KEY)
        if resolved:
            os.environ[GOOGLE_ENV] = str(resolved)


def clear_config() -> None:
    """Remove persisted config file."""
    try:
        if CONFIG_PATH.exists():
            CONFIG_PATH.unlink()
    except OSError:
        return
