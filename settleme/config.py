"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR.parent / "data"


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def data_file() -> Path:
    """Return the path of the JSON snapshot holding users and groups."""
    raw = get_env("SETTLEME_DATA_FILE")
    return Path(raw) if raw else DATA_DIR / "data.json"


def display_timezone() -> str:
    """Return the time zone used when timestamps become report cells."""
    return get_env("SETTLEME_TIMEZONE", "UTC") or "UTC"


def log_level() -> str:
    return (get_env("SETTLEME_LOG_LEVEL", "INFO") or "INFO").upper()


def cors_allow_origins() -> list[str]:
    """Return CORS origins; the exports were always served to any origin."""
    raw = get_env("SETTLEME_CORS_ORIGINS", "*") or "*"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
