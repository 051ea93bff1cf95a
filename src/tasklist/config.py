# src/tasklist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every field has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKLIST"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    # False models a host without durable local storage (capability gap).
    storage_enabled: bool
    data_dir: Path
    todos_db_path: Path
    db_timeout: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasklist").strip() or "tasklist"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        storage_enabled = _env_bool(_k("STORAGE_ENABLED"), True)
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasklist"))
        todos_db_path = _env_path(_k("DB_PATH"), data_dir / "todos.sqlite3")
        db_timeout = max(0.0, _env_float(_k("DB_TIMEOUT"), 30.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage_enabled=storage_enabled,
            data_dir=data_dir,
            todos_db_path=todos_db_path,
            db_timeout=db_timeout,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
