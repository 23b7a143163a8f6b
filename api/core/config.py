"""
Process settings read from the environment.

Loaded once at startup (see `api/main.py`). Malformed numeric/boolean values
fall back to their defaults instead of failing the boot.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    database_url: str
    host: str
    port: int
    db_pool_min_size: int
    db_pool_max_size: int
    db_command_timeout_s: float
    request_timeout_s: float
    update_not_found: bool
    log_level: str


def load_settings() -> Settings:
    # DATABASE_URL is validated lazily by `core.db.database_url()`.
    return Settings(
        database_url=os.environ.get("DATABASE_URL", "").strip(),
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        db_pool_min_size=_env_int("DB_POOL_MIN_SIZE", 1),
        db_pool_max_size=_env_int("DB_POOL_MAX_SIZE", 5),
        db_command_timeout_s=_env_float("DB_COMMAND_TIMEOUT_S", 30.0),
        request_timeout_s=_env_float("REQUEST_TIMEOUT_S", 60.0),
        update_not_found=_env_bool("EXPENSE_UPDATE_NOT_FOUND", True),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )
