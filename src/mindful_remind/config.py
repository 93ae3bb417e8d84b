# src/mindful_remind/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (client, console and record store).
- Nothing is required at import time; every value has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "REMIND"


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
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_timeout(name: str) -> Optional[float]:
    # Empty, zero or garbage means "wait indefinitely".
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        val = float(raw)
    except ValueError:
        return None
    return val if val > 0 else None


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

    # ---- Client ----
    console_enabled: bool
    api_base_url: str
    remote_timeout_seconds: Optional[float]

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    mirror_db_path: Path

    # ---- Record store (backend) ----
    backend_db_path: Path
    backend_host: str
    backend_port: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "mindful-remind") or "mindful-remind"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        backend_host = _env(_k("BACKEND_HOST"), "127.0.0.1")
        backend_port = _env_int(_k("BACKEND_PORT"), 3000)

        # Default client target is the local record store.
        api_base_url = _env(_k("API_BASE_URL"), f"http://{backend_host}:{backend_port}").rstrip("/")
        remote_timeout_seconds = _env_timeout(_k("REMOTE_TIMEOUT_SECONDS"))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/mindful_remind"))
        mirror_db_path = _env_path(_k("MIRROR_DB_PATH"), data_dir / "mirror.sqlite3")
        backend_db_path = _env_path(_k("BACKEND_DB_PATH"), data_dir / "database.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            api_base_url=api_base_url,
            remote_timeout_seconds=remote_timeout_seconds,
            data_dir=data_dir,
            mirror_db_path=mirror_db_path,
            backend_db_path=backend_db_path,
            backend_host=backend_host,
            backend_port=backend_port,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
