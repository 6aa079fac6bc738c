# src/pocket_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a working default; a bare checkout runs as-is.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import StoreMode

ENV_PREFIX = "TODO"

STORAGE_BACKENDS = ("sqlite", "json", "memory")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    return raw if raw in choices else default


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

    # ---- Task store ----
    store_mode: StoreMode
    confirm_delete: bool

    # ---- Local data (ignored by git) ----
    data_dir: Path
    storage_backend: str
    storage_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "pocket-todo").strip() or "pocket-todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        store_mode = StoreMode.parse(os.getenv(_k("STORE_MODE")))
        confirm_delete = _env_bool(_k("CONFIRM_DELETE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/pocket_todo"))
        storage_backend = _env_choice(_k("STORAGE_BACKEND"), STORAGE_BACKENDS, "sqlite")
        default_file = "tasks.json" if storage_backend == "json" else "tasks.sqlite3"
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / default_file)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            store_mode=store_mode,
            confirm_delete=confirm_delete,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_path=storage_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
