"""Application configuration objects and helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "RevLedger"
    DB_FILENAME = "revledger.db"
    LOG_FILENAME = "revledger.log"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("REVLEDGER_DEV_MODE", default=True)
        self.LOG_LEVEL = self._resolve_log_level(os.getenv("REVLEDGER_LOG_LEVEL", "INFO"))
        self.DATABASE_URL = os.getenv("REVLEDGER_DATABASE_URL", self._build_sqlite_url())

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("REVLEDGER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _resolve_log_level(raw: str) -> int:
        level = logging.getLevelName(raw.strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"REVLEDGER_LOG_LEVEL has an unknown level: {raw!r}")
        return level

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.DATABASE_URL.startswith("sqlite"):
            return {"pool_pre_ping": True}
        return {"connect_args": {"check_same_thread": False}}
