"""Application configuration objects and helpers."""

from __future__ import annotations

import os
import tempfile
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


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "WalletLedger"
    DB_FILENAME = "walletledger.db"
    ENV_PREFIX = "WALLETLEDGER_"
    SQLITE_PRAGMAS = {"foreign_keys": "on"}
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("WALLETLEDGER_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("WALLETLEDGER_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("WALLETLEDGER_DATABASE_URL", self._build_sqlite_url())
        self.IDENTITY_HEADER = os.getenv("WALLETLEDGER_IDENTITY_HEADER", "X-User-Id")
        self.DEFAULT_PAGE_SIZE = _env_int("WALLETLEDGER_DEFAULT_PAGE_SIZE", 10)
        self.MAX_PAGE_SIZE = _env_int("WALLETLEDGER_MAX_PAGE_SIZE", 100)
        self.LOG_TO_FILE = _env_bool("WALLETLEDGER_LOG_TO_FILE", default=True)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("WALLETLEDGER_SECRET_KEY must be set in non-dev mode.")
        if self.DEFAULT_PAGE_SIZE < 1 or self.MAX_PAGE_SIZE < self.DEFAULT_PAGE_SIZE:
            raise ValueError("Page size settings must satisfy 1 <= default <= max.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("WALLETLEDGER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {"pool_pre_ping": True}
        if self.is_sqlite:
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Isolated configuration for the test suite: throwaway data dir, no log file."""

    TESTING = True

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data_dir_override = data_dir
        super().__init__()
        self.DATABASE_URL = self._build_sqlite_url()
        self.LOG_TO_FILE = False

    def _resolve_data_dir(self) -> Path:
        if self._data_dir_override is not None:
            path = Path(self._data_dir_override)
            path.mkdir(parents=True, exist_ok=True)
            return path
        return Path(tempfile.mkdtemp(prefix="walletledger-test-"))

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / 'test.db'}"
