"""Application configuration objects and helpers."""

from __future__ import annotations

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


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, rejecting garbage loudly."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "SpendLens"
    DB_FILENAME = "spendlens.db"
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("SPENDLENS_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("SPENDLENS_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("SPENDLENS_DATABASE_URL", self._build_sqlite_url())
        self.MAX_PROJECTION_MONTHS = _env_int("SPENDLENS_MAX_PROJECTION_MONTHS", 360)
        self.DEFAULT_USER_ID = _env_int("SPENDLENS_DEFAULT_USER_ID", 1)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("SPENDLENS_SECRET_KEY must be set in non-dev mode.")
        if self.MAX_PROJECTION_MONTHS < 1:
            raise ValueError("SPENDLENS_MAX_PROJECTION_MONTHS must be at least 1.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("SPENDLENS_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside DATA_DIR."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite and CI."""

    TESTING = True
