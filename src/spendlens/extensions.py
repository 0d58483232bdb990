"""Database wiring for SpendLens."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from flask import Flask
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from . import models  # noqa: F401  # ensure models registered with SQLModel metadata
from .config import BaseConfig

_engine: Engine | None = None


def init_db(app: Flask) -> Engine:
    """Initialize the SQLModel engine using configuration from the app."""

    config: BaseConfig = app.config["SPENDLENS_CONFIG"]
    engine_options = app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {})
    engine = create_engine(config.DATABASE_URL, **engine_options)

    global _engine
    _engine = engine

    SQLModel.metadata.create_all(engine)
    return engine


def get_engine() -> Engine:
    """Return the initialized SQLModel engine."""

    if _engine is None:
        raise RuntimeError("Database engine not initialized")
    return _engine


def session_factory() -> Session:
    """Return a new session suitable for ``with`` blocks in repositories."""

    return Session(get_engine(), expire_on_commit=False)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around operations."""

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
