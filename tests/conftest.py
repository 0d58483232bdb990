"""Pytest configuration and shared fixtures for SpendLens tests.

Provides an isolated SQLite database, repository session factories, a debt
factory and a Flask app/client wired to a temporary data directory so tests
never touch a real database.
"""

from __future__ import annotations

import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from spendlens import create_app
from spendlens.models import Debt, DebtPlan  # noqa: F401  # register tables
from spendlens.services.debts import DebtSnapshot

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Return a Callable[[], Session] matching what repositories expect."""

    def factory() -> Session:
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def debt_factory(session_factory):
    """Factory for creating persisted debts.

    Returns:
        Callable: Function that creates and persists Debt instances
    """

    def _create_debt(
        name: str = "Test Debt",
        balance: float = 1000.00,
        interest_rate: float = 18.0,
        min_payment: float = 25.00,
        user_id: int = 1,
    ) -> Debt:
        debt = Debt(
            user_id=user_id,
            name=name,
            balance=balance,
            interest_rate=interest_rate,
            min_payment=min_payment,
        )
        with session_factory() as session:
            session.add(debt)
            session.commit()
            session.refresh(debt)
        return debt

    return _create_debt


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Flask app backed by a throwaway SQLite file under tmp_path."""

    monkeypatch.setenv("SPENDLENS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPENDLENS_DATABASE_URL", f"sqlite:///{tmp_path / 'spendlens.db'}")
    monkeypatch.delenv("SPENDLENS_MAX_PROJECTION_MONTHS", raising=False)
    monkeypatch.delenv("SPENDLENS_DEFAULT_USER_ID", raising=False)
    app = create_app("testing")
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


# =============================================================================
# Helpers
# =============================================================================


def make_snapshot(
    debt_id: object,
    balance: str,
    rate: str = "0",
    min_payment: str = "25",
    name: str | None = None,
) -> DebtSnapshot:
    """Build a calculator snapshot from string amounts."""

    return DebtSnapshot(
        id=debt_id,
        name=name if name is not None else str(debt_id),
        balance=Decimal(balance),
        interest_rate=Decimal(rate),
        min_payment=Decimal(min_payment),
    )


@pytest.fixture
def snapshot():
    """Expose :func:`make_snapshot` to tests as a fixture."""

    return make_snapshot
