"""SQLModel implementation of the debt repositories."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.debt import Debt, DebtPlan

_UPDATABLE_FIELDS = ("name", "balance", "interest_rate", "min_payment")


class SQLModelDebtRepository:
    """SQLModel-based debt repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, debt_id: int, *, user_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        with self.session_factory() as session:
            return session.exec(
                select(Debt).where(Debt.id == debt_id, Debt.user_id == user_id)
            ).first()

    def list_all(self, *, user_id: int) -> list[Debt]:
        """List debts in creation order."""
        with self.session_factory() as session:
            statement = (
                select(Debt)
                .where(Debt.user_id == user_id)
                .order_by(Debt.created_at, Debt.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, debt: Debt, *, user_id: int) -> Debt:
        """Create a new debt."""
        with self.session_factory() as session:
            debt.user_id = user_id
            session.add(debt)
            session.commit()
            session.refresh(debt)
            return debt

    def update(self, debt_id: int, changes: dict, *, user_id: int) -> Optional[Debt]:
        """Apply a partial update; fields missing from *changes* are kept."""
        with self.session_factory() as session:
            debt = session.exec(
                select(Debt).where(Debt.id == debt_id, Debt.user_id == user_id)
            ).first()
            if debt is None:
                return None
            for field in _UPDATABLE_FIELDS:
                if changes.get(field) is not None:
                    setattr(debt, field, changes[field])
            debt.updated_at = datetime.now(timezone.utc)
            session.add(debt)
            session.commit()
            session.refresh(debt)
            return debt

    def delete(self, debt_id: int, *, user_id: int) -> bool:
        """Delete a debt by ID."""
        with self.session_factory() as session:
            debt = session.exec(
                select(Debt).where(Debt.id == debt_id, Debt.user_id == user_id)
            ).first()
            if debt is None:
                return False
            session.delete(debt)
            session.commit()
            return True


class SQLModelDebtPlanRepository:
    """SQLModel-based repayment plan repository."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, *, user_id: int) -> Optional[DebtPlan]:
        with self.session_factory() as session:
            return session.exec(select(DebtPlan).where(DebtPlan.user_id == user_id)).first()

    def save(self, *, user_id: int, strategy: str, monthly_payment: float) -> DebtPlan:
        """Upsert the plan: one row per user."""
        with self.session_factory() as session:
            plan = session.exec(select(DebtPlan).where(DebtPlan.user_id == user_id)).first()
            if plan is None:
                plan = DebtPlan(user_id=user_id, strategy=strategy, monthly_payment=monthly_payment)
            else:
                plan.strategy = strategy
                plan.monthly_payment = monthly_payment
                plan.updated_at = datetime.now(timezone.utc)
            session.add(plan)
            session.commit()
            session.refresh(plan)
            return plan
