"""Debt repository protocols."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.debt import Debt, DebtPlan


class DebtRepository(Protocol):
    """Repository for managing a user's debts."""

    def get_by_id(self, debt_id: int, *, user_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Debt]:
        """List debts in creation order."""
        ...

    def create(self, debt: Debt, *, user_id: int) -> Debt:
        """Create a new debt."""
        ...

    def update(self, debt_id: int, changes: dict, *, user_id: int) -> Optional[Debt]:
        """Apply a partial update; None when the debt does not exist."""
        ...

    def delete(self, debt_id: int, *, user_id: int) -> bool:
        """Delete a debt, returning whether a row was removed."""
        ...


class DebtPlanRepository(Protocol):
    """Repository for the per-user repayment plan."""

    def get(self, *, user_id: int) -> Optional[DebtPlan]:
        """Return the user's plan if one was saved."""
        ...

    def save(self, *, user_id: int, strategy: str, monthly_payment: float) -> DebtPlan:
        """Create or replace the user's plan."""
        ...
