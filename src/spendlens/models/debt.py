"""Debt and repayment plan entities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Debt(SQLModel, table=True):
    """Installment or revolving debt owned by a user."""

    __tablename__: ClassVar[str] = "debt"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80)
    balance: float = Field(nullable=False)
    interest_rate: float = Field(default=0.0, nullable=False)  # APR in percent
    min_payment: float = Field(nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "balance": self.balance,
            "interest_rate": self.interest_rate,
            "min_payment": self.min_payment,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class DebtPlan(SQLModel, table=True):
    """The single repayment plan a user commits to."""

    __tablename__: ClassVar[str] = "debt_plan"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True, unique=True)
    strategy: str = Field(default="avalanche", max_length=16)
    monthly_payment: float = Field(nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "strategy": self.strategy,
            "monthly_payment": self.monthly_payment,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
