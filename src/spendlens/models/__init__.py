"""SQLModel table exports."""

from .debt import Debt, DebtPlan

__all__ = [
    "Debt",
    "DebtPlan",
]
