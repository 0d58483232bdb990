"""Repository protocol definitions for domain layer."""

from .debt import DebtPlanRepository, DebtRepository

__all__ = [
    "DebtPlanRepository",
    "DebtRepository",
]
