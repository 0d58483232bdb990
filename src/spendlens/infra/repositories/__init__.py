"""Concrete repository implementations using SQLModel."""

from .debt import SQLModelDebtPlanRepository, SQLModelDebtRepository

__all__ = [
    "SQLModelDebtPlanRepository",
    "SQLModelDebtRepository",
]
