"""Service module exports."""

from . import debts, planner

__all__ = [
    "debts",
    "planner",
]
