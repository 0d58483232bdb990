"""Bridge between stored debts and the payoff calculators.

Converts persisted rows into immutable snapshots, runs the calculators and
shapes the result for the JSON API and CLI. Date arithmetic for the payoff
date lives here so the calculators stay free of calendars.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from ..logging_config import get_logger
from ..models.debt import Debt
from .debts import (
    DEFAULT_MAX_MONTHS,
    DebtSnapshot,
    PaymentAllocation,
    PayoffProjection,
    plan_repayment,
    to_cents,
)

logger = get_logger(__name__)


def _as_decimal(value: float | int | str | Decimal | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def snapshot_from_row(row: Debt) -> DebtSnapshot:
    """Return the calculator's view of a stored debt."""

    return DebtSnapshot(
        id=row.id,
        name=row.name,
        balance=_as_decimal(row.balance),
        interest_rate=_as_decimal(row.interest_rate),
        min_payment=_as_decimal(row.min_payment),
    )


def payoff_date(months: int, *, today: date | None = None) -> date:
    """Return the first day of the month *months* months after *today*."""

    current = today or date.today()
    month_index = current.month - 1 + months
    year = current.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1)


def _money(amount: Decimal) -> float:
    return float(to_cents(amount))


def allocation_to_dict(allocation: PaymentAllocation) -> dict[str, Any]:
    return {
        "debtId": allocation.debt_id,
        "debt": allocation.name,
        "payment": _money(allocation.payment),
        "newBalance": _money(allocation.new_balance),
    }


def projection_to_dict(
    projection: PayoffProjection, *, today: date | None = None
) -> dict[str, Any]:
    when = None
    if not projection.did_not_converge:
        when = payoff_date(projection.months_to_payoff, today=today).isoformat()
    return {
        "monthsToPayoff": projection.months_to_payoff,
        "payoffDate": when,
        "totalInterest": _money(projection.total_interest_paid),
        "status": projection.status,
        "didNotConverge": projection.did_not_converge,
        "remainingBalance": _money(projection.remaining_balance),
    }


def build_plan_payload(
    *,
    debts: Iterable[Debt],
    strategy: str,
    monthly_payment: float | Decimal,
    today: date | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> dict[str, Any]:
    """Run the calculators for stored debts and return the API payload.

    Raises the calculators' ``InsufficientPayment``/``InvalidDebt`` errors
    unchanged so the caller can decide how to surface them.
    """

    snapshots = [snapshot_from_row(row) for row in debts]
    payment = _as_decimal(monthly_payment)
    plan = plan_repayment(
        debts=snapshots,
        strategy=strategy,
        monthly_payment=payment,
        max_months=max_months,
    )
    logger.info(
        "Debt plan calculated",
        extra={
            "strategy": strategy,
            "debt_count": len(snapshots),
            "months_to_payoff": plan.projection.months_to_payoff,
            "status": plan.projection.status,
        },
    )
    return {
        "strategy": plan.strategy,
        "monthlyPayment": _money(plan.monthly_payment),
        "allocations": [allocation_to_dict(a) for a in plan.allocations],
        "projection": projection_to_dict(plan.projection, today=today),
    }


__all__ = [
    "snapshot_from_row",
    "payoff_date",
    "allocation_to_dict",
    "projection_to_dict",
    "build_plan_payload",
]
