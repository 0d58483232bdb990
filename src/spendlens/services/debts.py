"""Debt payoff calculators (snowball and avalanche).

The functions in this module are pure: they take immutable debt snapshots and
return fresh results. Priority order is computed once by :func:`order_debts`
and then shared by the one-month allocation table and the multi-month
projection so both always agree on which debt receives the surplus.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from ..logging_config import get_logger

logger = get_logger(__name__)

AVALANCHE = "avalanche"
SNOWBALL = "snowball"
STRATEGIES: tuple[str, ...] = (AVALANCHE, SNOWBALL)

DEFAULT_MAX_MONTHS = 360
# Half a cent; anything at or below this rounds to $0.00 on display.
BALANCE_EPSILON = Decimal("0.005")

PAID_OFF = "paid_off"
CAPPED_OUT = "capped_out"

_ZERO = Decimal("0")
_CENT = Decimal("0.01")
_MONTHS_PER_YEAR = Decimal(12)
_HUNDRED = Decimal(100)


class InsufficientPayment(ValueError):
    """Monthly payment does not cover the sum of minimum payments."""

    def __init__(self, *, required: Decimal, offered: Decimal) -> None:
        self.required = required
        self.offered = offered
        super().__init__(
            f"Monthly payment must be at least {to_cents(required)} "
            f"(sum of minimum payments); got {to_cents(offered)}"
        )


class InvalidDebt(ValueError):
    """A debt record cannot enter ordering or allocation."""

    def __init__(self, *, debt_id: object, reason: str) -> None:
        self.debt_id = debt_id
        self.reason = reason
        super().__init__(f"Debt {debt_id!r} is invalid: {reason}")


@dataclass(frozen=True, slots=True)
class DebtSnapshot:
    """Immutable view of a liability as the calculators see it."""

    id: object
    balance: Decimal
    interest_rate: Decimal  # APR in percent, e.g. 18.99
    min_payment: Decimal
    name: str = ""


@dataclass(frozen=True, slots=True)
class PaymentAllocation:
    """Payment assigned to one debt for a single month."""

    debt_id: object
    name: str
    payment: Decimal
    new_balance: Decimal


@dataclass(frozen=True, slots=True)
class PayoffProjection:
    """Aggregate outcome of a month-by-month payoff simulation."""

    months_to_payoff: int
    total_interest_paid: Decimal
    status: str = PAID_OFF
    remaining_balance: Decimal = _ZERO

    @property
    def did_not_converge(self) -> bool:
        return self.status == CAPPED_OUT


@dataclass(frozen=True, slots=True)
class RepaymentPlan:
    """Allocation table and projection computed from one priority order."""

    strategy: str
    monthly_payment: Decimal
    allocations: tuple[PaymentAllocation, ...]
    projection: PayoffProjection


def to_cents(amount: Decimal) -> Decimal:
    """Round to cents using half-up rounding for display."""

    return Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)


def validate_debts(debts: Iterable[DebtSnapshot]) -> None:
    """Raise :class:`InvalidDebt` for the first malformed record."""

    for debt in debts:
        if debt.balance < 0:
            raise InvalidDebt(debt_id=debt.id, reason="balance cannot be negative")
        if debt.interest_rate < 0:
            raise InvalidDebt(debt_id=debt.id, reason="interest rate cannot be negative")
        if debt.min_payment <= 0:
            raise InvalidDebt(debt_id=debt.id, reason="minimum payment must be positive")


def required_minimum(debts: Iterable[DebtSnapshot]) -> Decimal:
    """Return the sum of minimum payments across all debts."""

    return sum((debt.min_payment for debt in debts), _ZERO)


def _check_payment(debts: Sequence[DebtSnapshot], monthly_payment: Decimal) -> None:
    validate_debts(debts)
    required = required_minimum(debts)
    if monthly_payment < required:
        raise InsufficientPayment(required=required, offered=monthly_payment)


def order_debts(debts: Iterable[DebtSnapshot], strategy: str) -> list[DebtSnapshot]:
    """Return debts in payoff priority order for *strategy*.

    Avalanche sorts by interest rate (highest first); snowball sorts by
    balance (smallest first). Equal keys keep their original relative order.
    """

    if strategy == AVALANCHE:
        return sorted(debts, key=lambda d: -d.interest_rate)
    if strategy == SNOWBALL:
        return sorted(debts, key=lambda d: d.balance)
    raise ValueError("Invalid debt payoff strategy.")


def _apply_payments(
    balances: list[Decimal],
    min_payments: Sequence[Decimal],
    pool: Decimal,
) -> list[Decimal]:
    """Pay minimums then cascade the surplus in index order.

    Mutates *balances* in place and returns the per-debt payments.
    """

    payments = [_ZERO] * len(balances)

    for idx, balance in enumerate(balances):
        if balance <= 0:
            continue
        payment = min(min_payments[idx], balance, pool)
        balances[idx] = balance - payment
        payments[idx] = payment
        pool -= payment

    for idx, balance in enumerate(balances):
        if pool <= 0:
            break
        if balance <= 0:
            continue
        extra = min(pool, balance)
        balances[idx] = balance - extra
        payments[idx] += extra
        pool -= extra

    for idx, balance in enumerate(balances):
        if balance < 0:
            balances[idx] = _ZERO
    return payments


def allocate_payment(
    ordered_debts: Sequence[DebtSnapshot], monthly_payment: Decimal
) -> list[PaymentAllocation]:
    """Split *monthly_payment* across debts for a single month (no interest).

    Raises :class:`InsufficientPayment` when the payment is below the sum of
    minimums, and :class:`InvalidDebt` for malformed records.
    """

    monthly_payment = Decimal(monthly_payment)
    _check_payment(ordered_debts, monthly_payment)

    balances = [debt.balance for debt in ordered_debts]
    payments = _apply_payments(
        balances, [debt.min_payment for debt in ordered_debts], monthly_payment
    )
    return [
        PaymentAllocation(
            debt_id=debt.id,
            name=debt.name,
            payment=payment,
            new_balance=balance,
        )
        for debt, payment, balance in zip(ordered_debts, payments, balances)
    ]


def simulate_payoff(
    ordered_debts: Sequence[DebtSnapshot],
    monthly_payment: Decimal,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> PayoffProjection:
    """Project months to payoff and total interest for a fixed priority order.

    Each month interest accrues on every positive balance, then the same
    two-phase allocation used by :func:`allocate_payment` runs against the
    post-interest balances. The order of *ordered_debts* is never
    re-evaluated. When ``max_months`` passes with a balance remaining the
    projection is returned with ``status == "capped_out"``.
    """

    if max_months < 1:
        raise ValueError("max_months must be at least 1")

    monthly_payment = Decimal(monthly_payment)
    _check_payment(ordered_debts, monthly_payment)

    balances = [
        debt.balance if debt.balance > BALANCE_EPSILON else _ZERO for debt in ordered_debts
    ]
    monthly_rates = [debt.interest_rate / _HUNDRED / _MONTHS_PER_YEAR for debt in ordered_debts]
    min_payments = [debt.min_payment for debt in ordered_debts]
    original_total = sum((debt.balance for debt in ordered_debts), _ZERO)

    months = 0
    while any(balance > BALANCE_EPSILON for balance in balances) and months < max_months:
        for idx, balance in enumerate(balances):
            if balance > 0 and monthly_rates[idx] > 0:
                balances[idx] = balance * (1 + monthly_rates[idx])

        _apply_payments(balances, min_payments, monthly_payment)
        months += 1

        for idx, balance in enumerate(balances):
            if balance <= BALANCE_EPSILON:
                balances[idx] = _ZERO

    remaining = sum(balances, _ZERO)
    status = PAID_OFF if remaining == 0 else CAPPED_OUT
    total_interest = max(_ZERO, monthly_payment * months - original_total)

    if status == CAPPED_OUT:
        logger.warning(
            "Payoff projection did not converge",
            extra={
                "max_months": max_months,
                "remaining_balance": str(to_cents(remaining)),
                "monthly_payment": str(monthly_payment),
            },
        )
    else:
        logger.debug("Payoff projection converged", extra={"months": months})

    return PayoffProjection(
        months_to_payoff=months,
        total_interest_paid=total_interest,
        status=status,
        remaining_balance=remaining,
    )


def plan_repayment(
    *,
    debts: Iterable[DebtSnapshot],
    strategy: str,
    monthly_payment: Decimal,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> RepaymentPlan:
    """Order once, then compute both the allocation table and the projection."""

    ordered = order_debts(debts, strategy)
    monthly_payment = Decimal(monthly_payment)
    allocations = allocate_payment(ordered, monthly_payment)
    projection = simulate_payoff(ordered, monthly_payment, max_months=max_months)
    return RepaymentPlan(
        strategy=strategy,
        monthly_payment=monthly_payment,
        allocations=tuple(allocations),
        projection=projection,
    )


__all__ = [
    "AVALANCHE",
    "SNOWBALL",
    "STRATEGIES",
    "DEFAULT_MAX_MONTHS",
    "BALANCE_EPSILON",
    "PAID_OFF",
    "CAPPED_OUT",
    "InsufficientPayment",
    "InvalidDebt",
    "DebtSnapshot",
    "PaymentAllocation",
    "PayoffProjection",
    "RepaymentPlan",
    "to_cents",
    "validate_debts",
    "required_minimum",
    "order_debts",
    "allocate_payment",
    "simulate_payoff",
    "plan_repayment",
]
