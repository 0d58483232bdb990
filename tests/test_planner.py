"""Planner service tests: row conversion, payoff dates and payload shape."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from spendlens.models import Debt
from spendlens.services.planner import build_plan_payload, payoff_date, snapshot_from_row


def _row(debt_id: int, name: str, balance: float, rate: float, minimum: float) -> Debt:
    return Debt(
        id=debt_id,
        user_id=1,
        name=name,
        balance=balance,
        interest_rate=rate,
        min_payment=minimum,
    )


def test_snapshot_from_row_uses_exact_decimals():
    snapshot = snapshot_from_row(_row(7, "Visa", 1234.56, 18.99, 45.1))

    assert snapshot.id == 7
    assert snapshot.name == "Visa"
    assert snapshot.balance == Decimal("1234.56")
    assert snapshot.interest_rate == Decimal("18.99")
    assert snapshot.min_payment == Decimal("45.1")


def test_payoff_date_rolls_over_year():
    assert payoff_date(0, today=date(2026, 10, 19)) == date(2026, 10, 1)
    assert payoff_date(3, today=date(2026, 10, 19)) == date(2027, 1, 1)
    assert payoff_date(14, today=date(2026, 11, 30)) == date(2028, 1, 1)


def test_build_plan_payload_avalanche():
    debts = [_row(1, "A", 1000, 20, 50), _row(2, "B", 500, 10, 25)]

    payload = build_plan_payload(
        debts=debts, strategy="avalanche", monthly_payment=100, today=date(2026, 1, 15)
    )

    assert payload["strategy"] == "avalanche"
    assert payload["monthlyPayment"] == 100.0
    assert payload["allocations"] == [
        {"debtId": 1, "debt": "A", "payment": 75.0, "newBalance": 925.0},
        {"debtId": 2, "debt": "B", "payment": 25.0, "newBalance": 475.0},
    ]
    projection = payload["projection"]
    assert projection["status"] == "paid_off"
    assert projection["didNotConverge"] is False
    assert projection["remainingBalance"] == 0.0
    assert projection["payoffDate"] == payoff_date(
        projection["monthsToPayoff"], today=date(2026, 1, 15)
    ).isoformat()
    assert projection["totalInterest"] == round(100.0 * projection["monthsToPayoff"] - 1500, 2)


def test_build_plan_payload_without_convergence_has_no_date():
    payload = build_plan_payload(
        debts=[_row(1, "Loan", 100000, 30, 50)], strategy="snowball", monthly_payment=50
    )

    projection = payload["projection"]
    assert projection["status"] == "capped_out"
    assert projection["didNotConverge"] is True
    assert projection["payoffDate"] is None
    assert projection["monthsToPayoff"] == 360


def test_build_plan_payload_respects_month_cap():
    payload = build_plan_payload(
        debts=[_row(1, "Loan", 5000, 10, 50)],
        strategy="avalanche",
        monthly_payment=50,
        max_months=24,
    )

    assert payload["projection"]["monthsToPayoff"] == 24
    assert payload["projection"]["didNotConverge"] is True
