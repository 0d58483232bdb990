"""Flask CLI commands for SpendLens."""

from __future__ import annotations

import click
from flask import current_app

from .services.debts import DEFAULT_MAX_MONTHS, STRATEGIES, InsufficientPayment, InvalidDebt

DEMO_DEBTS = (
    {"name": "Visa Platinum", "balance": 4200.0, "interest_rate": 22.99, "min_payment": 120.0},
    {"name": "Store Card", "balance": 850.0, "interest_rate": 26.49, "min_payment": 35.0},
    {"name": "Auto Loan", "balance": 12480.0, "interest_rate": 5.9, "min_payment": 310.0},
    {"name": "Student Loan", "balance": 18900.0, "interest_rate": 4.5, "min_payment": 210.0},
)


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("spendlens-seed")
    @click.option("--user-id", type=int, default=None, help="Owner of the demo debts")
    def spendlens_seed(user_id: int | None) -> None:
        """Insert demo debts for a user."""

        from .extensions import session_factory
        from .infra.repositories import SQLModelDebtRepository
        from .models.debt import Debt

        owner = user_id if user_id is not None else _default_user_id()
        repository = SQLModelDebtRepository(session_factory)
        for row in DEMO_DEBTS:
            repository.create(Debt(user_id=owner, **row), user_id=owner)
        click.echo(f"Seeded {len(DEMO_DEBTS)} debts for user {owner}.")

    @app.cli.command("spendlens-plan")
    @click.option("--user-id", type=int, default=None)
    @click.option("--strategy", type=click.Choice(STRATEGIES), default=None)
    @click.option("--payment", type=float, default=None, help="Total monthly payment")
    def spendlens_plan(user_id: int | None, strategy: str | None, payment: float | None) -> None:
        """Print the allocation table and payoff projection."""

        from .extensions import session_factory
        from .infra.repositories import SQLModelDebtPlanRepository, SQLModelDebtRepository
        from .services.planner import build_plan_payload

        owner = user_id if user_id is not None else _default_user_id()
        debts = SQLModelDebtRepository(session_factory).list_all(user_id=owner)
        if not debts:
            raise click.ClickException(f"User {owner} has no debts.")

        saved = SQLModelDebtPlanRepository(session_factory).get(user_id=owner)
        strategy = strategy or (saved.strategy if saved else None)
        payment = payment if payment is not None else (saved.monthly_payment if saved else None)
        if strategy is None or payment is None:
            raise click.ClickException("No saved plan; pass --strategy and --payment.")

        try:
            result = build_plan_payload(
                debts=debts,
                strategy=strategy,
                monthly_payment=payment,
                max_months=_max_months(),
            )
        except (InsufficientPayment, InvalidDebt) as exc:
            raise click.ClickException(str(exc)) from exc

        click.echo(f"Strategy: {result['strategy']}  Monthly payment: ${result['monthlyPayment']:,.2f}")
        for row in result["allocations"]:
            click.echo(
                f"  {row['debt']:<24} pay ${row['payment']:>10,.2f}  "
                f"new balance ${row['newBalance']:>11,.2f}"
            )
        projection = result["projection"]
        if projection["didNotConverge"]:
            click.echo(
                f"Not paid off within {projection['monthsToPayoff']} months; "
                f"${projection['remainingBalance']:,.2f} would remain."
            )
        else:
            click.echo(
                f"Debt free in {projection['monthsToPayoff']} months ({projection['payoffDate']}); "
                f"total interest ${projection['totalInterest']:,.2f}"
            )


def _default_user_id() -> int:
    return current_app.config["SPENDLENS_CONFIG"].DEFAULT_USER_ID


def _max_months() -> int:
    config = current_app.config.get("SPENDLENS_CONFIG")
    return config.MAX_PROJECTION_MONTHS if config else DEFAULT_MAX_MONTHS
