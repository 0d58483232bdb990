"""Debt routes: CRUD, repayment plan and payoff calculation."""

from __future__ import annotations

from flask import current_app, g, jsonify, request

from ...domain.repositories import DebtPlanRepository, DebtRepository
from ...extensions import session_factory
from ...infra.repositories import SQLModelDebtPlanRepository, SQLModelDebtRepository
from ...logging_config import get_logger
from ...models.debt import Debt
from ...services.debts import InsufficientPayment, InvalidDebt, to_cents
from ...services.planner import build_plan_payload
from . import bp
from .forms import DebtForm, PlanForm

logger = get_logger(__name__)

USER_HEADER = "X-User-Id"


def _debts() -> DebtRepository:
    return SQLModelDebtRepository(session_factory)


def _plans() -> DebtPlanRepository:
    return SQLModelDebtPlanRepository(session_factory)


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _validation_error(errors: dict):
    logger.info("Debt request rejected", extra={"fields": sorted(errors)})
    return jsonify({"error": "validation_failed", "fields": errors}), 400


def _not_found(debt_id: int):
    return jsonify({"error": "debt_not_found", "debt_id": debt_id}), 404


@bp.before_request
def _resolve_user():
    """Bind the acting user id; authentication happens upstream."""

    raw = request.headers.get(USER_HEADER)
    if raw is None:
        g.user_id = current_app.config["SPENDLENS_CONFIG"].DEFAULT_USER_ID
        return None
    try:
        g.user_id = int(raw)
    except ValueError:
        return jsonify({"error": "invalid_user", "header": USER_HEADER}), 400
    return None


@bp.errorhandler(InsufficientPayment)
def _insufficient_payment(exc: InsufficientPayment):
    return (
        jsonify(
            {
                "error": "insufficient_payment",
                "message": str(exc),
                "requiredMinimum": float(to_cents(exc.required)),
            }
        ),
        400,
    )


@bp.errorhandler(InvalidDebt)
def _invalid_debt(exc: InvalidDebt):
    return (
        jsonify({"error": "invalid_debt", "debtId": exc.debt_id, "message": exc.reason}),
        400,
    )


@bp.get("/")
def list_debts():
    """Return the user's debts in creation order."""

    return jsonify([debt.to_dict() for debt in _debts().list_all(user_id=g.user_id)])


@bp.post("/")
def create_debt():
    form = DebtForm.from_payload(_payload())
    if not form.validate():
        return _validation_error(form.errors)

    debt = _debts().create(Debt(user_id=g.user_id, **form.cleaned_data()), user_id=g.user_id)
    logger.info("Debt created", extra={"debt_id": debt.id, "user_id": g.user_id})
    return jsonify(debt.to_dict()), 201


@bp.patch("/<int:debt_id>")
def update_debt(debt_id: int):
    form = DebtForm.from_payload(_payload(), partial=True)
    if not form.validate():
        return _validation_error(form.errors)

    debt = _debts().update(debt_id, form.cleaned_data(), user_id=g.user_id)
    if debt is None:
        return _not_found(debt_id)
    return jsonify(debt.to_dict())


@bp.delete("/<int:debt_id>")
def delete_debt(debt_id: int):
    if not _debts().delete(debt_id, user_id=g.user_id):
        return _not_found(debt_id)
    logger.info("Debt deleted", extra={"debt_id": debt_id, "user_id": g.user_id})
    return jsonify({"deleted": True})


@bp.get("/plan")
def get_plan():
    plan = _plans().get(user_id=g.user_id)
    return jsonify(plan.to_dict() if plan else None)


@bp.post("/plan")
def save_plan():
    payload = _payload()
    form = PlanForm(strategy=payload.get("strategy"), monthly_payment=payload.get("monthly_payment"))
    if not form.validate():
        return _validation_error(form.errors)

    plan = _plans().save(
        user_id=g.user_id,
        strategy=form.strategy,
        monthly_payment=float(form.monthly_payment),
    )
    return jsonify(plan.to_dict())


@bp.post("/calculate")
def calculate_plan():
    """Return this month's allocation table and the payoff projection.

    Strategy and payment come from the request body, falling back to the
    user's saved plan. An inline ``debts`` list is calculated without being
    stored; otherwise the user's stored debts are used.
    """

    payload = _payload()
    saved = _plans().get(user_id=g.user_id)
    form = PlanForm(
        strategy=payload.get("strategy") or (saved.strategy if saved else None),
        monthly_payment=payload.get("monthly_payment")
        if payload.get("monthly_payment") is not None
        else (saved.monthly_payment if saved else None),
    )
    if not form.validate():
        return _validation_error(form.errors)

    inline = payload.get("debts")
    if inline is None:
        debts = _debts().list_all(user_id=g.user_id)
    elif not isinstance(inline, list):
        return _validation_error({"debts": ["Provide a list of debts."]})
    else:
        debts = []
        for index, item in enumerate(inline):
            item = item if isinstance(item, dict) else {}
            debt_form = DebtForm.from_payload(item)
            if not debt_form.validate():
                return _validation_error({f"debts[{index}]": debt_form.errors})
            debts.append(
                Debt(id=item.get("id", index + 1), user_id=g.user_id, **debt_form.cleaned_data())
            )

    if not debts:
        return jsonify({"error": "no_debts", "message": "Add at least one debt first"}), 400

    result = build_plan_payload(
        debts=debts,
        strategy=form.strategy,
        monthly_payment=form.monthly_payment,
        max_months=current_app.config["SPENDLENS_CONFIG"].MAX_PROJECTION_MONTHS,
    )
    return jsonify(result)
