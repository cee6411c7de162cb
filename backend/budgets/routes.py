from __future__ import annotations

from datetime import date

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from pydantic import ValidationError

from common.http import ok, err, validation_error, current_user_id

from . import queries
from .insights import (
    derive_status,
    recommend,
    summarize_statuses,
)
from .schemas import BudgetCreateSchema, BudgetUpdateSchema, ApplyTemplateSchema
from .services import (
    get_owned_budget,
    create_budget,
    update_budget,
    deactivate_budget,
    apply_template,
)
from .templates import BUDGET_TEMPLATES, get_template


budgets_bp = Blueprint("budgets", __name__, url_prefix="/api/budgets")

VALID_PERIODS = ("weekly", "monthly", "yearly")


def _today() -> date:
    return date.today()


def _window_days() -> int:
    return int(current_app.config.get("SPEND_WINDOW_DAYS", 30))


def _history_months() -> int:
    return int(current_app.config.get("HISTORY_MONTHS", 6))


def _status_row(budget, spent, count, today):
    st = derive_status(
        budget.amount,
        spent,
        alert_threshold=budget.alert_threshold,
        end_date=budget.end_date,
        today=today,
        transaction_count=count,
    )
    row = budget.to_dict()
    row["category"] = row["category_name"]
    row.update(st.to_dict())
    return row


@budgets_bp.route("", methods=["GET"])
@jwt_required()
def list_budgets():
    """
    Query parameters:
    - active: true|false (optional)
    - period: weekly|monthly|yearly (optional)
    """
    active_arg = request.args.get("active")
    active = None if active_arg is None else active_arg.lower() == "true"
    period = request.args.get("period")
    if period and period not in VALID_PERIODS:
        return err("Invalid period. Must be weekly, monthly, or yearly.")

    today = _today()
    rows = queries.budgets_with_spend(
        current_user_id(), today, window_days=_window_days(), active=active, period=period
    )
    return ok([_status_row(b, spent, count, today) for b, spent, count in rows])


@budgets_bp.route("/<int:budget_id>", methods=["GET"])
@jwt_required()
def get_budget(budget_id):
    today = _today()
    rows = queries.budgets_with_spend(current_user_id(), today, window_days=_window_days(), budget_id=budget_id)
    if not rows:
        return err("Budget not found", 404)
    b, spent, count = rows[0]
    return ok(_status_row(b, spent, count, today))


@budgets_bp.route("/analysis", methods=["GET"])
@jwt_required()
def budget_analysis():
    user_id = current_user_id()
    today = _today()

    rows = queries.budgets_with_spend(user_id, today, window_days=_window_days(), active=True)
    statuses = [
        (b.amount, derive_status(b.amount, spent, alert_threshold=b.alert_threshold, today=today))
        for b, spent, _ in rows
    ]
    return ok(
        {
            "current_period": summarize_statuses(statuses),
            "monthly_trend": queries.monthly_trend(user_id, today, _history_months()),
        }
    )


@budgets_bp.route("/recommendations", methods=["GET"])
@jwt_required()
def budget_recommendations():
    rules = current_app.extensions["recommendation_rules"]
    histories = queries.category_histories(current_user_id(), _today(), _history_months())
    return ok(recommend(histories, rules))


@budgets_bp.route("/templates", methods=["GET"])
@jwt_required()
def list_templates():
    return ok(BUDGET_TEMPLATES)


@budgets_bp.route("/categories", methods=["GET"])
@jwt_required()
def budget_categories():
    rows = queries.budget_categories(
        current_user_id(), _today(), months=_history_months(), window_days=_window_days()
    )
    return ok(rows)


@budgets_bp.route("/apply-template", methods=["POST"])
@jwt_required()
def apply_budget_template():
    try:
        data = ApplyTemplateSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    template = get_template(data.template_id)
    if not template:
        return err("Template not found", 404)

    created = apply_template(current_user_id(), template, data.total_budget, today=_today())
    return ok(
        {
            "template": data.template_id,
            "created_budgets": created,
            "total_budget": data.total_budget,
        },
        message="Template applied successfully",
    )


@budgets_bp.route("/<int:budget_id>/performance", methods=["GET"])
@jwt_required()
def budget_performance(budget_id):
    user_id = current_user_id()
    budget = get_owned_budget(user_id, budget_id)
    if not budget:
        return err("Budget not found", 404)

    today = _today()
    if budget.category_id is not None:
        spend = queries.spend_by_category(user_id, budget.start_date, budget.end_date)
        spent, count = spend.get(budget.category_id, (0.0, 0))
    else:
        spent, count = 0.0, 0

    st = derive_status(
        budget.amount,
        spent,
        alert_threshold=budget.alert_threshold,
        end_date=budget.end_date,
        today=today,
        transaction_count=count,
    )
    performance = st.to_dict()
    performance["total_spent"] = performance.pop("spent")
    performance["avg_transaction"] = round(spent / count, 2) if count else 0.0

    return ok(
        {
            "budget_info": budget.to_dict(),
            "performance": performance,
            "daily_breakdown": queries.daily_breakdown(
                user_id, budget.category_id, budget.start_date, budget.end_date
            ),
        }
    )


@budgets_bp.route("", methods=["POST"])
@jwt_required()
def create():
    try:
        data = BudgetCreateSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    budget, error = create_budget(current_user_id(), data)
    if error:
        return err(error.pop("error"), 400, **error)

    return ok(budget.to_dict(), 201, message="Budget created successfully")


@budgets_bp.route("/<int:budget_id>", methods=["PUT"])
@jwt_required()
def update(budget_id):
    budget = get_owned_budget(current_user_id(), budget_id)
    if not budget:
        return err("Budget not found", 404)

    try:
        data = BudgetUpdateSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    budget, error = update_budget(budget, data)
    if error:
        return err(error.pop("error"), 400, **error)

    return ok(budget.to_dict(), message="Budget updated successfully")


@budgets_bp.route("/<int:budget_id>", methods=["DELETE"])
@jwt_required()
def delete(budget_id):
    budget = get_owned_budget(current_user_id(), budget_id)
    if not budget:
        return err("Budget not found", 404)

    return ok(deactivate_budget(budget), message="Budget deleted successfully")
