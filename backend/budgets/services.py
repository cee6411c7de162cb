from __future__ import annotations

from datetime import date
from typing import Optional

from flask import current_app

from models import db
from models.budget_model import Budget
from models.category_model import Category

from .queries import EXPENSE_CATEGORY_TYPES
from .templates import allocate


def get_owned_budget(user_id: int, budget_id: int) -> Optional[Budget]:
    return Budget.query.filter_by(id=budget_id, user_id=user_id).first()


def _active_duplicate(user_id: int, category_id: int, period: str, exclude_id: Optional[int] = None):
    q = Budget.query.filter_by(user_id=user_id, category_id=category_id, period=period, is_active=True)
    if exclude_id is not None:
        q = q.filter(Budget.id != exclude_id)
    return q.first()


def create_budget(user_id: int, data):
    """
    Returns (budget, None) on success or (None, error_body) when the
    category is unknown or an active budget already covers the same
    category and period.
    """
    category = db.session.get(Category, data.category_id)
    if not category:
        return None, {"error": "Category not found"}

    existing = _active_duplicate(user_id, category.id, data.period)
    if existing and data.is_active:
        return None, {
            "error": f"Active {data.period} budget already exists for {category.name}",
            "existing_budget": {"id": existing.id, "name": existing.name},
        }

    budget = Budget(
        user_id=user_id,
        category_id=category.id,
        name=data.name or f"{category.name} {data.period.capitalize()} Budget",
        amount=data.amount,
        period=data.period,
        start_date=data.start_date,
        end_date=data.end_date,
        description=data.description or "",
        is_active=data.is_active,
        alert_threshold=data.alert_threshold,
        notes=data.notes or "",
    )
    db.session.add(budget)
    db.session.commit()

    current_app.logger.info(f"Created budget {budget.id} ({budget.name}) for user {user_id}")
    return budget, None


def update_budget(budget: Budget, data):
    """Apply only the fields present in the request body."""
    changes = data.model_dump(exclude_unset=True)

    if "category_id" in changes and changes["category_id"] is not None:
        if not db.session.get(Category, changes["category_id"]):
            return None, {"error": "Category not found"}

    for key, value in changes.items():
        # null is only meaningful for end_date; other nulls leave the column alone
        if value is None and key != "end_date":
            continue
        setattr(budget, key, value)

    if budget.end_date is not None and budget.end_date < budget.start_date:
        db.session.rollback()
        return None, {"error": "end_date must be on or after start_date"}

    if budget.is_active and budget.category_id is not None:
        existing = _active_duplicate(budget.user_id, budget.category_id, budget.period, exclude_id=budget.id)
        if existing:
            db.session.rollback()
            return None, {
                "error": f"Active {existing.period} budget already exists for this category",
                "existing_budget": {"id": existing.id, "name": existing.name},
            }

    db.session.commit()
    current_app.logger.info(f"Updated budget {budget.id} for user {budget.user_id}")
    return budget, None


def deactivate_budget(budget: Budget) -> dict:
    snapshot = {"id": budget.id, "name": budget.name, "amount": float(budget.amount)}
    budget.is_active = False
    db.session.commit()
    current_app.logger.info(f"Deactivated budget {budget.id} for user {budget.user_id}")
    return snapshot


def apply_template(user_id: int, template: dict, total_budget: float, today: Optional[date] = None) -> list:
    """
    Create one monthly budget per template category. Categories that do not
    exist, or already have an active budget, are skipped.
    """
    today = today or date.today()
    created = []

    for item in allocate(template, total_budget):
        category = Category.query.filter(
            Category.name == item["name"], Category.type.in_(EXPENSE_CATEGORY_TYPES)
        ).first()
        if not category:
            current_app.logger.warning(f"Template {template['id']}: no category named {item['name']!r}, skipped")
            continue

        exists = Budget.query.filter_by(user_id=user_id, category_id=category.id, is_active=True).first()
        if exists:
            continue

        budget = Budget(
            user_id=user_id,
            category_id=category.id,
            name=f"{item['name']} Budget",
            amount=item["amount"],
            period="monthly",
            start_date=today,
            is_active=True,
        )
        db.session.add(budget)
        db.session.flush()
        created.append(
            {
                "id": budget.id,
                "category": item["name"],
                "amount": item["amount"],
                "percentage": item["percentage"],
            }
        )

    db.session.commit()
    current_app.logger.info(f"Applied template {template['id']} for user {user_id}: {len(created)} budget(s)")
    return created
