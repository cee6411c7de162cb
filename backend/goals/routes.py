from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy import case

from common.http import ok, validation_error, current_user_id
from models import db
from models.planning_models import Goal


goals_bp = Blueprint("goals", __name__, url_prefix="/api/goals")

GoalCategory = Literal["emergency_fund", "vacation", "home_purchase", "retirement", "education", "other"]

# high first
_PRIORITY_RANK = case({"high": 3, "medium": 2, "low": 1}, value=Goal.priority, else_=0)


class GoalSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: GoalCategory
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(0, ge=0)
    target_date: Optional[date] = None
    priority: Literal["low", "medium", "high"] = "medium"
    description: Optional[str] = Field(None, max_length=1000)


@goals_bp.route("", methods=["GET"])
@jwt_required()
def list_goals():
    goals = (
        Goal.query.filter_by(user_id=current_user_id())
        .order_by(_PRIORITY_RANK.desc(), Goal.target_date.asc())
        .all()
    )
    return ok([g.to_dict() for g in goals])


@goals_bp.route("", methods=["POST"])
@jwt_required()
def create_goal():
    try:
        data = GoalSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    user_id = current_user_id()
    goal = Goal(user_id=user_id, **data.model_dump())
    db.session.add(goal)
    db.session.commit()
    current_app.logger.info(f"Created goal {goal.id} for user {user_id}")

    return ok({"goal_id": goal.id}, 201, message="Goal created successfully")
