from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from pydantic import BaseModel, Field, ValidationError

from common.http import ok, validation_error, current_user_id
from models import db
from models.planning_models import Debt


debts_bp = Blueprint("debts", __name__, url_prefix="/api/debts")

DebtType = Literal["credit_card", "auto_loan", "mortgage", "student_loan", "personal_loan", "other"]


class DebtSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: DebtType
    balance: float = Field(..., ge=0)
    interest_rate: float = Field(..., ge=0, le=100)
    min_payment: float = Field(..., ge=0)
    due_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=1000)


@debts_bp.route("", methods=["GET"])
@jwt_required()
def list_debts():
    debts = (
        Debt.query.filter_by(user_id=current_user_id(), active=True)
        .order_by(Debt.balance.desc())
        .all()
    )
    return ok([d.to_dict() for d in debts])


@debts_bp.route("", methods=["POST"])
@jwt_required()
def create_debt():
    try:
        data = DebtSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    user_id = current_user_id()
    debt = Debt(user_id=user_id, **data.model_dump())
    db.session.add(debt)
    db.session.commit()
    current_app.logger.info(f"Created debt {debt.id} for user {user_id}")

    return ok({"debt_id": debt.id}, 201, message="Debt created successfully")
