from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from pydantic import BaseModel, Field, ValidationError

from common.http import ok, err, validation_error, current_user_id
from models import db
from models.category_model import Category
from models.planning_models import Bill


bills_bp = Blueprint("bills", __name__, url_prefix="/api/bills")


class BillSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    amount: float = Field(..., gt=0)
    due_date: date
    frequency: Literal["weekly", "monthly", "yearly"] = "monthly"
    category_id: Optional[int] = Field(None, gt=0)
    auto_pay: bool = False
    notes: Optional[str] = Field(None, max_length=1000)


@bills_bp.route("", methods=["GET"])
@jwt_required()
def list_bills():
    bills = (
        Bill.query.filter_by(user_id=current_user_id(), active=True)
        .order_by(Bill.due_date.asc())
        .all()
    )
    return ok([b.to_dict() for b in bills])


@bills_bp.route("", methods=["POST"])
@jwt_required()
def create_bill():
    try:
        data = BillSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    if data.category_id is not None and not db.session.get(Category, data.category_id):
        return err("Category not found", 400)

    user_id = current_user_id()
    bill = Bill(user_id=user_id, **data.model_dump())
    db.session.add(bill)
    db.session.commit()
    current_app.logger.info(f"Created bill {bill.id} for user {user_id}")

    return ok({"bill_id": bill.id}, 201, message="Bill created successfully")
