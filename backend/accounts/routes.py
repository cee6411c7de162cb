from __future__ import annotations

from typing import Literal

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from pydantic import BaseModel, Field, ValidationError

from common.http import ok, validation_error, current_user_id
from models import db
from models.account_model import Account


accounts_bp = Blueprint("accounts", __name__, url_prefix="/api/accounts")


class AccountSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: Literal["checking", "savings", "credit", "investment", "cash"]
    balance: float = 0.0
    currency: str = Field("USD", min_length=3, max_length=3)


@accounts_bp.route("", methods=["GET"])
@jwt_required()
def list_accounts():
    accounts = (
        Account.query.filter_by(user_id=current_user_id(), active=True)
        .order_by(Account.name)
        .all()
    )
    return ok([a.to_dict() for a in accounts])


@accounts_bp.route("", methods=["POST"])
@jwt_required()
def create_account():
    try:
        data = AccountSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    user_id = current_user_id()
    account = Account(user_id=user_id, **data.model_dump())
    db.session.add(account)
    db.session.commit()
    current_app.logger.info(f"Created account {account.id} for user {user_id}")

    return ok(account.to_dict(), 201, message="Account created successfully")
