from __future__ import annotations

import math
from datetime import date
from typing import Optional

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from pydantic import ValidationError

from common.http import ok, err, validation_error, current_user_id
from models import db
from models.account_model import Account
from models.category_model import Category
from models.transaction_model import TransactionRecord

from .schemas import TransactionSchema
from .services import transaction_totals


transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")

MAX_PAGE_SIZE = 100


def _int_arg(name: str, default: int, minimum: int = 1, maximum: Optional[int] = None) -> int:
    try:
        value = max(minimum, int(request.args.get(name) or default))
    except ValueError:
        return default
    return min(value, maximum) if maximum is not None else value


def _date_arg(name: str):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


def _check_refs(user_id: int, data: TransactionSchema):
    if not db.session.get(Category, data.category_id):
        return "Category not found"
    if data.account_id is not None:
        account = db.session.get(Account, data.account_id)
        if not account or account.user_id != user_id:
            return "Account not found"
    return None


def _owned(user_id: int, txn_id: int):
    return TransactionRecord.query.filter_by(id=txn_id, user_id=user_id).first()


@transactions_bp.route("", methods=["GET"])
@jwt_required()
def list_transactions():
    """
    Query parameters:
    - page, limit: pagination (default 1 / 50, limit capped at 100)
    - type: income|expense
    - category_id
    - start_date, end_date: YYYY-MM-DD, inclusive
    """
    page = _int_arg("page", 1)
    limit = _int_arg("limit", 50, maximum=MAX_PAGE_SIZE)

    q = TransactionRecord.query.filter(TransactionRecord.user_id == current_user_id())

    ttype = request.args.get("type")
    if ttype:
        q = q.filter(TransactionRecord.type == ttype)
    category_id = request.args.get("category_id", type=int)
    if category_id:
        q = q.filter(TransactionRecord.category_id == category_id)
    start = _date_arg("start_date")
    if start:
        q = q.filter(TransactionRecord.transaction_date >= start)
    end = _date_arg("end_date")
    if end:
        q = q.filter(TransactionRecord.transaction_date <= end)

    total = q.count()
    rows = (
        q.order_by(
            TransactionRecord.transaction_date.desc(),
            TransactionRecord.created_at.desc(),
            TransactionRecord.id.desc(),
        )
        .limit(limit)
        .offset((page - 1) * limit)
        .all()
    )

    return ok(
        [t.to_dict() for t in rows],
        pagination={
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit) if total else 0,
        },
    )


@transactions_bp.route("/<int:txn_id>", methods=["GET"])
@jwt_required()
def get_transaction(txn_id):
    txn = _owned(current_user_id(), txn_id)
    if not txn:
        return err("Transaction not found", 404)
    return ok(txn.to_dict())


@transactions_bp.route("", methods=["POST"])
@jwt_required()
def create_transaction():
    try:
        data = TransactionSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    user_id = current_user_id()
    problem = _check_refs(user_id, data)
    if problem:
        return err(problem, 400)

    txn = TransactionRecord(user_id=user_id, **data.model_dump())
    db.session.add(txn)
    db.session.commit()
    current_app.logger.info(f"Created transaction {txn.id} for user {user_id}")

    return ok(txn.to_dict(), 201, message="Transaction created successfully")


@transactions_bp.route("/<int:txn_id>", methods=["PUT"])
@jwt_required()
def update_transaction(txn_id):
    user_id = current_user_id()
    txn = _owned(user_id, txn_id)
    if not txn:
        return err("Transaction not found", 404)

    try:
        data = TransactionSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    problem = _check_refs(user_id, data)
    if problem:
        return err(problem, 400)

    for key, value in data.model_dump().items():
        setattr(txn, key, value)
    db.session.commit()
    current_app.logger.info(f"Updated transaction {txn.id} for user {user_id}")

    return ok(txn.to_dict(), message="Transaction updated successfully")


@transactions_bp.route("/<int:txn_id>", methods=["DELETE"])
@jwt_required()
def delete_transaction(txn_id):
    user_id = current_user_id()
    txn = _owned(user_id, txn_id)
    if not txn:
        return err("Transaction not found", 404)

    db.session.delete(txn)
    db.session.commit()
    current_app.logger.info(f"Deleted transaction {txn_id} for user {user_id}")

    return ok(None, message="Transaction deleted successfully")


@transactions_bp.route("/stats/summary", methods=["GET"])
@jwt_required()
def stats_summary():
    return ok(transaction_totals(current_user_id(), _date_arg("start_date"), _date_arg("end_date")))
