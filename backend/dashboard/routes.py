from __future__ import annotations

from flask import Blueprint
from flask_jwt_extended import jwt_required

from common.http import ok, current_user_id
from transactions.services import transaction_totals, recent_transactions


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.route("/overview", methods=["GET"])
@jwt_required()
def overview():
    user_id = current_user_id()
    return ok(
        {
            "summary": transaction_totals(user_id),
            "recent_transactions": recent_transactions(user_id, limit=5),
        }
    )
