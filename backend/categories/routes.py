from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from sqlalchemy import or_

from common.http import ok
from models.category_model import Category


categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.route("", methods=["GET"])
@jwt_required()
def list_categories():
    """
    Query parameters:
    - type: income|expense (optional); categories typed "both" always match
    """
    ctype = request.args.get("type")

    q = Category.query
    if ctype in ("income", "expense"):
        q = q.filter(or_(Category.type == ctype, Category.type == "both"))

    return ok([c.to_dict() for c in q.order_by(Category.name).all()])
