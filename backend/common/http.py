from __future__ import annotations

from flask import jsonify
from flask_jwt_extended import get_jwt_identity
from pydantic import ValidationError


def ok(payload=None, status: int = 200, **extra):
    """Every successful response is ``{"data": ...}`` plus optional siblings."""
    body = {"data": payload}
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonify(body), status


def err(message, status: int = 400, **extra):
    body = {"error": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonify(body), status


def validation_error(e: ValidationError):
    details = [
        {"field": ".".join(str(p) for p in item["loc"]), "message": item["msg"]}
        for item in e.errors()
    ]
    return err("Validation failed", 400, details=details)


def current_user_id() -> int:
    return int(get_jwt_identity())
