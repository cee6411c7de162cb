# backend/auth/routes.py

from flask import Blueprint, request
from flask_jwt_extended import jwt_required, current_user
from pydantic import ValidationError

from auth.schemas import RegisterSchema, LoginSchema
from auth.services import register_user, login_user
from common.http import ok, err, validation_error

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():

    try:
        data = RegisterSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    result, error = register_user(data)

    if error:
        return err(error, 409)

    return ok(result, 201, message="Registration successful")


@auth_bp.route("/login", methods=["POST"])
def login():

    try:
        data = LoginSchema(**(request.get_json() or {}))
    except ValidationError as e:
        return validation_error(e)

    result, error = login_user(data)

    if error:
        return err(error, 401)

    return ok(result, message="Login successful")


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
def profile():
    return ok({"user": current_user.to_dict()})


@auth_bp.route("/verify", methods=["GET", "POST"])
@jwt_required()
def verify():
    return ok({"valid": True, "user": current_user.to_dict()})
