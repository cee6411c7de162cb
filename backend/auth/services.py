# backend/auth/services.py

from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from models.user_model import User
from models import db


def _token_for(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "role": user.role},
    )


def register_user(data):

    existing = User.query.filter_by(email=data.email).first()
    if existing:
        return None, "Email already registered"

    user = User(
        email=data.email,
        password_hash=generate_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
    )

    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"Registered user {user.id}")

    return {"token": _token_for(user), "user": user.to_dict()}, None


def login_user(data):

    user = User.query.filter_by(email=data.email, active=True).first()

    if not user:
        return None, "Invalid email or password"

    if not check_password_hash(user.password_hash, data.password):
        return None, "Invalid email or password"

    return {"token": _token_for(user), "user": user.to_dict()}, None
