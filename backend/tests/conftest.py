from datetime import date

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.category_model import Category
from models.transaction_model import TransactionRecord

TODAY = date(2026, 10, 15)


@pytest.fixture
def app(monkeypatch):
    import budgets.routes

    monkeypatch.setattr(budgets.routes, "_today", lambda: TODAY)
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email="jane@example.com", password="s3cret-pass"):
    resp = client.post(
        "/api/auth/register",
        json={
            "email": email,
            "password": password,
            "first_name": "Jane",
            "last_name": "Doe",
        },
    )
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()["data"]
    return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def user(client):
    """(user_id, auth headers) of a freshly registered user."""
    return register(client)


@pytest.fixture
def auth_headers(user):
    return user[1]


@pytest.fixture
def category_id(app):
    def _lookup(name):
        with app.app_context():
            return Category.query.filter_by(name=name).one().id

    return _lookup


@pytest.fixture
def add_expense(app, user):
    """Insert an expense directly, bypassing the API."""
    user_id = user[0]

    def _add(category_id, amount, on, ttype="expense"):
        with app.app_context():
            db.session.add(
                TransactionRecord(
                    user_id=user_id,
                    category_id=category_id,
                    amount=amount,
                    description="test",
                    type=ttype,
                    transaction_date=on,
                )
            )
            db.session.commit()

    return _add
