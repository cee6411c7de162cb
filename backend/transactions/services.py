from __future__ import annotations

from sqlalchemy import case, func

from models import db
from models.transaction_model import TransactionRecord


def transaction_totals(user_id: int, start=None, end=None) -> dict:
    """Income/expense totals, count and average amount for a user."""
    q = db.session.query(
        func.coalesce(func.sum(case((TransactionRecord.type == "income", TransactionRecord.amount), else_=0)), 0),
        func.coalesce(func.sum(case((TransactionRecord.type == "expense", TransactionRecord.amount), else_=0)), 0),
        func.count(TransactionRecord.id),
        func.avg(TransactionRecord.amount),
    ).filter(TransactionRecord.user_id == user_id)
    if start and end:
        q = q.filter(TransactionRecord.transaction_date.between(start, end))

    income, expenses, count, avg = q.one()
    income = float(income or 0)
    expenses = float(expenses or 0)
    return {
        "total_income": round(income, 2),
        "total_expenses": round(expenses, 2),
        "total_transactions": int(count or 0),
        "avg_transaction": round(float(avg or 0), 2),
        "net_income": round(income - expenses, 2),
    }


def recent_transactions(user_id: int, limit: int = 5) -> list:
    rows = (
        TransactionRecord.query.filter_by(user_id=user_id)
        .order_by(
            TransactionRecord.transaction_date.desc(),
            TransactionRecord.created_at.desc(),
            TransactionRecord.id.desc(),
        )
        .limit(limit)
        .all()
    )
    return [t.to_dict() for t in rows]
