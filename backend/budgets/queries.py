"""
Read-side queries feeding ``budgets.insights``.

Spend is aggregated from expense transactions only. Month bucketing is done
in Python so the same code runs on MySQL and SQLite.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func

from models import db
from models.budget_model import Budget
from models.category_model import Category
from models.transaction_model import TransactionRecord

from .insights import CategorySpendHistory

EXPENSE_CATEGORY_TYPES = ("expense", "both")


def months_ago(d: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to month end."""
    y, m = divmod(d.year * 12 + (d.month - 1) - months, 12)
    m += 1
    day = min(d.day, calendar.monthrange(y, m)[1])
    return date(y, m, day)


def _month_key(d: date) -> str:
    return d.strftime("%Y-%m")


def _expense_query(user_id: int):
    return TransactionRecord.query.filter(
        TransactionRecord.user_id == user_id,
        TransactionRecord.type == "expense",
    )


def spend_by_category(user_id: int, since: date, until: Optional[date] = None) -> Dict[int, Tuple[float, int]]:
    """category_id -> (total spent, transaction count) for expenses in [since, until]."""
    q = db.session.query(
        TransactionRecord.category_id,
        func.coalesce(func.sum(TransactionRecord.amount), 0),
        func.count(TransactionRecord.id),
    ).filter(
        TransactionRecord.user_id == user_id,
        TransactionRecord.type == "expense",
        TransactionRecord.transaction_date >= since,
    )
    if until is not None:
        q = q.filter(TransactionRecord.transaction_date <= until)
    rows = q.group_by(TransactionRecord.category_id).all()
    return {cat_id: (float(total or 0), int(count or 0)) for cat_id, total, count in rows}


def budgets_with_spend(
    user_id: int,
    today: date,
    window_days: int = 30,
    active: Optional[bool] = None,
    period: Optional[str] = None,
    budget_id: Optional[int] = None,
) -> List[tuple]:
    """
    (Budget, spent, transaction_count) for the user's budgets, newest first.
    Spend covers the trailing ``window_days`` for the budget's category;
    orphaned budgets (no category) always read 0.
    """
    q = Budget.query.filter(Budget.user_id == user_id)
    if active is not None:
        q = q.filter(Budget.is_active.is_(active))
    if period:
        q = q.filter(Budget.period == period)
    if budget_id is not None:
        q = q.filter(Budget.id == budget_id)
    budgets = q.order_by(Budget.created_at.desc(), Budget.id.desc()).all()

    spend = spend_by_category(user_id, today - timedelta(days=window_days))
    out = []
    for b in budgets:
        spent, count = spend.get(b.category_id, (0.0, 0)) if b.category_id else (0.0, 0)
        out.append((b, spent, count))
    return out


def monthly_spend_history(
    user_id: int, today: date, months: int = 6, category_id: Optional[int] = None
) -> Dict[int, Dict[str, dict]]:
    """
    category_id -> {"YYYY-MM": {"total": x, "count": n}} over the trailing
    ``months``. Months without any expense row are absent, not zero.
    """
    q = _expense_query(user_id).filter(TransactionRecord.transaction_date >= months_ago(today, months))
    if category_id is not None:
        q = q.filter(TransactionRecord.category_id == category_id)

    rows = q.with_entities(
        TransactionRecord.category_id,
        TransactionRecord.transaction_date,
        TransactionRecord.amount,
    ).all()

    by_cat = defaultdict(lambda: defaultdict(lambda: {"total": 0.0, "count": 0}))
    for cat_id, tx_date, amount in rows:
        bucket = by_cat[cat_id][_month_key(tx_date)]
        bucket["total"] += float(amount or 0)
        bucket["count"] += 1
    return {cat: dict(m) for cat, m in by_cat.items()}


def _active_budget_amounts(user_id: int) -> Dict[int, float]:
    """
    category_id -> amount of the active budget used as the recommendation
    baseline. A monthly budget wins over other periods; otherwise the most
    recently created one.
    """
    budgets = (
        Budget.query.filter(
            Budget.user_id == user_id,
            Budget.is_active.is_(True),
            Budget.category_id.isnot(None),
        )
        .order_by(Budget.created_at.asc(), Budget.id.asc())
        .all()
    )
    chosen: Dict[int, Budget] = {}
    for b in budgets:
        prev = chosen.get(b.category_id)
        if prev is None or prev.period != "monthly" or b.period == "monthly":
            chosen[b.category_id] = b
    return {cat_id: float(b.amount) for cat_id, b in chosen.items()}


def expense_categories() -> List[Category]:
    return (
        Category.query.filter(Category.type.in_(EXPENSE_CATEGORY_TYPES))
        .order_by(Category.name)
        .all()
    )


def category_histories(user_id: int, today: date, months: int = 6) -> List[CategorySpendHistory]:
    history = monthly_spend_history(user_id, today, months)
    budgets = _active_budget_amounts(user_id)
    out = []
    for c in expense_categories():
        per_month = history.get(c.id, {})
        out.append(
            CategorySpendHistory(
                category_id=c.id,
                category=c.name,
                color=c.color,
                monthly_totals=[per_month[k]["total"] for k in sorted(per_month)],
                current_budget=budgets.get(c.id, 0.0),
            )
        )
    return out


def budget_categories(user_id: int, today: date, months: int = 6, window_days: int = 30) -> List[dict]:
    """Expense categories with spend history and whether a budget exists."""
    history = monthly_spend_history(user_id, today, months)
    recent = spend_by_category(user_id, today - timedelta(days=window_days))
    budgets = _active_budget_amounts(user_id)

    rows = []
    for c in expense_categories():
        per_month = history.get(c.id, {})
        totals = [m["total"] for m in per_month.values()]
        avg = sum(totals) / len(totals) if totals else 0.0
        row = c.to_dict()
        row.update(
            {
                "avg_monthly_spending": round(avg, 2),
                "months_with_data": len(totals),
                "recent_transactions": recent.get(c.id, (0.0, 0))[1],
                "has_budget": c.id in budgets,
                "current_budget": budgets.get(c.id, 0.0),
            }
        )
        rows.append(row)

    rows.sort(key=lambda r: (r["has_budget"], r["avg_monthly_spending"]), reverse=True)
    return rows


def monthly_trend(user_id: int, today: date, months: int = 6) -> List[dict]:
    """Total expense per month, oldest first, at most ``months`` entries."""
    history = monthly_spend_history(user_id, today, months)
    merged = defaultdict(lambda: {"spent": 0.0, "transactions": 0})
    for per_month in history.values():
        for month, agg in per_month.items():
            merged[month]["spent"] += agg["total"]
            merged[month]["transactions"] += agg["count"]

    latest = sorted(merged, reverse=True)[:months]
    return [
        {"month": m, "spent": round(merged[m]["spent"], 2), "transactions": merged[m]["transactions"]}
        for m in sorted(latest)
    ]


def daily_breakdown(
    user_id: int, category_id: Optional[int], since: date, until: Optional[date], limit: int = 30
) -> List[dict]:
    if category_id is None:
        return []
    q = db.session.query(
        TransactionRecord.transaction_date,
        func.sum(TransactionRecord.amount),
        func.count(TransactionRecord.id),
    ).filter(
        TransactionRecord.user_id == user_id,
        TransactionRecord.category_id == category_id,
        TransactionRecord.type == "expense",
        TransactionRecord.transaction_date >= since,
    )
    if until is not None:
        q = q.filter(TransactionRecord.transaction_date <= until)
    rows = (
        q.group_by(TransactionRecord.transaction_date)
        .order_by(TransactionRecord.transaction_date.desc())
        .limit(limit)
        .all()
    )
    return [
        {"date": d.isoformat(), "spent": round(float(total or 0), 2), "transactions": int(count)}
        for d, total, count in rows
    ]
