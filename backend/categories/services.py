from __future__ import annotations

from flask import current_app

from models import db
from models.category_model import Category

DEFAULT_CATEGORIES = [
    # Income
    ("Salary", "income", "#28a745", "fas fa-money-bill-wave"),
    ("Freelance", "income", "#20c997", "fas fa-laptop"),
    ("Investment Returns", "income", "#17a2b8", "fas fa-chart-line"),
    ("Other Income", "income", "#6f42c1", "fas fa-plus-circle"),
    # Expense
    ("Housing", "expense", "#ff6b6b", "fas fa-home"),
    ("Food & Dining", "expense", "#4ecdc4", "fas fa-utensils"),
    ("Transportation", "expense", "#45b7d1", "fas fa-car"),
    ("Bills & Utilities", "expense", "#feca57", "fas fa-file-invoice"),
    ("Entertainment", "expense", "#96ceb4", "fas fa-film"),
    ("Healthcare", "expense", "#ff9ff3", "fas fa-heartbeat"),
    ("Shopping", "expense", "#a29bfe", "fas fa-shopping-bag"),
    ("Education", "expense", "#2ecc71", "fas fa-graduation-cap"),
    ("Travel", "expense", "#e67e22", "fas fa-plane"),
    ("Insurance", "expense", "#fdcb6e", "fas fa-shield-alt"),
    ("Other Expenses", "expense", "#7f8c8d", "fas fa-ellipsis-h"),
]


def seed_default_categories() -> int:
    """Insert the default categories once. Returns how many were created."""
    if Category.query.filter_by(is_default=True).first():
        return 0

    existing = {c.name.lower() for c in Category.query.all()}
    created = 0
    for name, ctype, color, icon in DEFAULT_CATEGORIES:
        if name.lower() in existing:
            continue
        db.session.add(Category(name=name, type=ctype, color=color, icon=icon, is_default=True))
        created += 1
    db.session.commit()

    current_app.logger.info(f"Seeded {created} default categories")
    return created
