from models import db


class Budget(db.Model):
    """
    Spending limit for one category over a recurring period.

    Spend, remaining and status are never stored here; they are derived per
    request by ``budgets.insights``. Deleting a budget only clears
    ``is_active``.
    """

    __tablename__ = "budgets"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    # Nullable: the budget survives (orphaned) when its category is removed.
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    name = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    period = db.Column(db.String(10), nullable=False, default="monthly")  # weekly | monthly | yearly
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)
    description = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    alert_threshold = db.Column(db.Numeric(5, 2), nullable=False, default=80)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    category = db.relationship("Category", lazy="joined")

    __table_args__ = (
        db.Index("idx_budget_user_period", "user_id", "period"),
        db.Index("idx_budget_dates", "start_date", "end_date"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "category_id": self.category_id,
            "name": self.name,
            "amount": float(self.amount),
            "period": self.period,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "description": self.description,
            "notes": self.notes,
            "is_active": self.is_active,
            "alert_threshold": float(self.alert_threshold),
            "category_name": self.category.name if self.category else None,
            "category_color": self.category.color if self.category else None,
            "category_icon": self.category.icon if self.category else None,
        }
