from models import db


class TransactionRecord(db.Model):
    """
    A single income or expense entry recorded by a user.
    Expense rows are the only input to budget spend and recommendations.
    """

    __tablename__ = "transactions"

    id = db.Column(db.Integer, primary_key=True)

    # Ownership
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    account_id = db.Column(db.Integer, db.ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), index=True, nullable=False)

    # Core transaction data
    amount = db.Column(db.Numeric(15, 2), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(10), nullable=False, index=True)  # income | expense
    transaction_date = db.Column(db.Date, nullable=False, index=True)
    tags = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    category = db.relationship("Category", lazy="joined")
    account = db.relationship("Account", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "account_id": self.account_id,
            "category_id": self.category_id,
            "amount": float(self.amount),
            "description": self.description,
            "type": self.type,
            "transaction_date": self.transaction_date.isoformat(),
            "tags": self.tags,
            "category_name": self.category.name if self.category else None,
            "category_color": self.category.color if self.category else None,
            "account_name": self.account.name if self.account else None,
        }
