"""
Budget insight calculations.

Pure functions over data already fetched by ``budgets.queries``:
- derive_status:       spend/remaining/status for one budget
- health_score:        0-100 score penalising over-budget and warning budgets
- summarize_statuses:  the "current period" block of the analysis endpoint
- recommend:           rule-based create/increase/decrease suggestions

Nothing here touches the database or the request context.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, asdict, field, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
from pydantic import ValidationError

from .schemas import RecommendationRulesSchema

logger = logging.getLogger(__name__)


STATUS_ON_TRACK = "on_track"
STATUS_WARNING = "warning"
STATUS_OVER_BUDGET = "over_budget"

REC_CREATE = "create"
REC_INCREASE = "increase"
REC_DECREASE = "decrease"
REC_MAINTAIN = "maintain"

CONFIDENCE_LOW = "low"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_HIGH = "high"

OVER_BUDGET_PENALTY = 20
WARNING_PENALTY = 10


class InsightInputError(ValueError):
    """Raised when a budget or spend history violates a precondition."""


class RuleConfigError(ValueError):
    """Raised when configured recommendation rule overrides are malformed."""


@dataclass(frozen=True)
class RecommendationRules:
    """Multipliers and thresholds used by ``recommend``."""
    create_buffer: float = 1.15           # new budget on top of average spend
    increase_trigger: float = 1.1         # avg above budget * this -> increase
    increase_buffer: float = 1.1
    decrease_trigger: float = 0.7         # avg below budget * this -> decrease
    decrease_buffer: float = 1.1
    limited_data_buffer: float = 1.25     # fewer than high_confidence_months
    high_confidence_months: int = 3
    # Compared against the raw standard deviation of monthly totals,
    # not a coefficient of variation.
    volatility_threshold: float = 30.0
    increase_volatility_threshold: float = 25.0
    max_results: int = 10

    @classmethod
    def from_mapping(cls, overrides: Optional[Dict[str, Any]]) -> "RecommendationRules":
        """
        Defaults with ``overrides`` applied. Unknown keys, wrongly typed or
        out-of-range values raise RuleConfigError.
        """
        if not overrides:
            return cls()
        if not isinstance(overrides, dict):
            raise RuleConfigError(f"Recommendation rules must be an object, got {type(overrides).__name__}")
        try:
            checked = RecommendationRulesSchema.model_validate(overrides)
        except ValidationError as e:
            raise RuleConfigError(f"Invalid recommendation rules: {e}") from e
        return replace(cls(), **checked.model_dump(exclude_unset=True))


DEFAULT_RULES = RecommendationRules()


# ─── Budget status ──────────────────────────────────────────────────────────

@dataclass
class BudgetStatus:
    spent: float
    remaining: float
    percentage_used: float
    status: str
    days_remaining: Optional[int]
    transaction_count: int = 0

    def to_dict(self):
        return asdict(self)


def derive_status(
    amount: float,
    spent: Optional[float],
    *,
    alert_threshold: float = 80,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
    transaction_count: Optional[int] = 0,
) -> BudgetStatus:
    """
    Derive the spend status of one budget.

    ``spent`` is the unclamped total for the window (None when the category
    has no expense rows). ``remaining`` is clamped at 0 for display while
    ``percentage_used`` and ``status`` use the real figure, so an overspent
    budget still reads as over_budget.
    """
    amount = float(amount)
    if amount < 0:
        raise InsightInputError(f"Budget amount must not be negative (got {amount})")

    spent = float(spent or 0.0)
    threshold = float(alert_threshold if alert_threshold is not None else 80)

    if amount == 0:
        percentage = 0.0
    else:
        percentage = round(spent / amount * 100, 2)

    if amount == 0:
        status = STATUS_ON_TRACK
    elif spent > amount:
        status = STATUS_OVER_BUDGET
    elif percentage >= threshold:
        status = STATUS_WARNING
    else:
        status = STATUS_ON_TRACK

    days_remaining = None
    if end_date is not None:
        today = today or date.today()
        days_remaining = max(0, (end_date - today).days)

    return BudgetStatus(
        spent=round(spent, 2),
        remaining=round(max(0.0, amount - spent), 2),
        percentage_used=percentage,
        status=status,
        days_remaining=days_remaining,
        transaction_count=int(transaction_count or 0),
    )


# ─── Health score ───────────────────────────────────────────────────────────

def health_score(over_budget_count: int, warning_count: int) -> int:
    penalty = OVER_BUDGET_PENALTY * (over_budget_count or 0) + WARNING_PENALTY * (warning_count or 0)
    return max(0, 100 - penalty)


def summarize_statuses(rows: Iterable[tuple]) -> dict:
    """
    rows: (amount, BudgetStatus) pairs for the user's active budgets.
    Returns totals, utilisation and the health score.
    """
    total_budgets = 0
    total_budgeted = 0.0
    total_spent = 0.0
    over_budget = 0
    warning = 0

    for amount, st in rows:
        total_budgets += 1
        total_budgeted += float(amount)
        total_spent += st.spent
        if st.status == STATUS_OVER_BUDGET:
            over_budget += 1
        elif st.status == STATUS_WARNING:
            warning += 1

    percentage_spent = 0.0 if total_budgeted == 0 else round(total_spent / total_budgeted * 100, 2)

    return {
        "total_budgets": total_budgets,
        "active_budgets": total_budgets,
        "total_budgeted": round(total_budgeted, 2),
        "total_spent": round(total_spent, 2),
        "total_remaining": round(total_budgeted - total_spent, 2),
        "percentage_spent": percentage_spent,
        "over_budget_count": over_budget,
        "warning_count": warning,
        "health_score": health_score(over_budget, warning),
        "avg_utilization": percentage_spent,
    }


# ─── Recommendations ────────────────────────────────────────────────────────

@dataclass
class CategorySpendHistory:
    """Monthly expense totals of one category over the trailing window."""
    category_id: int
    category: str
    color: Optional[str] = None
    monthly_totals: List[float] = field(default_factory=list)
    current_budget: float = 0.0


@dataclass
class Recommendation:
    category_id: int
    category: str
    color: Optional[str]
    current_budget: float
    recommended_amount: float
    avg_monthly_spending: float
    max_monthly_spending: float
    spending_volatility: float
    months_with_data: int
    recommendation_type: str
    confidence: str
    reasoning: str
    potential_savings: float

    def to_dict(self):
        return asdict(self)


def _clean_totals(totals: Iterable[Optional[float]]) -> List[float]:
    # Missing or negative months count as absent, never as zero.
    return [float(t) for t in totals if t is not None and float(t) >= 0]


def spending_stats(totals: List[float]) -> tuple:
    """(avg, max, population stddev, months) of monthly totals."""
    if not totals:
        return 0.0, 0.0, 0.0, 0
    arr = np.asarray(totals, dtype=float)
    return float(arr.mean()), float(arr.max()), float(arr.std()), len(totals)


def recommend_for_category(
    history: CategorySpendHistory, rules: RecommendationRules = DEFAULT_RULES
) -> Recommendation:
    current = float(history.current_budget or 0.0)
    if current < 0:
        raise InsightInputError(f"Budget for category {history.category_id} is negative")

    avg, peak, volatility, months = spending_stats(_clean_totals(history.monthly_totals))

    rec_type = REC_MAINTAIN
    confidence = CONFIDENCE_LOW
    amount = 0.0
    reasoning = ""

    if months >= rules.high_confidence_months:
        confidence = CONFIDENCE_HIGH
        if current == 0:
            rec_type = REC_CREATE
            amount = math.ceil(avg * rules.create_buffer)
            if volatility > rules.volatility_threshold:
                note = " Note: Your spending in this category varies significantly."
            else:
                note = " This category has consistent spending patterns."
            reasoning = f"Based on your average monthly spending of ${avg:.2f}.{note}"
        elif avg > current * rules.increase_trigger:
            rec_type = REC_INCREASE
            amount = math.ceil(avg * rules.increase_buffer)
            reasoning = f"Your current budget (${current:.2f}) is below your average spending."
            if volatility > rules.increase_volatility_threshold:
                reasoning += " Costs in this category can be unpredictable."
        elif avg < current * rules.decrease_trigger:
            rec_type = REC_DECREASE
            amount = math.ceil(avg * rules.decrease_buffer)
            confidence = CONFIDENCE_MEDIUM
            reasoning = f"Your current budget (${current:.2f}) may be too high based on your spending patterns."
        else:
            amount = current
            reasoning = "Your current budget aligns well with your spending patterns."
    elif months > 0:
        confidence = CONFIDENCE_MEDIUM
        rec_type = REC_CREATE
        amount = math.ceil(avg * rules.limited_data_buffer)
        plural = "s" if months > 1 else ""
        reasoning = f"Based on limited data ({months} month{plural}). Consider monitoring for a few more months."

    savings = round(current - amount, 2) if rec_type == REC_DECREASE else 0.0

    return Recommendation(
        category_id=history.category_id,
        category=history.category,
        color=history.color,
        current_budget=round(current, 2),
        recommended_amount=float(amount),
        avg_monthly_spending=round(avg, 2),
        max_monthly_spending=round(peak, 2),
        spending_volatility=round(volatility, 2),
        months_with_data=months,
        recommendation_type=rec_type,
        confidence=confidence,
        reasoning=reasoning,
        potential_savings=savings,
    )


def recommend(
    histories: Iterable[CategorySpendHistory], rules: RecommendationRules = DEFAULT_RULES
) -> dict:
    """
    Build recommendations for every category with spend or a budget.

    A "maintain" result is only kept when the category has no budget, which
    the rules above never produce, so maintain never reaches the output.
    The summary counts every kept recommendation; the list is capped.
    """
    recs: List[Recommendation] = []
    for h in histories:
        rec = recommend_for_category(h, rules)
        if rec.avg_monthly_spending <= 0 and rec.current_budget <= 0:
            continue
        if rec.recommendation_type != REC_MAINTAIN or rec.current_budget == 0:
            recs.append(rec)

    recs.sort(key=lambda r: r.avg_monthly_spending, reverse=True)
    logger.debug("Built %d budget recommendations", len(recs))

    def _count(kind):
        return sum(1 for r in recs if r.recommendation_type == kind)

    summary = {
        "total_categories": len(recs),
        "create_new": _count(REC_CREATE),
        "increase_budget": _count(REC_INCREASE),
        "decrease_budget": _count(REC_DECREASE),
        "maintain_budget": _count(REC_MAINTAIN),
    }

    return {
        "recommendations": [r.to_dict() for r in recs[: rules.max_results]],
        "summary": summary,
    }
