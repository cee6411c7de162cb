from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Period = Literal["weekly", "monthly", "yearly"]


class BudgetCreateSchema(BaseModel):
    category_id: int = Field(..., gt=0)
    name: Optional[str] = Field(None, max_length=255)
    amount: float = Field(..., gt=0)
    period: Period = "monthly"
    start_date: date
    end_date: Optional[date] = None
    description: Optional[str] = ""
    is_active: bool = True
    alert_threshold: float = Field(80, ge=0, le=100)
    notes: Optional[str] = ""

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class BudgetUpdateSchema(BaseModel):
    category_id: Optional[int] = Field(None, gt=0)
    name: Optional[str] = Field(None, max_length=255)
    amount: Optional[float] = Field(None, gt=0)
    period: Optional[Period] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
    alert_threshold: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None


class ApplyTemplateSchema(BaseModel):
    # the web client posts camelCase
    model_config = ConfigDict(populate_by_name=True)

    template_id: str = Field(..., min_length=1, alias="templateId")
    total_budget: float = Field(..., gt=0, alias="totalBudget")


class RecommendationRulesSchema(BaseModel):
    """Overrides for ``RecommendationRules`` read from app config."""

    model_config = ConfigDict(extra="forbid", strict=True)

    create_buffer: float = Field(None, gt=0)
    increase_trigger: float = Field(None, gt=0)
    increase_buffer: float = Field(None, gt=0)
    decrease_trigger: float = Field(None, gt=0)
    decrease_buffer: float = Field(None, gt=0)
    limited_data_buffer: float = Field(None, gt=0)
    high_confidence_months: int = Field(None, ge=1)
    volatility_threshold: float = Field(None, ge=0)
    increase_volatility_threshold: float = Field(None, ge=0)
    max_results: int = Field(None, ge=1)
