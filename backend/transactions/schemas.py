from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TransactionSchema(BaseModel):
    amount: float = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    type: Literal["income", "expense"]
    category_id: int = Field(..., gt=0)
    account_id: Optional[int] = Field(None, gt=0)
    transaction_date: date
    tags: Optional[str] = Field(None, max_length=500)
