import math
from datetime import datetime
from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, field_validator

from spendwise.domain.periods import to_local_naive


def _new_id() -> str:
    return uuid4().hex


class Category(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    icon: str = ""
    color_hex: str = "#8E8E93"
    budget: float = 0.0  # monthly limit, 0 = no limit
    is_income: bool = False

    @field_validator("budget", mode="before")
    @classmethod
    def clamp_budget(cls, value: object) -> float:
        try:
            budget = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(budget) or budget < 0:
            return 0.0
        return budget

    @property
    def has_budget(self) -> bool:
        return self.budget > 0


class Transaction(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    amount: float = Field(allow_inf_nan=False)
    is_income: bool = False
    date: datetime = Field(default_factory=datetime.now)
    note: str = ""
    category_id: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def store_magnitude(cls, value: float) -> float:
        # Sign lives in is_income
        return abs(value)

    @field_validator("date")
    @classmethod
    def to_local_time(cls, value: datetime) -> datetime:
        return to_local_naive(value)


class AlertRequest(BaseModel):
    category_id: str
    category_name: str
    threshold_percent: int
    spent_amount: float
    budget_amount: float
    amount_spent_formatted: str
    budget_amount_formatted: str
    period_key: str


class SpendBucket(BaseModel):
    start: datetime
    label: str
    amount: float


class CategorySpend(BaseModel):
    category: Category
    amount: float


class BudgetProgress(BaseModel):
    category: Category
    spent: float
    budget: float
    progress: float
    remaining: float
    percent_used: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_over_budget(self) -> bool:
        return self.progress > 1.0


class BudgetNotification(BaseModel):
    identifier: str
    title: str
    body: str
    priority: Literal["low", "high"]

