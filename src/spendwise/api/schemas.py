from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from spendwise.domain.periods import is_period_key
from spendwise.models import Category, Transaction
from spendwise.services.aggregation import StatsPeriod


class SnapshotRequest(BaseModel):
    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    now: datetime | None = None


class StatsRequest(SnapshotRequest):
    period: StatsPeriod = StatsPeriod.WEEK


class BudgetOverviewRequest(SnapshotRequest):
    month: str | None = None

    @field_validator("month")
    @classmethod
    def check_month(cls, value: str | None) -> str | None:
        if value is not None and not is_period_key(value):
            raise ValueError("month must be formatted as yyyy-MM")
        return value
