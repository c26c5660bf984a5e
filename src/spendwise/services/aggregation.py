from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from spendwise.domain import ledger
from spendwise.domain.periods import Period, add_months, resolve_now
from spendwise.logger import get_logger
from spendwise.models import Category, CategorySpend, SpendBucket, Transaction

logger = get_logger(__name__)


class StatsPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def bucket_count(self) -> int:
        return _BUCKET_COUNTS[self]


_BUCKET_COUNTS = {
    StatsPeriod.WEEK: 7,
    StatsPeriod.MONTH: 30,
    StatsPeriod.YEAR: 12,
}


def stats_window(period: StatsPeriod, now: datetime | None = None) -> Period:
    current = resolve_now(now)
    if period is StatsPeriod.YEAR:
        return Period.trailing_months(current, period.bucket_count)
    return Period.trailing_days(current, period.bucket_count)


def _bucket_periods(period: StatsPeriod, window: Period) -> list[Period]:
    if period is StatsPeriod.YEAR:
        return [
            Period(start=add_months(window.start, offset), end=add_months(window.start, offset + 1))
            for offset in range(period.bucket_count)
        ]
    return [
        Period.day_of(window.start + timedelta(days=offset))
        for offset in range(period.bucket_count)
    ]


def spending_series(
    transactions: Iterable[Transaction],
    period: StatsPeriod,
    now: datetime | None = None,
) -> list[SpendBucket]:
    """Expense totals per day (week/month) or per month (year), oldest first.

    Always returns ``period.bucket_count`` buckets; empty ones are zero.
    """
    window = stats_window(period, now)
    buckets = _bucket_periods(period, window)
    label_format = "%Y-%m" if period is StatsPeriod.YEAR else "%Y-%m-%d"

    totals = [0.0] * len(buckets)
    # Buckets are contiguous, so the offset from the window start is the index
    for t in ledger.expenses_in(transactions, window):
        if period is StatsPeriod.YEAR:
            index = (t.date.year - window.start.year) * 12 + (t.date.month - window.start.month)
        else:
            index = (t.date.date() - window.start.date()).days
        totals[index] += t.amount

    return [
        SpendBucket(start=bucket.start, label=bucket.start.strftime(label_format), amount=amount)
        for bucket, amount in zip(buckets, totals)
    ]


def category_totals(
    transactions: Iterable[Transaction],
    period: StatsPeriod,
    categories: Sequence[Category],
    now: datetime | None = None,
) -> list[CategorySpend]:
    """Spending per category in the stats window, largest first.

    Categories without spending are omitted; equal amounts keep the order of
    ``categories``.
    """
    window_expenses = ledger.expenses_in(transactions, stats_window(period, now))
    result: list[CategorySpend] = []
    for category in categories:
        amount = ledger.total(ledger.select(window_expenses, ledger.in_category(category.id)))
        if amount > 0:
            result.append(CategorySpend(category=category, amount=amount))
    # sorted() is stable
    return sorted(result, key=lambda item: item.amount, reverse=True)


@dataclass(frozen=True)
class PeriodSummary:
    period: StatsPeriod
    window: Period
    total_spent: float
    transaction_count: int
    top_category: Category | None

    @property
    def average_per_transaction(self) -> float:
        if self.transaction_count == 0:
            return 0.0
        return self.total_spent / self.transaction_count

    def to_dict(self) -> dict[str, object]:
        return {
            "period": self.period.value,
            "start": self.window.start.isoformat(),
            "end": self.window.end.isoformat(),
            "total_spent": self.total_spent,
            "transaction_count": self.transaction_count,
            "average_per_transaction": self.average_per_transaction,
            "top_category": self.top_category.model_dump(mode="json") if self.top_category else None,
        }


def period_summary(
    transactions: Sequence[Transaction],
    period: StatsPeriod,
    categories: Sequence[Category],
    now: datetime | None = None,
) -> PeriodSummary:
    window = stats_window(period, now)
    expenses = ledger.expenses_in(transactions, window)
    breakdown = category_totals(transactions, period, categories, now)
    summary = PeriodSummary(
        period=period,
        window=window,
        total_spent=ledger.total(expenses),
        transaction_count=len(expenses),
        top_category=breakdown[0].category if breakdown else None,
    )
    logger.debug(
        "[STATS] %s summary: %d expenses totalling %.2f",
        period.value,
        summary.transaction_count,
        summary.total_spent,
    )
    return summary


@dataclass(frozen=True)
class MonthOverview:
    period: Period
    monthly_income: float
    monthly_expenses: float
    total_balance: float

    def to_dict(self) -> dict[str, object]:
        return {
            "period_key": self.period.key,
            "monthly_income": self.monthly_income,
            "monthly_expenses": self.monthly_expenses,
            "total_balance": self.total_balance,
        }


def month_overview(transactions: Sequence[Transaction], now: datetime | None = None) -> MonthOverview:
    """Home screen figures: this month's income and expenses, all-time balance."""
    month = Period.month_of(resolve_now(now))
    this_month = ledger.select(transactions, ledger.in_period(month))
    return MonthOverview(
        period=month,
        monthly_income=ledger.total(ledger.select(this_month, ledger.is_income)),
        monthly_expenses=ledger.total(ledger.select(this_month, ledger.is_expense)),
        total_balance=ledger.balance(transactions),
    )
