from __future__ import annotations

import math
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_FLOOR, Decimal

from spendwise.domain import ledger
from spendwise.domain.periods import Period, resolve_now
from spendwise.models import BudgetProgress, Category, Transaction

# Reported when spending is too large to express as a percentage
PERCENT_CAP = sys.maxsize


def spent(category: Category, transactions: Iterable[Transaction], period: Period) -> float:
    return ledger.total(
        ledger.select(
            transactions,
            ledger.all_of(ledger.is_expense, ledger.in_period(period), ledger.in_category(category.id)),
        )
    )


def progress_ratio(spent_amount: float, budget: float) -> float:
    if budget <= 0:
        return 0.0
    return spent_amount / budget


def remaining_amount(spent_amount: float, budget: float) -> float:
    return max(0.0, budget - spent_amount)


def percent_used(spent_amount: float, budget: float) -> int:
    """Whole percent of the budget used, floored."""
    if budget <= 0:
        return 0
    if not math.isfinite(spent_amount):
        return PERCENT_CAP
    # repr() keeps 0.29 as 0.29 instead of 0.28999...
    ratio = Decimal(repr(spent_amount)) * 100 / Decimal(repr(budget))
    return int(ratio.to_integral_value(rounding=ROUND_FLOOR))


def evaluate_progress(
    category: Category,
    transactions: Iterable[Transaction],
    period: Period,
) -> BudgetProgress:
    spent_amount = spent(category, transactions, period)
    return BudgetProgress(
        category=category,
        spent=spent_amount,
        budget=category.budget,
        progress=progress_ratio(spent_amount, category.budget),
        remaining=remaining_amount(spent_amount, category.budget),
        percent_used=percent_used(spent_amount, category.budget),
    )


class BudgetEvaluator:
    """Progress lookups for one evaluation pass over a fixed snapshot.

    Results are memoized per (category, period) for the lifetime of the
    instance, so build a fresh evaluator whenever the transactions change.
    """

    def __init__(self, transactions: Sequence[Transaction]) -> None:
        self.transactions = tuple(transactions)
        self._cache: dict[tuple[str, float, Period], BudgetProgress] = {}

    def progress(self, category: Category, period: Period) -> BudgetProgress:
        key = (category.id, category.budget, period)
        cached = self._cache.get(key)
        if cached is None:
            cached = evaluate_progress(category, self.transactions, period)
            self._cache[key] = cached
        return cached

    def current_month(self, category: Category, now: datetime | None = None) -> BudgetProgress:
        return self.progress(category, Period.month_of(resolve_now(now)))


@dataclass
class BudgetOverview:
    period: Period
    total_budget: float
    total_spent: float
    categories: list[BudgetProgress] = field(default_factory=list)

    @property
    def overall_progress(self) -> float:
        return progress_ratio(self.total_spent, self.total_budget)

    @property
    def remaining(self) -> float:
        return remaining_amount(self.total_spent, self.total_budget)

    @property
    def over_budget(self) -> float:
        return max(0.0, self.total_spent - self.total_budget)

    def to_dict(self) -> dict[str, object]:
        return {
            "period_key": self.period.key,
            "total_budget": self.total_budget,
            "total_spent": self.total_spent,
            "overall_progress": self.overall_progress,
            "remaining": self.remaining,
            "over_budget": self.over_budget,
            "categories": [item.model_dump(mode="json") for item in self.categories],
        }


def budget_overview(
    categories: Iterable[Category],
    transactions: Sequence[Transaction],
    period: Period,
) -> BudgetOverview:
    """Monthly budget screen: every expense category plus the month's totals."""
    expense_categories = [c for c in categories if not c.is_income]
    evaluator = BudgetEvaluator(transactions)
    return BudgetOverview(
        period=period,
        total_budget=sum(c.budget for c in expense_categories),
        total_spent=ledger.total(ledger.expenses_in(transactions, period)),
        categories=[evaluator.progress(c, period) for c in expense_categories],
    )
