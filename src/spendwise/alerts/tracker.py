from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from datetime import datetime

from spendwise.alerts.state import AlertState, AlertStateStore
from spendwise.domain.money import format_currency
from spendwise.domain.periods import Period, add_months, period_key, resolve_now
from spendwise.logger import get_logger
from spendwise.models import AlertRequest, Category, Transaction
from spendwise.services.budgets import BudgetEvaluator

logger = get_logger(__name__)

ALERT_THRESHOLDS: tuple[int, ...] = (80, 90, 100)


class ThresholdAlertTracker:
    """Decides which budget thresholds to alert on, at most once per month.

    The alerted thresholds live in ``store`` so restarts within the same
    month do not alert again. ``evaluate`` is serialized with a lock because
    it reads, decides and writes the whole state in one go.
    """

    def __init__(
        self,
        store: AlertStateStore,
        currency_code: str = "USD",
        thresholds: Iterable[int] = ALERT_THRESHOLDS,
        retention_months: int = 2,
    ) -> None:
        chosen = tuple(sorted(set(thresholds)))
        if not chosen or any(t not in ALERT_THRESHOLDS for t in chosen):
            raise ValueError(
                f"thresholds must be a non-empty subset of {ALERT_THRESHOLDS}, got {chosen}"
            )
        self.store = store
        self.currency_code = currency_code
        self.thresholds = chosen
        self.retention_months = max(1, retention_months)
        self._lock = threading.Lock()

    def _load(self) -> AlertState:
        try:
            raw = self.store.read_all()
        except Exception as exc:
            logger.warning("[ALERTS] Alert state unavailable (%s); treating as empty.", exc)
            return AlertState()
        return AlertState.from_raw(raw)

    def _save(self, state: AlertState, now: datetime) -> None:
        oldest_key = period_key(add_months(now, -(self.retention_months - 1)))
        dropped = state.prune(oldest_key)
        if dropped:
            logger.debug("[ALERTS] Dropped stale alert periods: %s", ", ".join(dropped))
        self.store.write_all(state.to_raw())

    def evaluate(
        self,
        categories: Sequence[Category],
        transactions: Sequence[Transaction],
        now: datetime | None = None,
    ) -> list[AlertRequest]:
        current = resolve_now(now)
        key = period_key(current)
        month = Period.month_of(current)
        evaluator = BudgetEvaluator(transactions)
        requests: list[AlertRequest] = []

        with self._lock:
            state = self._load()
            for category in categories:
                if category.is_income or not category.has_budget:
                    continue

                progress = evaluator.progress(category, month)
                for threshold in self.thresholds:
                    if progress.percent_used < threshold:
                        break
                    if state.has_alerted(key, category.id, threshold):
                        continue
                    state.mark(key, category.id, threshold)
                    requests.append(self._build_request(category, threshold, progress.spent, key))
                    logger.info(
                        "[ALERTS] %s crossed %d%% of budget in %s (%d%% used).",
                        category.name,
                        threshold,
                        key,
                        progress.percent_used,
                    )

            if requests:
                self._save(state, current)

        return requests

    def _build_request(
        self,
        category: Category,
        threshold: int,
        spent_amount: float,
        key: str,
    ) -> AlertRequest:
        return AlertRequest(
            category_id=category.id,
            category_name=category.name,
            threshold_percent=threshold,
            spent_amount=spent_amount,
            budget_amount=category.budget,
            amount_spent_formatted=format_currency(spent_amount, self.currency_code),
            budget_amount_formatted=format_currency(category.budget, self.currency_code),
            period_key=key,
        )

    def reset_monthly_alerts(self) -> None:
        with self._lock:
            self.store.write_all(AlertState().to_raw())
        logger.info("[ALERTS] Alert state cleared.")

    def alerted_thresholds(self, category_id: str, now: datetime | None = None) -> set[int]:
        with self._lock:
            state = self._load()
        return state.alerted(period_key(resolve_now(now)), category_id)

    def snapshot(self) -> dict[str, dict[str, list[int]]]:
        with self._lock:
            return self._load().to_raw()
