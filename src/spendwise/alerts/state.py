from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any

from spendwise.domain.periods import is_period_key
from spendwise.logger import get_logger

logger = get_logger(__name__)

STATE_NAMESPACE = "sentBudgetAlerts"

# period key -> category id -> thresholds already alerted
RawAlertState = dict[str, dict[str, list[int]]]


class AlertState:
    """Thresholds already alerted, keyed by (period key, category id)."""

    def __init__(self, periods: dict[str, dict[str, set[int]]] | None = None) -> None:
        self.periods: dict[str, dict[str, set[int]]] = periods or {}

    def alerted(self, period_key: str, category_id: str) -> set[int]:
        return set(self.periods.get(period_key, {}).get(category_id, set()))

    def has_alerted(self, period_key: str, category_id: str, threshold: int) -> bool:
        return threshold in self.periods.get(period_key, {}).get(category_id, set())

    def mark(self, period_key: str, category_id: str, threshold: int) -> None:
        self.periods.setdefault(period_key, {}).setdefault(category_id, set()).add(threshold)

    def clear(self) -> None:
        self.periods.clear()

    def prune(self, oldest_key: str) -> list[str]:
        """Drop periods older than ``oldest_key``; keys sort chronologically."""
        stale = [key for key in self.periods if key < oldest_key]
        for key in stale:
            del self.periods[key]
        return stale

    def to_raw(self) -> RawAlertState:
        return {
            key: {
                category_id: sorted(thresholds)
                for category_id, thresholds in sorted(categories.items())
                if thresholds
            }
            for key, categories in sorted(self.periods.items())
        }

    @classmethod
    def from_raw(cls, raw: Any) -> AlertState:
        """Build state from a stored document, skipping anything malformed."""
        state = cls()
        if not isinstance(raw, dict):
            if raw is not None:
                logger.warning("[STATE] Ignoring alert state of type %s.", type(raw).__name__)
            return state

        for key, categories in raw.items():
            if not is_period_key(key) or not isinstance(categories, dict):
                logger.warning("[STATE] Ignoring malformed alert period entry '%s'.", key)
                continue
            for category_id, thresholds in categories.items():
                if not isinstance(thresholds, list):
                    logger.warning(
                        "[STATE] Ignoring malformed thresholds for category %s in %s.",
                        category_id,
                        key,
                    )
                    continue
                for threshold in thresholds:
                    if isinstance(threshold, int) and not isinstance(threshold, bool):
                        state.mark(key, str(category_id), threshold)
        return state


class AlertStateStore(ABC):
    @abstractmethod
    def read_all(self) -> Any:
        """Return the stored state document, or None when nothing is stored."""
        pass

    @abstractmethod
    def write_all(self, state: RawAlertState) -> None:
        """Replace the stored state document."""
        pass


class InMemoryAlertStateStore(AlertStateStore):
    def __init__(self, initial: Any = None) -> None:
        self.data = initial
        self.writes = 0

    def read_all(self) -> Any:
        return json.loads(json.dumps(self.data)) if self.data is not None else None

    def write_all(self, state: RawAlertState) -> None:
        self.data = json.loads(json.dumps(state))
        self.writes += 1


class JsonFileAlertStateStore(AlertStateStore):
    def __init__(self, data_path: str = "alert_state.json") -> None:
        self.data_path = data_path

    def read_all(self) -> Any:
        if not os.path.exists(self.data_path):
            return None
        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("[STATE] Could not read %s (%s); starting empty.", self.data_path, exc)
            return None
        if not isinstance(document, dict):
            logger.warning("[STATE] Unexpected document in %s; starting empty.", self.data_path)
            return None
        return document.get(STATE_NAMESPACE)

    def write_all(self, state: RawAlertState) -> None:
        directory = os.path.dirname(os.path.abspath(self.data_path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".alert_state.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({STATE_NAMESPACE: state}, f, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.data_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
