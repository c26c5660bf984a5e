from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

PERIOD_KEY_FORMAT = "%Y-%m"

_PERIOD_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")


def to_local_naive(value: datetime) -> datetime:
    """Calendar buckets are local; aware datetimes are converted to local wall time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def resolve_now(now: datetime | None = None) -> datetime:
    return datetime.now() if now is None else to_local_naive(now)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), datetime.min.time())


def start_of_month(value: datetime | date) -> datetime:
    return datetime(value.year, value.month, 1)


def add_months(value: datetime, months: int) -> datetime:
    """Shift the first day of ``value``'s month by ``months`` calendar months."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    return datetime(year, month + 1, 1)


def period_key(value: datetime | date) -> str:
    return start_of_month(value).strftime(PERIOD_KEY_FORMAT)


def parse_period_key(key: str) -> datetime:
    match = _PERIOD_KEY_RE.match(key or "")
    if not match:
        raise ValueError(f"Invalid period key '{key}', expected yyyy-MM.")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in period key '{key}'.")
    return datetime(year, month, 1)


def is_period_key(key: object) -> bool:
    if not isinstance(key, str):
        return False
    try:
        parse_period_key(key)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class Period:
    """Half-open interval ``[start, end)``."""

    start: datetime
    end: datetime

    def contains(self, value: datetime) -> bool:
        return self.start <= value < self.end

    @property
    def key(self) -> str:
        return period_key(self.start)

    @classmethod
    def month_of(cls, value: datetime) -> Period:
        start = start_of_month(value)
        return cls(start=start, end=add_months(start, 1))

    @classmethod
    def for_key(cls, key: str) -> Period:
        return cls.month_of(parse_period_key(key))

    @classmethod
    def day_of(cls, value: datetime) -> Period:
        start = start_of_day(value)
        return cls(start=start, end=start + timedelta(days=1))

    @classmethod
    def trailing_days(cls, now: datetime, days: int) -> Period:
        """The last ``days`` calendar days, today included."""
        end = start_of_day(now) + timedelta(days=1)
        return cls(start=end - timedelta(days=days), end=end)

    @classmethod
    def trailing_months(cls, now: datetime, months: int) -> Period:
        """The last ``months`` calendar months, the current one included."""
        end = add_months(start_of_month(now), 1)
        return cls(start=add_months(end, -months), end=end)
