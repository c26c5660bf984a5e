"""Filtering and summing over transaction snapshots.

Everything here is pure: inputs are never mutated and results keep the
relative order of the input.
"""
import math
from collections.abc import Callable, Collection, Iterable
from datetime import date

from spendwise.domain.periods import Period
from spendwise.models import Transaction

Predicate = Callable[[Transaction], bool]


def select(transactions: Iterable[Transaction], predicate: Predicate) -> list[Transaction]:
    return [t for t in transactions if predicate(t)]


def _fsum(values: list[float]) -> float:
    try:
        return math.fsum(values)
    except OverflowError:
        # fsum refuses to overflow; plain addition saturates to inf
        return sum(values)


def total(transactions: Iterable[Transaction]) -> float:
    return _fsum([t.amount for t in transactions])


def balance(transactions: Iterable[Transaction]) -> float:
    """Income minus expenses."""
    return _fsum([t.amount if t.is_income else -t.amount for t in transactions])


def is_expense(transaction: Transaction) -> bool:
    return not transaction.is_income


def is_income(transaction: Transaction) -> bool:
    return transaction.is_income


def in_period(period: Period) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return period.contains(t.date)

    return _filter


def on_day(day: date) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.date.date() == day

    return _filter


def in_category(category_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category_id is not None and t.category_id == category_id

    return _filter


def uncategorized(known_ids: Collection[str]) -> Predicate:
    """Transactions without a category or pointing at one that no longer exists."""
    def _filter(t: Transaction) -> bool:
        return t.category_id is None or t.category_id not in known_ids

    return _filter


def all_of(*predicates: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(predicate(t) for predicate in predicates)

    return _filter


def expenses_in(transactions: Iterable[Transaction], period: Period) -> list[Transaction]:
    return select(transactions, all_of(is_expense, in_period(period)))
