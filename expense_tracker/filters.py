from datetime import date
from typing import Callable

from expense_tracker.domain import Category, Period, Transaction, TransactionType

Predicate = Callable[[Transaction], bool]


def by_owner(owner_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.owner_id == owner_id

    return _filter


def by_category(category: Category) -> Predicate:
    category = Category.parse(category)

    def _filter(t: Transaction) -> bool:
        return t.category is category

    return _filter


def by_type(tx_type: TransactionType) -> Predicate:
    tx_type = TransactionType(tx_type)

    def _filter(t: Transaction) -> bool:
        return t.type is tx_type

    return _filter


def by_period(period: Period) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return period.contains(t.date)

    return _filter


def by_month(month: int, year: int) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.date.month == month and t.date.year == year

    return _filter


def by_date_range(start: date, end: date) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return start <= t.date <= end

    return _filter


def by_title(text: str) -> Predicate:
    needle = text.lower()

    def _filter(t: Transaction) -> bool:
        return needle in t.title.lower()

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter
