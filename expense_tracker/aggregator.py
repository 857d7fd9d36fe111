"""Totals and breakdowns over a transaction log.

Amounts are ``Decimal`` so sums do not depend on the order transactions
arrive in. Breakdown keys are ordered by category enum order and by date,
never by input order, so two calls over the same set compare equal.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from expense_tracker.domain import ZERO, BucketTotals, Category, Transaction
from expense_tracker.filters import Predicate, by_date_range, by_month
from expense_tracker.periods import weekday_abbr

BucketLabel = Callable[[date], str]


@dataclass(frozen=True)
class Summary:
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO


@dataclass(frozen=True)
class Aggregate:
    transactions: Tuple[Transaction, ...]
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    category_breakdown: Dict[Category, Decimal] = field(default_factory=dict)
    bucket_breakdown: Dict[str, BucketTotals] = field(default_factory=dict)


def iter_transactions(
    trans: Iterable[Transaction], pred: Predicate
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def summarize(trans: Iterable[Transaction]) -> Summary:
    income = ZERO
    expense = ZERO
    for t in trans:
        if t.is_income:
            income += t.amount
        else:
            expense += t.amount
    return Summary(income, expense, income - expense)


def category_breakdown(trans: Iterable[Transaction]) -> Dict[Category, Decimal]:
    """Expense totals per category. Income is not broken down."""
    totals: Dict[Category, Decimal] = defaultdict(lambda: ZERO)
    for t in trans:
        if t.is_expense:
            totals[t.category] += t.amount
    return {c: totals[c] for c in Category if c in totals}


def bucket_breakdown(
    trans: Iterable[Transaction], label: BucketLabel
) -> Dict[str, BucketTotals]:
    income: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    expense: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    first_seen: Dict[str, date] = {}

    for t in trans:
        key = label(t.date)
        if key not in first_seen or t.date < first_seen[key]:
            first_seen[key] = t.date
        if t.is_income:
            income[key] += t.amount
        else:
            expense[key] += t.amount

    ordered = sorted(first_seen, key=lambda k: (first_seen[k], k))
    return {k: BucketTotals(income=income[k], expense=expense[k]) for k in ordered}


def aggregate(
    trans: Iterable[Transaction],
    pred: Predicate,
    bucket_label: Optional[BucketLabel] = None,
) -> Aggregate:
    selected = tuple(iter_transactions(trans, pred))
    totals = summarize(selected)
    buckets = bucket_breakdown(selected, bucket_label) if bucket_label else {}
    return Aggregate(
        transactions=selected,
        total_income=totals.total_income,
        total_expense=totals.total_expense,
        balance=totals.balance,
        category_breakdown=category_breakdown(selected),
        bucket_breakdown=buckets,
    )


def monthly_summary(trans: Iterable[Transaction], month: int, year: int) -> Summary:
    return summarize(iter_transactions(trans, by_month(month, year)))


def category_spending(
    trans: Iterable[Transaction], month: int, year: int
) -> Dict[Category, Decimal]:
    return category_breakdown(iter_transactions(trans, by_month(month, year)))


def top_categories(trans: Iterable[Transaction], k: int) -> List[Tuple[Category, Decimal]]:
    ordered = sorted(
        category_breakdown(trans).items(),
        key=lambda item: item[1],
        reverse=True,
    )
    return ordered[: max(0, k)]


def daily_series(
    trans: Iterable[Transaction], today: date, days: int = 7
) -> List[Tuple[str, BucketTotals]]:
    """Income/expense per day for the last `days` days ending at `today`."""
    first = today - timedelta(days=days - 1)
    by_day = bucket_breakdown(
        iter_transactions(trans, by_date_range(first, today)),
        lambda d: d.isoformat(),
    )
    series = []
    for offset in range(days):
        day = first + timedelta(days=offset)
        series.append((weekday_abbr(day), by_day.get(day.isoformat(), BucketTotals())))
    return series
