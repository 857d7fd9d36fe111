"""Named period reports built from a transaction log.

Each builder resolves a period, keeps the transactions dated inside it
(both ends inclusive), aggregates them and attaches a readable label.
Weekly, monthly and custom reports bucket by day; yearly reports bucket
by month.
"""
from datetime import date
from typing import Iterable, Optional

from expense_tracker.aggregator import BucketLabel, aggregate
from expense_tracker.domain import Granularity, Period, ReportData, Transaction
from expense_tracker.filters import by_period
from expense_tracker.periods import (
    month_abbr,
    month_name,
    resolve_custom_period,
    resolve_period,
    weekday_abbr,
)
from expense_tracker.utils import get_logger

logger = get_logger(__name__)

TITLES = {
    Granularity.WEEKLY: "Weekly Report",
    Granularity.MONTHLY: "Monthly Report",
    Granularity.YEARLY: "Yearly Report",
    Granularity.CUSTOM: "Custom Date Range Report",
}


def short_date(d: date) -> str:
    return f"{d.day}/{d.month}/{d.year}"


def weekday_label(d: date) -> str:
    return f"{weekday_abbr(d)}, {d.day} {month_abbr(d.month)}"


def month_label(d: date) -> str:
    return f"{month_abbr(d.month)} {d.year % 100:02d}"


def range_label(period: Period) -> str:
    return f"{short_date(period.start.date())} - {short_date(period.end.date())}"


def _build(
    granularity: Granularity,
    transactions: Iterable[Transaction],
    period: Period,
    period_label: str,
    bucket_label: BucketLabel,
) -> ReportData:
    agg = aggregate(transactions, by_period(period), bucket_label)
    logger.debug(
        "%s %s: %d transactions", granularity.value, period_label, len(agg.transactions)
    )
    return ReportData(
        title=TITLES[granularity],
        period_label=period_label,
        granularity=granularity,
        period=period,
        total_income=agg.total_income,
        total_expense=agg.total_expense,
        balance=agg.balance,
        transactions=agg.transactions,
        category_breakdown=agg.category_breakdown,
        bucket_breakdown=agg.bucket_breakdown,
    )


def weekly_report(transactions: Iterable[Transaction], reference_date=None) -> ReportData:
    period = resolve_period(Granularity.WEEKLY, reference_date)
    return _build(Granularity.WEEKLY, transactions, period, range_label(period), weekday_label)


def monthly_report(transactions: Iterable[Transaction], reference_date=None) -> ReportData:
    period = resolve_period(Granularity.MONTHLY, reference_date)
    label = f"{month_name(period.start.month)} {period.start.year}"
    return _build(Granularity.MONTHLY, transactions, period, label, short_date)


def yearly_report(transactions: Iterable[Transaction], reference_date=None) -> ReportData:
    period = resolve_period(Granularity.YEARLY, reference_date)
    return _build(Granularity.YEARLY, transactions, period, str(period.start.year), month_label)


def custom_report(transactions: Iterable[Transaction], start_date, end_date) -> ReportData:
    """Report for an explicit range. An inverted range yields an empty report."""
    period = resolve_custom_period(start_date, end_date)
    return _build(Granularity.CUSTOM, transactions, period, range_label(period), short_date)


BUILDERS = {
    Granularity.WEEKLY: weekly_report,
    Granularity.MONTHLY: monthly_report,
    Granularity.YEARLY: yearly_report,
}


def build_report(
    granularity, transactions: Iterable[Transaction], reference_date: Optional[date] = None
) -> ReportData:
    granularity = Granularity(granularity)
    if granularity is Granularity.CUSTOM:
        raise ValueError("custom reports need explicit bounds; use custom_report")
    return BUILDERS[granularity](transactions, reference_date)
