from datetime import date
from decimal import Decimal

from expense_tracker.aggregator import (
    aggregate,
    category_spending,
    daily_series,
    iter_transactions,
    monthly_summary,
    summarize,
    top_categories,
)
from expense_tracker.domain import BucketTotals, Category, Transaction, TransactionType

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def make_tx(id, amount, on, tx_type=EXPENSE, category=Category.FOOD, owner="u1"):
    return Transaction(id, f"tx {id}", Decimal(str(amount)), on, tx_type, category, owner)


def make_sample():
    return (
        make_tx("t1", 300, date(2025, 1, 1)),
        make_tx("t2", 200, date(2025, 1, 2), category=Category.TRAVEL),
        make_tx("t3", 5000, date(2025, 1, 3), INCOME, Category.WORK),
        make_tx("t4", 700, date(2025, 1, 4)),
        make_tx("t5", 100, date(2025, 2, 5), category=Category.TRAVEL),
    )


def test_summarize_totals_and_balance():
    totals = summarize(make_sample())
    assert totals.total_income == 5000
    assert totals.total_expense == 1300
    assert totals.balance == 3700


def test_balance_may_be_negative():
    totals = summarize((make_tx("t1", 50, date(2025, 1, 1)),))
    assert totals.balance == -50


def test_aggregate_filters_by_predicate():
    agg = aggregate(make_sample(), lambda t: t.date.month == 1)
    assert [t.id for t in agg.transactions] == ["t1", "t2", "t3", "t4"]
    assert agg.total_expense == 1200
    assert agg.total_income == 5000


def test_category_breakdown_is_expense_only():
    agg = aggregate(make_sample(), lambda t: True)
    assert agg.category_breakdown == {Category.FOOD: 1000, Category.TRAVEL: 300}
    assert Category.WORK not in agg.category_breakdown
    assert sum(agg.category_breakdown.values()) == agg.total_expense


def test_bucket_breakdown_holds_both_totals():
    agg = aggregate(make_sample(), lambda t: True, lambda d: d.strftime("%Y-%m"))
    assert agg.bucket_breakdown["2025-01"] == BucketTotals(income=Decimal(5000), expense=Decimal(1200))
    assert agg.bucket_breakdown["2025-02"] == BucketTotals(income=Decimal(0), expense=Decimal(100))
    assert list(agg.bucket_breakdown) == ["2025-01", "2025-02"]


def test_aggregate_is_order_independent():
    sample = make_sample()
    label = lambda d: d.isoformat()
    forward = aggregate(sample, lambda t: True, label)
    backward = aggregate(tuple(reversed(sample)), lambda t: True, label)

    assert forward.total_income == backward.total_income
    assert forward.total_expense == backward.total_expense
    assert list(forward.category_breakdown.items()) == list(backward.category_breakdown.items())
    assert list(forward.bucket_breakdown.items()) == list(backward.bucket_breakdown.items())


def test_fractional_amounts_sum_exactly():
    trans = (
        make_tx("a", "0.1", date(2025, 1, 1)),
        make_tx("b", "0.2", date(2025, 1, 1), category=Category.BILLS),
        make_tx("c", "0.3", date(2025, 1, 1), category=Category.HEALTH),
    )
    agg = aggregate(trans, lambda t: True)
    assert agg.total_expense == Decimal("0.6")
    assert sum(agg.category_breakdown.values()) == agg.total_expense


def test_empty_input_gives_zero_aggregate():
    agg = aggregate((), lambda t: True, lambda d: d.isoformat())
    assert agg.total_income == 0
    assert agg.total_expense == 0
    assert agg.balance == 0
    assert agg.category_breakdown == {}
    assert agg.bucket_breakdown == {}


def test_iter_transactions_is_lazy():
    calls = {"n": 0}

    def pred(t):
        calls["n"] += 1
        return t.is_expense

    gen = iter_transactions(make_sample(), pred)
    first = next(gen)
    assert first.id == "t1"
    assert calls["n"] == 1


def test_monthly_summary_and_category_spending():
    sample = make_sample()
    feb = monthly_summary(sample, 2, 2025)
    assert feb.total_expense == 100 and feb.total_income == 0
    assert category_spending(sample, 1, 2025) == {Category.FOOD: 1000, Category.TRAVEL: 200}


def test_top_categories_orders_by_total():
    assert top_categories(make_sample(), 1) == [(Category.FOOD, Decimal(1000))]
    assert len(top_categories(make_sample(), 10)) == 2


def test_daily_series_covers_every_day():
    trans = (
        make_tx("t1", 40, date(2024, 3, 13)),
        make_tx("t2", 900, date(2024, 3, 10), INCOME, Category.WORK),
        make_tx("t3", 15, date(2024, 3, 1)),
    )
    series = daily_series(trans, date(2024, 3, 13), days=7)
    assert [label for label, _ in series] == ["Thu", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed"]
    assert series[3][1] == BucketTotals(income=Decimal(900), expense=Decimal(0))
    assert series[-1][1].expense == 40
    assert sum(row.expense for _, row in series) == 40
