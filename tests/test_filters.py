from datetime import date
from decimal import Decimal

from expense_tracker.domain import Category, Transaction, TransactionType
from expense_tracker.filters import (
    all_of,
    by_category,
    by_date_range,
    by_month,
    by_owner,
    by_title,
    by_type,
)

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def make_tx(id, title, on, tx_type=EXPENSE, category=Category.FOOD, owner="u1"):
    return Transaction(id, title, Decimal("10"), on, tx_type, category, owner)


def make_sample():
    return (
        make_tx("t1", "Weekly groceries", date(2024, 3, 1)),
        make_tx("t2", "Salary", date(2024, 3, 1), INCOME, Category.WORK),
        make_tx("t3", "Flight home", date(2024, 3, 31), category=Category.TRAVEL),
        make_tx("t4", "Groceries", date(2024, 4, 1), owner="u2"),
    )


def ids(pred):
    return [t.id for t in make_sample() if pred(t)]


def test_single_predicates():
    assert ids(by_owner("u2")) == ["t4"]
    assert ids(by_type("income")) == ["t2"]
    assert ids(by_category("Travel")) == ["t3"]
    assert ids(by_month(3, 2024)) == ["t1", "t2", "t3"]
    assert ids(by_title("GROCER")) == ["t1", "t4"]


def test_date_range_is_inclusive():
    assert ids(by_date_range(date(2024, 3, 1), date(2024, 3, 31))) == ["t1", "t2", "t3"]
    assert ids(by_date_range(date(2024, 4, 1), date(2024, 3, 1))) == []


def test_all_of_combines_predicates():
    pred = all_of(by_owner("u1"), by_type(EXPENSE), by_month(3, 2024))
    assert ids(pred) == ["t1", "t3"]
    assert ids(all_of()) == ["t1", "t2", "t3", "t4"]
