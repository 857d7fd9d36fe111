from datetime import date, datetime
from decimal import Decimal

import pytest

from expense_tracker.domain import Category, CategoryBudget, FinancialTodo, Transaction, TransactionType
from expense_tracker.functional import (
    Left,
    Nothing,
    Right,
    Some,
    require_category,
    safe_category,
    validate_budget,
    validate_todo,
    validate_transaction,
)


def make_tx(title="Lunch", amount="250", category=Category.FOOD):
    return Transaction("t1", title, Decimal(amount), date(2024, 3, 1),
                       TransactionType.EXPENSE, category, "u1")


def test_maybe_basics():
    assert Some(5).map(lambda x: x * 2) == Some(10)
    assert Nothing().map(lambda x: x * 2) == Nothing()
    assert Some(1).get_or_else(0) == 1
    assert Nothing().get_or_else(0) == 0
    assert Nothing().is_none()


def test_either_basics():
    assert Right(2).bind(lambda x: Right(x + 1)) == Right(3)
    left = Left({"error": "boom"})
    assert left.bind(lambda x: Right(x + 1)) is left
    assert left.get_error() == {"error": "boom"}
    with pytest.raises(ValueError):
        Right(1).get_error()


def test_safe_category_is_case_insensitive():
    assert safe_category("food") == Some(Category.FOOD)
    assert safe_category(" Travel ") == Some(Category.TRAVEL)
    assert safe_category("Crypto").is_none()


def test_valid_transaction_passes():
    tx = make_tx()
    assert validate_transaction(tx) == Right(tx)


def test_transaction_errors():
    assert validate_transaction(make_tx(title="  ")).get_error()["error"] == "missing_title"
    assert validate_transaction(make_tx(amount="0")).get_error()["error"] == "invalid_amount"
    assert validate_transaction(make_tx(amount="-5")).get_error()["error"] == "invalid_amount"
    bad_category = validate_transaction(make_tx(category="Crypto"))
    assert bad_category.get_error()["error"] == "category_not_found"


def test_budget_errors():
    ok = CategoryBudget(Category.FOOD, Decimal("100"), "u1", 3, 2024)
    assert validate_budget(ok).is_right()

    zero = validate_budget(CategoryBudget(Category.FOOD, Decimal("0"), "u1", 3, 2024))
    assert zero.get_error()["error"] == "invalid_limit"
    month = validate_budget(CategoryBudget(Category.FOOD, Decimal("10"), "u1", 13, 2024))
    assert month.get_error()["error"] == "invalid_month"
    year = validate_budget(CategoryBudget(Category.FOOD, Decimal("10"), "u1", 3, 24))
    assert year.get_error()["error"] == "invalid_year"


def test_todo_errors():
    base = FinancialTodo("todo-1", "u1", "Pay rent", datetime(2024, 3, 1))
    assert validate_todo(base).is_right()
    no_title = FinancialTodo("todo-1", "u1", "", datetime(2024, 3, 1))
    assert validate_todo(no_title).get_error()["error"] == "missing_title"
    negative = FinancialTodo("todo-1", "u1", "Pay rent", datetime(2024, 3, 1), amount=Decimal("-1"))
    assert validate_todo(negative).get_error()["error"] == "invalid_amount"


def test_require_category():
    assert require_category("bills") == Right(Category.BILLS)
    assert require_category(Category.WORK) == Right(Category.WORK)
    missing = require_category("Crypto")
    assert missing.is_left()
    assert missing.get_error()["error"] == "category_not_found"
