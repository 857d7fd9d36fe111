from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.domain import Category, Priority
from expense_tracker.errors import ValidationError
from expense_tracker.services import BudgetService, LedgerService, ReportService
from expense_tracker.storage import JsonStorage


def make_services(tmp_path):
    storage = JsonStorage(tmp_path)
    return LedgerService(storage), BudgetService(storage), ReportService(storage)


def test_add_transaction_validates_and_persists(tmp_path):
    ledger, _, _ = make_services(tmp_path)
    tx = ledger.add_transaction("u1", "Groceries", "450.75", date(2024, 3, 4), "expense", "Food")
    assert ledger.transactions("u1") == (tx,)

    with pytest.raises(ValidationError) as exc:
        ledger.add_transaction("u1", "Groceries", 0, date(2024, 3, 4), "expense", "Food")
    assert exc.value.details["error"] == "invalid_amount"

    with pytest.raises(ValidationError) as exc:
        ledger.add_transaction("u1", "   ", 10, date(2024, 3, 4), "expense", "Food")
    assert exc.value.details["error"] == "missing_title"
    assert len(ledger.transactions("u1")) == 1


def test_edit_and_delete_transaction(tmp_path):
    ledger, _, _ = make_services(tmp_path)
    tx = ledger.add_transaction("u1", "Taxi", 300, date(2024, 3, 4), "expense", "Travel")
    edited = ledger.edit_transaction(replace(tx, amount=Decimal("350")))
    assert ledger.transactions("u1")[0].amount == 350
    ledger.delete_transaction(edited.id)
    assert ledger.transactions("u1") == ()


def test_budget_statuses_for_month(tmp_path):
    ledger, budgets, _ = make_services(tmp_path)
    ledger.add_transaction("u1", "Lunch", 500, date(2024, 3, 5), "expense", "Food")
    ledger.add_transaction("u1", "Dinner", 300, date(2024, 3, 20), "expense", "Food")
    budgets.set_budget("u1", "Food", 1000, 3, 2024)

    [status] = budgets.statuses("u1", date(2024, 3, 25))
    assert status.category is Category.FOOD
    assert status.is_near_budget is True
    assert budgets.statuses("u1", date(2024, 4, 1)) == []


def test_set_budget_rejects_bad_limit(tmp_path):
    _, budgets, _ = make_services(tmp_path)
    with pytest.raises(ValidationError) as exc:
        budgets.set_budget("u1", "Food", 0, 3, 2024)
    assert exc.value.details["error"] == "invalid_limit"
    assert budgets.budgets("u1", 3, 2024) == ()


def test_remove_budget(tmp_path):
    _, budgets, _ = make_services(tmp_path)
    budgets.set_budget("u1", Category.BILLS, 2000, 3, 2024)
    budgets.remove_budget("u1", "Bills", 3, 2024)
    assert budgets.budgets("u1", 3, 2024) == ()


def test_reports_are_owner_scoped(tmp_path):
    ledger, _, reports = make_services(tmp_path)
    ledger.add_transaction("u1", "Salary", 2000, date(2024, 3, 1), "income", "Work")
    ledger.add_transaction("u2", "Salary", 7000, date(2024, 3, 1), "income", "Work")

    monthly = reports.report("u1", "monthly", date(2024, 3, 15))
    assert monthly.total_income == 2000

    standard = reports.standard_reports("u1", date(2024, 3, 15))
    assert list(standard) == ["weekly", "monthly", "yearly"]
    assert standard["yearly"].total_income == 2000
    assert standard["weekly"].is_empty

    custom = reports.custom_report("u1", date(2024, 3, 1), date(2024, 3, 1))
    assert len(custom.transactions) == 1


def test_todo_lifecycle(tmp_path):
    ledger, _, _ = make_services(tmp_path)
    todo = ledger.add_todo("u1", "Pay rent", priority="high", amount=15000, due_date=date(2024, 3, 5))
    assert ledger.todos("u1") == (todo,)

    updated = ledger.update_todo("u1", todo.id, description="Before the 5th", priority=Priority.LOW)
    assert updated.description == "Before the 5th"
    assert updated.priority is Priority.LOW
    assert ledger.update_todo("u1", "missing", title="x") is None
    assert ledger.update_todo("u2", todo.id, title="x") is None

    with pytest.raises(ValidationError):
        ledger.update_todo("u1", todo.id, title="")

    toggled = ledger.toggle_todo("u1", todo.id)
    assert toggled.completed is True
    assert ledger.todos("u1")[0].completed is True

    assert ledger.delete_todo(todo.id) is True
    assert ledger.todos("u1") == ()


def test_add_todo_rejects_blank_title(tmp_path):
    ledger, _, _ = make_services(tmp_path)
    with pytest.raises(ValidationError):
        ledger.add_todo("u1", "  ")
    assert ledger.todos("u1") == ()


def test_unknown_category_is_a_validation_error(tmp_path):
    ledger, budgets, _ = make_services(tmp_path)
    with pytest.raises(ValidationError) as exc:
        ledger.add_transaction("u1", "Bitcoin", 100, date(2024, 3, 4), "expense", "Crypto")
    assert exc.value.details["error"] == "category_not_found"

    with pytest.raises(ValidationError) as exc:
        budgets.set_budget("u1", "Crypto", 100, 3, 2024)
    assert exc.value.details["error"] == "category_not_found"
    assert ledger.transactions("u1") == ()


def test_category_names_are_case_insensitive(tmp_path):
    ledger, budgets, _ = make_services(tmp_path)
    tx = ledger.add_transaction("u1", "Bus pass", 600, date(2024, 3, 4), "expense", "travel")
    assert tx.category is Category.TRAVEL

    budget = budgets.set_budget("u1", " FOOD ", 1000, 3, 2024)
    assert budget.category is Category.FOOD
    budgets.remove_budget("u1", "food", 3, 2024)
    assert budgets.budgets("u1", 3, 2024) == ()
