from datetime import date
from typing import Dict, List, Optional, Tuple

from expense_tracker import transforms
from expense_tracker.budgets import evaluate_budgets
from expense_tracker.domain import (
    BudgetStatus,
    CategoryBudget,
    FinancialTodo,
    Granularity,
    ReportData,
    Transaction,
    to_date,
    to_decimal,
)
from expense_tracker.errors import ValidationError
from expense_tracker.functional import (
    Either,
    require_category,
    validate_budget,
    validate_todo,
    validate_transaction,
)
from expense_tracker.reports import build_report, custom_report
from expense_tracker.storage import StoragePort
from expense_tracker.utils import get_logger

logger = get_logger(__name__)


def _unwrap(result: Either):
    if result.is_left():
        raise ValidationError(result.get_error())
    return result.get_or_else(None)


class LedgerService:
    """Facade for transaction and todo bookkeeping on top of a storage port."""

    def __init__(self, storage: StoragePort):
        self.storage = storage

    def transactions(self, owner_id: str) -> Tuple[Transaction, ...]:
        return self.storage.load_transactions(owner_id)

    def add_transaction(self, owner_id: str, title: str, amount, on, tx_type, category) -> Transaction:
        tx = _unwrap(require_category(category).bind(
            lambda cat: validate_transaction(
                transforms.new_transaction(owner_id, title, amount, on, tx_type, cat)
            )
        ))
        self.storage.save_transaction(tx)
        logger.info("added %s %s for %s", tx.type.value, tx.id, owner_id)
        return tx

    def edit_transaction(self, tx: Transaction) -> Transaction:
        tx = _unwrap(validate_transaction(tx))
        self.storage.save_transaction(tx)
        logger.info("updated transaction %s", tx.id)
        return tx

    def delete_transaction(self, tx_id: str) -> None:
        self.storage.delete_transaction(tx_id)
        logger.info("deleted transaction %s", tx_id)

    def todos(self, owner_id: str) -> Tuple[FinancialTodo, ...]:
        return self.storage.load_todos(owner_id)

    def add_todo(self, owner_id: str, title: str, **fields) -> FinancialTodo:
        todo = _unwrap(validate_todo(transforms.new_todo(owner_id, title, **fields)))
        self.storage.save_todo(todo)
        logger.info("added todo %s for %s", todo.id, owner_id)
        return todo

    def update_todo(self, owner_id: str, todo_id: str, **changes) -> Optional[FinancialTodo]:
        _, updated = transforms.update_todo(self.todos(owner_id), todo_id, **changes)
        if updated is None:
            return None
        updated = _unwrap(validate_todo(updated))
        self.storage.save_todo(updated)
        return updated

    def toggle_todo(self, owner_id: str, todo_id: str) -> Optional[FinancialTodo]:
        _, toggled = transforms.toggle_todo(self.todos(owner_id), todo_id)
        if toggled is not None:
            self.storage.save_todo(toggled)
        return toggled

    def delete_todo(self, todo_id: str) -> bool:
        return self.storage.delete_todo(todo_id)


class BudgetService:
    """Facade for budget writes and status evaluation."""

    def __init__(self, storage: StoragePort):
        self.storage = storage

    def budgets(self, owner_id: str, month: int, year: int) -> Tuple[CategoryBudget, ...]:
        return self.storage.load_budgets(owner_id, month, year)

    def set_budget(self, owner_id: str, category, limit, month: int, year: int) -> CategoryBudget:
        budget = _unwrap(require_category(category).bind(
            lambda cat: validate_budget(CategoryBudget(
                category=cat,
                limit=to_decimal(limit),
                owner_id=owner_id,
                month=int(month),
                year=int(year),
            ))
        ))
        self.storage.set_budget(budget)
        logger.info("budget %s %02d/%d set to %s for %s",
                    budget.category.value, budget.month, budget.year, budget.limit, owner_id)
        return budget

    def remove_budget(self, owner_id: str, category, month: int, year: int) -> None:
        self.storage.remove_budget(owner_id, _unwrap(require_category(category)), month, year)
        logger.info("budget %s %02d/%d removed for %s", category, month, year, owner_id)

    def statuses(self, owner_id: str, reference_date=None) -> List[BudgetStatus]:
        ref = to_date(reference_date) if reference_date is not None else date.today()
        return evaluate_budgets(
            owner_id,
            self.storage.load_transactions(owner_id),
            self.storage.load_budgets(owner_id, ref.month, ref.year),
            ref,
        )


class ReportService:
    """Facade for generating an owner's reports."""

    def __init__(self, storage: StoragePort):
        self.storage = storage

    def report(self, owner_id: str, granularity, reference_date=None) -> ReportData:
        return build_report(granularity, self.storage.load_transactions(owner_id), reference_date)

    def custom_report(self, owner_id: str, start_date, end_date) -> ReportData:
        return custom_report(self.storage.load_transactions(owner_id), start_date, end_date)

    def standard_reports(self, owner_id: str, reference_date=None) -> Dict[str, ReportData]:
        transactions = self.storage.load_transactions(owner_id)
        return {
            g.value: build_report(g, transactions, reference_date)
            for g in (Granularity.WEEKLY, Granularity.MONTHLY, Granularity.YEARLY)
        }
