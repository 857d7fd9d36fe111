"""Storage port and a JSON-file implementation.

The engine never touches storage; services load owner-scoped collections
through a ``StoragePort`` and hand plain tuples to the pure functions.
Each collection lives in its own JSON file. Missing or corrupt files are
treated as empty collections.
"""

import json
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Tuple, TypeVar

from expense_tracker import transforms
from expense_tracker.domain import Category, CategoryBudget, FinancialTodo, Transaction
from expense_tracker.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

TRANSACTIONS_FILE = "transactions.json"
BUDGETS_FILE = "budgets.json"
TODOS_FILE = "todos.json"


class StoragePort(Protocol):
    def load_transactions(self, owner_id: str) -> Tuple[Transaction, ...]: ...

    def save_transaction(self, transaction: Transaction) -> None: ...

    def delete_transaction(self, tx_id: str) -> None: ...

    def load_budgets(
        self, owner_id: str, month: Optional[int] = None, year: Optional[int] = None
    ) -> Tuple[CategoryBudget, ...]: ...

    def set_budget(self, budget: CategoryBudget) -> None: ...

    def remove_budget(self, owner_id: str, category: Category, month: int, year: int) -> None: ...

    def load_todos(self, owner_id: str) -> Tuple[FinancialTodo, ...]: ...

    def save_todo(self, todo: FinancialTodo) -> None: ...

    def delete_todo(self, todo_id: str) -> bool: ...


class JsonStorage:
    """Synchronous, single-writer, last-write-wins JSON persistence."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, name: str) -> Path:
        return self.data_dir / name

    def _read(self, name: str, parse: Callable[[dict], T]) -> Tuple[T, ...]:
        target = self._path(name)
        if not target.exists():
            return ()
        try:
            with target.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (ValueError, OSError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            logger.warning("could not read %s, treating it as empty: %s", target, e)
            return ()
        if not isinstance(data, list):
            logger.warning("%s does not hold a list, treating it as empty", target)
            return ()

        items: List[T] = []
        for raw in data:
            if not isinstance(raw, dict):
                logger.warning("skipping non-object record in %s: %r", target, raw)
                continue
            try:
                items.append(parse(raw))
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.warning("skipping unreadable record in %s: %s", target, e)
        return tuple(items)

    def _write(self, name: str, items) -> None:
        target = self._path(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        scratch = target.with_name(target.name + ".tmp")
        try:
            with scratch.open("w", encoding="utf-8") as handle:
                json.dump([i.to_dict() for i in items], handle, indent=2, ensure_ascii=False)
            scratch.replace(target)
        except BaseException:
            scratch.unlink(missing_ok=True)
            raise

    # transactions

    def all_transactions(self) -> Tuple[Transaction, ...]:
        return self._read(TRANSACTIONS_FILE, Transaction.from_dict)

    def load_transactions(self, owner_id: str) -> Tuple[Transaction, ...]:
        return transforms.transactions_for_owner(self.all_transactions(), owner_id)

    def save_transaction(self, transaction: Transaction) -> None:
        self._write(
            TRANSACTIONS_FILE, transforms.upsert_transaction(self.all_transactions(), transaction)
        )

    def delete_transaction(self, tx_id: str) -> None:
        self._write(
            TRANSACTIONS_FILE, transforms.delete_transaction(self.all_transactions(), tx_id)
        )

    # budgets

    def all_budgets(self) -> Tuple[CategoryBudget, ...]:
        return self._read(BUDGETS_FILE, CategoryBudget.from_dict)

    def load_budgets(
        self, owner_id: str, month: Optional[int] = None, year: Optional[int] = None
    ) -> Tuple[CategoryBudget, ...]:
        return transforms.budgets_for(self.all_budgets(), owner_id, month, year)

    def set_budget(self, budget: CategoryBudget) -> None:
        self._write(BUDGETS_FILE, transforms.upsert_budget(self.all_budgets(), budget))

    def remove_budget(self, owner_id: str, category: Category, month: int, year: int) -> None:
        self._write(
            BUDGETS_FILE,
            transforms.remove_budget(self.all_budgets(), owner_id, category, month, year),
        )

    # todos

    def all_todos(self) -> Tuple[FinancialTodo, ...]:
        return self._read(TODOS_FILE, FinancialTodo.from_dict)

    def load_todos(self, owner_id: str) -> Tuple[FinancialTodo, ...]:
        return transforms.todos_for_owner(self.all_todos(), owner_id)

    def save_todo(self, todo: FinancialTodo) -> None:
        self._write(TODOS_FILE, transforms.upsert_todo(self.all_todos(), todo))

    def delete_todo(self, todo_id: str) -> bool:
        remaining, removed = transforms.delete_todo(self.all_todos(), todo_id)
        if removed:
            self._write(TODOS_FILE, remaining)
        return removed
