from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
from uuid import uuid4

from expense_tracker.domain import (
    Category,
    CategoryBudget,
    FinancialTodo,
    Priority,
    Transaction,
    TransactionType,
    to_date,
    to_decimal,
)
from expense_tracker.filters import all_of, by_category, by_title

SORT_KEYS = ("date-desc", "date-asc", "amount-desc", "amount-asc")
PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


# transactions

def new_transaction(
    owner_id: str,
    title: str,
    amount,
    on,
    tx_type,
    category,
) -> Transaction:
    return Transaction(
        id=str(uuid4()),
        title=title.strip(),
        amount=to_decimal(amount),
        date=to_date(on),
        type=TransactionType(tx_type),
        category=Category.parse(category),
        owner_id=owner_id,
    )


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def update_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return tuple(t if old.id == t.id else old for old in trans)


def upsert_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    if any(old.id == t.id for old in trans):
        return update_transaction(trans, t)
    return add_transaction(trans, t)


def delete_transaction(
    trans: Tuple[Transaction, ...], tx_id: str
) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.id != tx_id, trans))


def transactions_for_owner(
    trans: Tuple[Transaction, ...], owner_id: str
) -> Tuple[Transaction, ...]:
    """The owner's transactions, newest first."""
    owned = (t for t in trans if t.owner_id == owner_id)
    return tuple(sorted(owned, key=lambda t: t.date, reverse=True))


def search_transactions(
    trans: Tuple[Transaction, ...], text: str = "", category: Optional[Category] = None
) -> Tuple[Transaction, ...]:
    preds = [by_title(text)]
    if category is not None:
        preds.append(by_category(category))
    return tuple(filter(all_of(*preds), trans))


def sort_transactions(
    trans: Tuple[Transaction, ...], sort_by: str = "date-desc"
) -> Tuple[Transaction, ...]:
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort option {sort_by!r}; expected one of {SORT_KEYS}")
    field_name, direction = sort_by.split("-")
    key = (lambda t: t.date) if field_name == "date" else (lambda t: t.amount)
    return tuple(sorted(trans, key=key, reverse=direction == "desc"))


# budgets

def upsert_budget(
    budgets: Tuple[CategoryBudget, ...], b: CategoryBudget
) -> Tuple[CategoryBudget, ...]:
    """Replace the budget with the same (owner, category, month, year) or append."""
    if any(old.key == b.key for old in budgets):
        return tuple(b if old.key == b.key else old for old in budgets)
    return budgets + (b,)


def remove_budget(
    budgets: Tuple[CategoryBudget, ...],
    owner_id: str,
    category: Category,
    month: int,
    year: int,
) -> Tuple[CategoryBudget, ...]:
    key = (owner_id, Category.parse(category), month, year)
    return tuple(b for b in budgets if b.key != key)


def budgets_for(
    budgets: Tuple[CategoryBudget, ...],
    owner_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> Tuple[CategoryBudget, ...]:
    return tuple(
        b for b in budgets
        if b.owner_id == owner_id
        and (month is None or b.month == month)
        and (year is None or b.year == year)
    )


# todos

def new_todo(
    owner_id: str,
    title: str,
    *,
    priority=Priority.MEDIUM,
    description: Optional[str] = None,
    amount=None,
    due_date=None,
    linked_transaction_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> FinancialTodo:
    return FinancialTodo(
        id=f"todo-{uuid4().hex}",
        owner_id=owner_id,
        title=title.strip(),
        created_at=now or datetime.now(),
        priority=Priority(priority),
        description=description or None,
        amount=None if amount is None else to_decimal(amount),
        due_date=None if due_date is None else to_date(due_date),
        linked_transaction_id=linked_transaction_id,
    )


def upsert_todo(
    todos: Tuple[FinancialTodo, ...], todo: FinancialTodo
) -> Tuple[FinancialTodo, ...]:
    if any(t.id == todo.id for t in todos):
        return tuple(todo if t.id == todo.id else t for t in todos)
    return todos + (todo,)


def update_todo(
    todos: Tuple[FinancialTodo, ...], todo_id: str, **changes
) -> Tuple[Tuple[FinancialTodo, ...], Optional[FinancialTodo]]:
    """Apply field changes to one todo. Returns the new tuple and the updated
    todo, or the unchanged tuple and None when the id is unknown. The id,
    owner and creation time cannot be changed."""
    for frozen_field in ("id", "owner_id", "created_at"):
        changes.pop(frozen_field, None)
    if changes.get("amount") is not None:
        changes["amount"] = to_decimal(changes["amount"])
    if changes.get("due_date") is not None:
        changes["due_date"] = to_date(changes["due_date"])
    if "priority" in changes:
        changes["priority"] = Priority(changes["priority"])

    updated = None
    result = []
    for todo in todos:
        if todo.id == todo_id:
            updated = replace(todo, **changes)
            result.append(updated)
        else:
            result.append(todo)
    if updated is None:
        return todos, None
    return tuple(result), updated


def toggle_todo(
    todos: Tuple[FinancialTodo, ...], todo_id: str
) -> Tuple[Tuple[FinancialTodo, ...], Optional[FinancialTodo]]:
    current = next((t for t in todos if t.id == todo_id), None)
    if current is None:
        return todos, None
    return update_todo(todos, todo_id, completed=not current.completed)


def delete_todo(
    todos: Tuple[FinancialTodo, ...], todo_id: str
) -> Tuple[Tuple[FinancialTodo, ...], bool]:
    remaining = tuple(t for t in todos if t.id != todo_id)
    return remaining, len(remaining) != len(todos)


def _todo_sort_key(todo: FinancialTodo):
    return (todo.completed, PRIORITY_ORDER[todo.priority])


def sort_todos(todos: Tuple[FinancialTodo, ...]) -> Tuple[FinancialTodo, ...]:
    """Incomplete first, then high to low priority. Within a group, todos
    with due dates come earliest-due first; the rest newest-created first."""
    groups = {}
    for todo in todos:
        groups.setdefault(_todo_sort_key(todo), []).append(todo)

    ordered = []
    for key in sorted(groups):
        group = groups[key]
        dated = sorted((t for t in group if t.due_date), key=lambda t: t.due_date)
        undated = sorted(
            (t for t in group if not t.due_date), key=lambda t: t.created_at, reverse=True
        )
        ordered.extend(dated + undated)
    return tuple(ordered)


def todos_for_owner(
    todos: Tuple[FinancialTodo, ...], owner_id: str
) -> Tuple[FinancialTodo, ...]:
    return sort_todos(tuple(t for t in todos if t.owner_id == owner_id))


def total_pending_amount(todos: Tuple[FinancialTodo, ...]) -> Decimal:
    return sum((t.amount for t in todos if t.amount is not None and not t.completed), Decimal(0))
