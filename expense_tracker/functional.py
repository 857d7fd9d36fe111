from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Callable, Generic, TypeVar

from expense_tracker.domain import Category, CategoryBudget, FinancialTodo, Transaction, TransactionType

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(name) -> Maybe[Category]:
    if isinstance(name, Category):
        return Some(name)
    for cat in Category:
        if cat.value.lower() == str(name).strip().lower():
            return Some(cat)
    return Nothing()


def require_category(name) -> Either[dict, Category]:
    return safe_category(name).map(Right).get_or_else(Left({
        "error": "category_not_found",
        "message": f"Category {name!r} does not exist",
        "category": name,
    }))


def _positive_amount(value) -> bool:
    try:
        return Decimal(str(value)) > 0
    except (InvalidOperation, ValueError):
        return False


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    if not t.title or not t.title.strip():
        return Left({
            "error": "missing_title",
            "message": "Transaction title is required",
        })

    if not _positive_amount(t.amount):
        return Left({
            "error": "invalid_amount",
            "message": f"Transaction amount must be positive, got {t.amount}",
            "amount": t.amount,
        })

    if not isinstance(t.type, TransactionType):
        return Left({
            "error": "invalid_type",
            "message": f"Unknown transaction type {t.type!r}",
        })

    if not isinstance(t.category, Category):
        return Left({
            "error": "category_not_found",
            "message": f"Category {t.category!r} does not exist",
            "category": t.category,
        })

    return Right(t)


def validate_budget(b: CategoryBudget) -> Either[dict, CategoryBudget]:
    if not _positive_amount(b.limit):
        return Left({
            "error": "invalid_limit",
            "message": f"Budget limit for {b.category.value} must be positive, got {b.limit}",
            "category": b.category.value,
            "limit": b.limit,
        })

    if not 1 <= b.month <= 12:
        return Left({
            "error": "invalid_month",
            "message": f"Budget month must be between 1 and 12, got {b.month}",
            "month": b.month,
        })

    if not 1000 <= b.year <= 9999:
        return Left({
            "error": "invalid_year",
            "message": f"Budget year must have four digits, got {b.year}",
            "year": b.year,
        })

    return Right(b)


def validate_todo(todo: FinancialTodo) -> Either[dict, FinancialTodo]:
    if not todo.title or not todo.title.strip():
        return Left({
            "error": "missing_title",
            "message": "Todo title is required",
        })

    if todo.amount is not None and not _positive_amount(todo.amount):
        return Left({
            "error": "invalid_amount",
            "message": f"Todo amount must be positive when given, got {todo.amount}",
            "amount": todo.amount,
        })

    return Right(todo)
