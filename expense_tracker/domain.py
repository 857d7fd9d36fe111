from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

ZERO = Decimal("0")


class Category(str, Enum):
    FOOD = "Food"
    TRAVEL = "Travel"
    BILLS = "Bills"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    ENTERTAINMENT = "Entertainment"
    WORK = "Work"
    OTHER = "Other"

    @classmethod
    def parse(cls, value) -> "Category":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown category: {value!r}") from None


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Granularity(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 keep their printed value
    return Decimal(str(value))


def to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Transaction:
    id: str
    title: str
    amount: Decimal          # always positive, sign comes from `type`
    date: date
    type: TransactionType
    category: Category
    owner_id: str

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "type": self.type.value,
            "category": self.category.value,
            "owner_id": self.owner_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            amount=to_decimal(data["amount"]),
            date=to_date(data["date"]),
            type=TransactionType(data["type"]),
            category=Category.parse(data["category"]),
            owner_id=str(data["owner_id"]),
        )


@dataclass(frozen=True)
class CategoryBudget:
    category: Category
    limit: Decimal
    owner_id: str
    month: int   # 1..12
    year: int

    @property
    def key(self) -> Tuple[str, Category, int, int]:
        return (self.owner_id, self.category, self.month, self.year)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "limit": str(self.limit),
            "owner_id": self.owner_id,
            "month": self.month,
            "year": self.year,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CategoryBudget":
        return cls(
            category=Category.parse(data["category"]),
            limit=to_decimal(data["limit"]),
            owner_id=str(data["owner_id"]),
            month=int(data["month"]),
            year=int(data["year"]),
        )


@dataclass(frozen=True)
class FinancialTodo:
    id: str
    owner_id: str
    title: str
    created_at: datetime
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    linked_transaction_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "created_at": self.created_at.isoformat(),
            "priority": self.priority.value,
            "completed": self.completed,
            "description": self.description,
            "amount": None if self.amount is None else str(self.amount),
            "due_date": None if self.due_date is None else self.due_date.isoformat(),
            "linked_transaction_id": self.linked_transaction_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FinancialTodo":
        amount = data.get("amount")
        due = data.get("due_date")
        return cls(
            id=str(data["id"]),
            owner_id=str(data["owner_id"]),
            title=str(data["title"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            priority=Priority(data.get("priority", Priority.MEDIUM.value)),
            completed=bool(data.get("completed", False)),
            description=data.get("description"),
            amount=None if amount is None else to_decimal(amount),
            due_date=None if not due else to_date(due),
            linked_transaction_id=data.get("linked_transaction_id"),
        )


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime

    def contains(self, value) -> bool:
        if not isinstance(value, datetime):
            value = datetime.combine(to_date(value), datetime.min.time())
        return self.start <= value <= self.end

    @property
    def is_empty(self) -> bool:
        return self.end < self.start


@dataclass(frozen=True)
class BudgetStatus:
    category: Category
    limit: Decimal
    spent: Decimal
    remaining: Decimal
    percentage_used: Decimal
    is_over_budget: bool
    is_near_budget: bool


@dataclass(frozen=True)
class BucketTotals:
    income: Decimal = ZERO
    expense: Decimal = ZERO


@dataclass(frozen=True)
class ReportData:
    title: str
    period_label: str
    granularity: Granularity
    period: Period
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    transactions: Tuple[Transaction, ...]
    category_breakdown: Dict[Category, Decimal] = field(default_factory=dict)
    bucket_breakdown: Dict[str, BucketTotals] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.transactions
