from decimal import Decimal
from typing import Iterable, List

from expense_tracker.aggregator import category_breakdown, iter_transactions
from expense_tracker.domain import (
    ZERO,
    BudgetStatus,
    Category,
    CategoryBudget,
    Transaction,
    TransactionType,
    to_date,
)
from expense_tracker.errors import BudgetConfigurationError
from expense_tracker.filters import all_of, by_month, by_owner, by_type
from expense_tracker.utils import get_logger

logger = get_logger(__name__)

NEAR_BUDGET_PERCENT = Decimal("80")
FULL_PERCENT = Decimal("100")


def budget_status(budget: CategoryBudget, spent: Decimal) -> BudgetStatus:
    if budget.limit <= 0:
        raise BudgetConfigurationError(budget.category.value, budget.limit)

    percentage = spent / budget.limit * 100
    over = spent > budget.limit
    near = not over and NEAR_BUDGET_PERCENT <= percentage <= FULL_PERCENT
    return BudgetStatus(
        category=budget.category,
        limit=budget.limit,
        spent=spent,
        remaining=max(ZERO, budget.limit - spent),
        percentage_used=percentage,
        is_over_budget=over,
        is_near_budget=near,
    )


def evaluate_budgets(
    owner_id: str,
    transactions: Iterable[Transaction],
    budgets: Iterable[CategoryBudget],
    reference_date,
) -> List[BudgetStatus]:
    """Status of every budget the owner has for the reference month.

    Raises BudgetConfigurationError when a matching budget has a limit <= 0.
    """
    ref = to_date(reference_date)
    active = [
        b for b in budgets
        if b.owner_id == owner_id and b.month == ref.month and b.year == ref.year
    ]
    if not active:
        return []

    spent_by_category = category_breakdown(iter_transactions(
        transactions,
        all_of(by_owner(owner_id), by_type(TransactionType.EXPENSE), by_month(ref.month, ref.year)),
    ))

    statuses = [budget_status(b, spent_by_category.get(b.category, ZERO)) for b in active]
    logger.debug("evaluated %d budgets for %s in %02d/%d", len(statuses), owner_id, ref.month, ref.year)
    return statuses


def categories_without_budget(budgets: Iterable[CategoryBudget]) -> List[Category]:
    budgeted = {b.category for b in budgets}
    return [c for c in Category if c not in budgeted]
