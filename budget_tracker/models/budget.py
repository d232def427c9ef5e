from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from budget_tracker.utils.currency import ZERO


@dataclass(frozen=True)
class MonthlyBudget:
    category_id: int
    year: int
    month: int
    amount: Decimal


@dataclass(frozen=True)
class BudgetStatus:
    """A monthly budget joined to its category name and spending so far."""
    budget: MonthlyBudget
    category_name: str
    spent_amount: Decimal = ZERO
    color_hex: str = "#888888"

    @property
    def category_id(self) -> int:
        return self.budget.category_id

    @property
    def limit_amount(self) -> Decimal:
        return self.budget.amount

    @property
    def percentage(self) -> float:
        if self.limit_amount <= 0:
            return 0.0
        return float(self.spent_amount / self.limit_amount)

    @property
    def remaining(self) -> Decimal:
        return max(ZERO, self.limit_amount - self.spent_amount)


@dataclass(frozen=True)
class BudgetChangeLog:
    id: int
    category_id: int
    year: int
    month: int
    old_amount: Decimal
    new_amount: Decimal
    action: str             # 'update' | 'clear'
    changed_at_utc: datetime
