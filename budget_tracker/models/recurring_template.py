from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class RecurringTemplate:
    id: int
    description: str
    amount: Decimal
    direction: str              # 'income' | 'expense'
    category_id: int
    start_date: date
    frequency: str              # 'weekly' | 'biweekly' | 'monthly'
    next_run_date: date
    is_active: bool = True
    day_of_month: Optional[int] = None   # 1-28, monthly only
    category_name: str = ""     # resolved from categories on read

    def with_next_run(self, next_run_date: date) -> "RecurringTemplate":
        if next_run_date < self.next_run_date:
            raise ValueError("next_run_date cannot move backwards.")
        return replace(self, next_run_date=next_run_date)
