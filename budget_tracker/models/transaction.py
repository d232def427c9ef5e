from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class LedgerTransaction:
    id: int
    description: str
    amount: Decimal
    direction: str          # 'income' | 'expense'
    category_id: int
    date: date
    category_name: str = ""
    recurring_template_id: Optional[int] = None
    created_at: str = ""

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.direction == "income" else -self.amount
