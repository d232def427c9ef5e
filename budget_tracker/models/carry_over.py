from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class CarryOverPreviewItem:
    category_id: int
    category_name: str
    carry_over_amount: Decimal   # always > 0


@dataclass(frozen=True)
class CarryOverRun:
    id: int
    from_year: int
    from_month: int
    applied_at_utc: datetime
    total_amount: Decimal
