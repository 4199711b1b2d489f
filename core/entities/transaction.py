from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


def utc_now() -> datetime:
    # в хранилище даты наивные, в UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class Transaction:
    id: Optional[str]
    amount: Decimal         # всегда > 0, знак задаёт type
    category: str
    description: str
    date: datetime = field(default_factory=utc_now)
    type: TransactionType = TransactionType.EXPENSE

    def with_id(self, transaction_id: Optional[str]) -> "Transaction":
        return replace(self, id=transaction_id)
