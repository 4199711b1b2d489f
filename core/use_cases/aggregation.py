from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from core.entities.transaction import Transaction, TransactionType


def _total(transactions: Iterable[Transaction], tx_type: TransactionType) -> Decimal:
    return sum((t.amount for t in transactions if t.type == tx_type), Decimal("0"))


def compute_balance(transactions: Iterable[Transaction]) -> Decimal:
    """balance = sum(INCOME) - sum(EXPENSE); zero for an empty sequence."""
    transactions = list(transactions)
    return _total(transactions, TransactionType.INCOME) - _total(transactions, TransactionType.EXPENSE)


def compute_summary(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    transactions = list(transactions)
    income = _total(transactions, TransactionType.INCOME)
    expense = _total(transactions, TransactionType.EXPENSE)
    return {
        "totalIncome": income,
        "totalExpense": expense,
        "balance": income - expense,
    }


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def filter_transactions(
    transactions: Iterable[Transaction],
    tx_type: Optional[TransactionType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
) -> List[Transaction]:
    """Stable filter: every supplied predicate must hold, absent ones are ignored.

    Date bounds are inclusive calendar days: start_date counts from 00:00:00,
    end_date runs through 23:59:59.999999.
    """
    lower = start_of_day(start_date) if start_date is not None else None
    upper = end_of_day(end_date) if end_date is not None else None

    result = []
    for t in transactions:
        if tx_type is not None and t.type != tx_type:
            continue
        if category is not None and t.category != category:
            continue
        if lower is not None and t.date < lower:
            continue
        if upper is not None and t.date > upper:
            continue
        result.append(t)
    return result
