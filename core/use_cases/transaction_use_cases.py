import logging
from dataclasses import replace
from datetime import date, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from core.entities.transaction import Transaction, TransactionType
from core.repositories.transaction_repository import TransactionRepository
from core.use_cases.aggregation import compute_balance, compute_summary, filter_transactions


logger = logging.getLogger(__name__)

MIN_AMOUNT = Decimal("0.01")


class TransactionValidationError(ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def validate_transaction(transaction: Transaction) -> None:
    amount = transaction.amount
    if not isinstance(amount, Decimal) or not amount.is_finite():
        raise TransactionValidationError("amount", "Amount is required")
    if amount < MIN_AMOUNT:
        raise TransactionValidationError("amount", "Amount must be greater than 0")
    if not transaction.category or not transaction.category.strip():
        raise TransactionValidationError("category", "Category is required")
    if not transaction.description or not transaction.description.strip():
        raise TransactionValidationError("description", "Description is required")
    if not isinstance(transaction.type, TransactionType):
        raise TransactionValidationError("type", "Type is required")


def normalize_transaction(transaction: Transaction) -> Transaction:
    # даты с таймзоной приводим к наивному UTC, как и всё в хранилище
    if transaction.date.tzinfo is not None:
        return replace(transaction, date=transaction.date.astimezone(timezone.utc).replace(tzinfo=None))
    return transaction


def create_transaction(repo: TransactionRepository, transaction: Transaction) -> Transaction:
    validate_transaction(transaction)
    # id всегда назначает хранилище
    saved = repo.save(normalize_transaction(transaction).with_id(None))
    logger.info("transaction_created id=%s type=%s amount=%s", saved.id, saved.type.value, saved.amount)
    return saved


def list_transactions(repo: TransactionRepository) -> List[Transaction]:
    transactions = repo.find_all()
    logger.debug("transactions_listed count=%s", len(transactions))
    return transactions


def get_transaction(repo: TransactionRepository, transaction_id: str) -> Optional[Transaction]:
    transaction = repo.find_by_id(transaction_id)
    if transaction is None:
        logger.debug("transaction_not_found id=%s", transaction_id)
    return transaction


def update_transaction(
    repo: TransactionRepository,
    transaction_id: str,
    transaction: Transaction,
    strict: bool = False,
) -> Optional[Transaction]:
    """Replace the whole record stored under transaction_id.

    The path id always wins over any id in the payload. Without strict mode the
    store upserts, so an unknown id creates a new record; with strict=True an
    unknown id returns None and nothing is written.
    """
    validate_transaction(transaction)
    if strict and not repo.exists_by_id(transaction_id):
        logger.info("transaction_update_rejected_missing id=%s", transaction_id)
        return None
    saved = repo.save(normalize_transaction(transaction).with_id(transaction_id))
    logger.info("transaction_updated id=%s", saved.id)
    return saved


def delete_transaction(repo: TransactionRepository, transaction_id: str) -> None:
    repo.delete_by_id(transaction_id)
    logger.info("transaction_deleted id=%s", transaction_id)


def get_balance(repo: TransactionRepository) -> Decimal:
    balance = compute_balance(repo.find_all())
    logger.debug("balance_computed balance=%s", balance)
    return balance


def get_summary(repo: TransactionRepository) -> Dict[str, Decimal]:
    summary = compute_summary(repo.find_all())
    logger.debug("summary_computed summary=%s", summary)
    return summary


def search_transactions(
    repo: TransactionRepository,
    tx_type: Optional[TransactionType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
) -> List[Transaction]:
    found = filter_transactions(
        repo.find_all(),
        tx_type=tx_type,
        start_date=start_date,
        end_date=end_date,
        category=category,
    )
    logger.debug(
        "transactions_filtered type=%s start=%s end=%s category=%s count=%s",
        tx_type.value if tx_type else None, start_date, end_date, category, len(found),
    )
    return found
