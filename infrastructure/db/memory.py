from threading import Lock
from typing import Dict, List, Optional
from uuid import uuid4

from core.entities.transaction import Transaction
from core.repositories.transaction_repository import TransactionRepository


class InMemoryTransactionRepository(TransactionRepository):
    """Process-local store, insertion ordered. Shared between requests, hence the lock."""
    def __init__(self):
        self._items: Dict[str, Transaction] = {}
        self._lock = Lock()

    def save(self, transaction: Transaction) -> Transaction:
        if transaction.id is None:
            transaction = transaction.with_id(uuid4().hex)
        with self._lock:
            self._items[transaction.id] = transaction
        return transaction

    def find_all(self) -> List[Transaction]:
        with self._lock:
            return list(self._items.values())

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        with self._lock:
            return self._items.get(transaction_id)

    def exists_by_id(self, transaction_id: str) -> bool:
        with self._lock:
            return transaction_id in self._items

    def delete_by_id(self, transaction_id: str) -> None:
        with self._lock:
            self._items.pop(transaction_id, None)
