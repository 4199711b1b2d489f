from abc import ABC, abstractmethod
from typing import List, Optional
from core.entities.transaction import Transaction


class TransactionRepository(ABC):
    @abstractmethod
    def save(self, transaction: Transaction) -> Transaction:
        """Insert when id is None (the store assigns one), otherwise upsert by id."""

    @abstractmethod
    def find_all(self) -> List[Transaction]:...

    @abstractmethod
    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:...

    @abstractmethod
    def exists_by_id(self, transaction_id: str) -> bool:...

    @abstractmethod
    def delete_by_id(self, transaction_id: str) -> None:...
