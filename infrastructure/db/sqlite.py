import logging
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from core.entities.transaction import Transaction, TransactionType
from core.repositories.transaction_repository import TransactionRepository


logger = logging.getLogger(__name__)


def init_db(db_path: str) -> None:
    if db_path != ":memory:" and not db_path.startswith("file:"):
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, check_same_thread=False)
    try:
        cur = conn.cursor()

        # amount хранится строкой, чтобы Decimal не терял точность
        cur.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id TEXT PRIMARY KEY,
            amount TEXT NOT NULL,
            category TEXT NOT NULL,
            description TEXT NOT NULL,
            date TEXT NOT NULL,
            type TEXT NOT NULL CHECK (type IN ('INCOME', 'EXPENSE'))
        );
        """)
        conn.commit()
    finally:
        conn.close()
    logger.info("db_initialized path=%s", db_path)


class SQLiteTransactionRepository(TransactionRepository):
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def _row_to_tx(self, row: sqlite3.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            amount=Decimal(row["amount"]),
            category=row["category"],
            description=row["description"],
            date=datetime.fromisoformat(row["date"]),
            type=TransactionType(row["type"]),
        )

    def save(self, transaction: Transaction) -> Transaction:
        if transaction.id is None:
            transaction = transaction.with_id(uuid4().hex)
        cur = self.conn.cursor()
        cur.execute(
            """
            INSERT INTO transactions (id, amount, category, description, date, type)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                amount = excluded.amount,
                category = excluded.category,
                description = excluded.description,
                date = excluded.date,
                type = excluded.type
            """,
            (
                transaction.id,
                str(transaction.amount),
                transaction.category,
                transaction.description,
                transaction.date.isoformat(),
                transaction.type.value,
            ),
        )
        self.conn.commit()
        return transaction

    def find_all(self) -> List[Transaction]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM transactions ORDER BY rowid")
        return [self._row_to_tx(r) for r in cur.fetchall()]

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM transactions WHERE id = ?", (transaction_id,))
        row = cur.fetchone()
        return self._row_to_tx(row) if row else None

    def exists_by_id(self, transaction_id: str) -> bool:
        cur = self.conn.cursor()
        cur.execute("SELECT 1 FROM transactions WHERE id = ?", (transaction_id,))
        return cur.fetchone() is not None

    def delete_by_id(self, transaction_id: str) -> None:
        cur = self.conn.cursor()
        cur.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
        self.conn.commit()
