import sqlite3
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, field_validator

from config.settings import settings
from core.entities.transaction import Transaction, TransactionType, utc_now
from core.repositories.transaction_repository import TransactionRepository
from core.use_cases.transaction_use_cases import (
    create_transaction,
    delete_transaction,
    get_balance,
    get_summary,
    get_transaction,
    list_transactions,
    search_transactions,
    update_transaction,
)
from infrastructure.db.memory import InMemoryTransactionRepository
from infrastructure.db.sqlite import SQLiteTransactionRepository
from infrastructure.web.decimal_json import DecimalJSONRoute


router = APIRouter(prefix="", tags=["wallet"], route_class=DecimalJSONRoute)

VALIDATION_ERROR: Dict[int, Dict[str, Any]] = {400: {"description": "Invalid data"}}
NOT_FOUND: Dict[int, Dict[str, Any]] = {404: {"description": "Transaction not found"}}

_memory_repo = InMemoryTransactionRepository()


def get_transaction_repo() -> Iterator[TransactionRepository]:
    if settings.STORAGE_BACKEND == "memory":
        yield _memory_repo
        return
    conn = sqlite3.connect(settings.DB_PATH, check_same_thread=False)
    try:
        yield SQLiteTransactionRepository(conn)
    finally:
        conn.close()


def get_strict_updates() -> bool:
    return settings.STRICT_UPDATES


# DTO для транзакций
class TransactionRequest(BaseModel):
    id: Optional[str] = None  # игнорируется, id задаёт хранилище или путь
    amount: Decimal = Field(..., ge=Decimal("0.01"), examples=["50.00"])
    category: str = Field(..., examples=["Groceries"])
    description: str = Field(..., examples=["Weekly supermarket run"])
    date: Optional[datetime] = None  # если не передана, берём текущее время
    type: TransactionType = TransactionType.EXPENSE

    @field_validator("category", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def to_entity(self) -> Transaction:
        return Transaction(
            id=None,
            amount=self.amount,
            category=self.category,
            description=self.description,
            date=self.date or utc_now(),
            type=self.type,
        )


class TransactionResponse(BaseModel):
    id: str
    amount: Decimal  # в JSON строкой, без потери точности
    category: str
    description: str
    date: datetime
    type: TransactionType

    @classmethod
    def from_entity(cls, tx: Transaction) -> "TransactionResponse":
        return cls(
            id=tx.id,
            amount=tx.amount,
            category=tx.category,
            description=tx.description,
            date=tx.date,
            type=tx.type,
        )


class BalanceResponse(BaseModel):
    balance: Decimal


class SummaryResponse(BaseModel):
    totalIncome: Decimal
    totalExpense: Decimal
    balance: Decimal


@router.post(
    "/transactions",
    response_model=TransactionResponse,
    status_code=201,
    summary="Add a transaction",
    description="Create a new income or expense transaction",
    responses=VALIDATION_ERROR,
)
def add_transaction(payload: TransactionRequest, repo: TransactionRepository = Depends(get_transaction_repo)):
    saved = create_transaction(repo, payload.to_entity())
    return TransactionResponse.from_entity(saved)


@router.get(
    "/transactions",
    response_model=List[TransactionResponse],
    summary="List all transactions",
)
def get_all_transactions(repo: TransactionRepository = Depends(get_transaction_repo)):
    return [TransactionResponse.from_entity(tx) for tx in list_transactions(repo)]


# должен стоять раньше /transactions/{transaction_id}
@router.get(
    "/transactions/filter",
    response_model=List[TransactionResponse],
    summary="Filter transactions",
    description="Filter by type, category and an inclusive date range; every parameter is optional",
    responses=VALIDATION_ERROR,
)
def filter_transactions(
    tx_type: Optional[TransactionType] = Query(None, alias="type"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    category: Optional[str] = None,
    repo: TransactionRepository = Depends(get_transaction_repo),
):
    found = search_transactions(
        repo,
        tx_type=tx_type,
        start_date=start_date,
        end_date=end_date,
        category=category,
    )
    return [TransactionResponse.from_entity(tx) for tx in found]


@router.get(
    "/transactions/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction",
    responses=NOT_FOUND,
)
def get_transaction_by_id(transaction_id: str, repo: TransactionRepository = Depends(get_transaction_repo)):
    tx = get_transaction(repo, transaction_id)
    if tx is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return TransactionResponse.from_entity(tx)


@router.put(
    "/transactions/{transaction_id}",
    response_model=TransactionResponse,
    summary="Replace a transaction",
    description="Full replace; the id in the path wins. Unknown ids are inserted unless STRICT_UPDATES is on",
    responses={**VALIDATION_ERROR, **NOT_FOUND},
)
def replace_transaction(
    transaction_id: str,
    payload: TransactionRequest,
    repo: TransactionRepository = Depends(get_transaction_repo),
    strict: bool = Depends(get_strict_updates),
):
    updated = update_transaction(repo, transaction_id, payload.to_entity(), strict=strict)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return TransactionResponse.from_entity(updated)


@router.delete(
    "/transactions/{transaction_id}",
    status_code=204,
    summary="Delete a transaction",
    description="Succeeds whether or not the transaction exists",
)
def remove_transaction(transaction_id: str, repo: TransactionRepository = Depends(get_transaction_repo)):
    delete_transaction(repo, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/balance", response_model=BalanceResponse, summary="Current balance (income minus expense)")
def balance(repo: TransactionRepository = Depends(get_transaction_repo)):
    return BalanceResponse(balance=get_balance(repo))


@router.get("/summary", response_model=SummaryResponse, summary="Total income, total expense and balance")
def summary(repo: TransactionRepository = Depends(get_transaction_repo)):
    return SummaryResponse(**get_summary(repo))


@router.get("/health", response_class=PlainTextResponse, summary="Health check")
def health():
    return "OK"
