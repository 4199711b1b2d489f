"""Tests for the SQLite transaction repository."""

import sqlite3
from datetime import datetime
from decimal import Decimal

import pytest

from core.entities.transaction import TransactionType
from infrastructure.db.sqlite import SQLiteTransactionRepository, init_db
from tests.fakes import make_tx


@pytest.fixture
def repo(tmp_path):
    db_path = str(tmp_path / "nested" / "wallet.db")
    init_db(db_path)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    yield SQLiteTransactionRepository(conn)
    conn.close()


def test_init_db_creates_parent_dir_and_is_idempotent(tmp_path) -> None:
    db_path = tmp_path / "a" / "b" / "wallet.db"

    init_db(str(db_path))
    init_db(str(db_path))

    assert db_path.exists()


def test_save_assigns_id_and_round_trips_fields(repo) -> None:
    saved = repo.save(
        make_tx(
            "1234.56",
            TransactionType.INCOME,
            when=datetime(2024, 1, 15, 10, 0, 0, 123456),
            category="Salary",
            description="Monthly salary",
        )
    )

    loaded = repo.find_by_id(saved.id)

    assert saved.id
    assert loaded == saved
    assert loaded.amount == Decimal("1234.56")
    assert str(loaded.amount) == "1234.56"
    assert loaded.date == datetime(2024, 1, 15, 10, 0, 0, 123456)
    assert loaded.type is TransactionType.INCOME


def test_find_all_keeps_insertion_order(repo) -> None:
    ids = [repo.save(make_tx(f"{n}.00")).id for n in range(1, 6)]

    assert [t.id for t in repo.find_all()] == ids


def test_find_all_on_empty_store(repo) -> None:
    assert repo.find_all() == []


def test_save_with_existing_id_replaces_in_place(repo) -> None:
    first = repo.save(make_tx("1.00"))
    second = repo.save(make_tx("2.00"))

    repo.save(make_tx("9.99", TransactionType.INCOME, category="Refund", tx_id=first.id))

    rows = repo.find_all()
    assert [t.id for t in rows] == [first.id, second.id]
    assert rows[0].amount == Decimal("9.99")
    assert rows[0].category == "Refund"
    assert rows[0].type is TransactionType.INCOME


def test_save_with_unknown_id_inserts(repo) -> None:
    repo.save(make_tx("5.00", tx_id="explicit-id"))

    assert repo.exists_by_id("explicit-id")
    assert repo.find_by_id("explicit-id").amount == Decimal("5.00")


def test_find_by_id_missing_returns_none(repo) -> None:
    assert repo.find_by_id("missing") is None
    assert repo.exists_by_id("missing") is False


def test_delete_by_id(repo) -> None:
    saved = repo.save(make_tx("5.00"))

    repo.delete_by_id(saved.id)
    repo.delete_by_id(saved.id)
    repo.delete_by_id("never-existed")

    assert repo.find_by_id(saved.id) is None


def test_new_ids_never_reuse_deleted_ones(repo) -> None:
    deleted = repo.save(make_tx("1.00")).id
    repo.delete_by_id(deleted)

    fresh = {repo.save(make_tx("1.00")).id for _ in range(10)}

    assert deleted not in fresh
