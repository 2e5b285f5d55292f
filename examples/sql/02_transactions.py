"""Transactional operations: local connection transactions and a coordinator."""

from __future__ import annotations

import os
import sqlite3
import sys
import tempfile
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "dbaccess").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dbaccess import (
    ConnectDataSource,
    ConnectionCoordinator,
    ConnectionDbAccess,
    DataAccessError,
    SQLiteDialect,
    transactional,
)

CREATE = "CREATE TABLE ledger (id INTEGER PRIMARY KEY, account TEXT, amount INTEGER)"
INSERT = "INSERT INTO ledger (account, amount) VALUES (:account, :amount)"


@transactional
def transfer(db: ConnectionDbAccess, amount: int) -> None:
    db.execute(INSERT, {"account": "checking", "amount": -amount})
    db.execute(INSERT, {"account": "savings", "amount": amount})


@transactional
def broken_transfer(db: ConnectionDbAccess, amount: int) -> None:
    db.execute(INSERT, {"account": "checking", "amount": -amount})
    db.execute("INSERT INTO missing_table VALUES (1)")


def count(db: ConnectionDbAccess) -> int:
    return db.query_scalar("SELECT COUNT(*) AS n FROM ledger", None, "n")


def local_demo(path: str) -> None:
    print("=== Local transactions ===")
    with ConnectionDbAccess(sqlite3.connect(path), SQLiteDialect()) as db:
        db.execute(CREATE)
        transfer(db, 100)
        print("Rows after commit:", count(db))
        try:
            broken_transfer(db, 50)
        except DataAccessError as exc:
            print("Rolled back:", exc.operation, type(exc.cause).__name__)
        print("Rows after rollback:", count(db))


def coordinated_demo(path: str) -> None:
    print("\n=== Coordinated transactions ===")
    coordinator = ConnectionCoordinator(ConnectDataSource(sqlite3.connect, path))

    @transactional(coordinator=coordinator)
    def coordinated_transfer(db: ConnectionDbAccess, amount: int) -> None:
        db.execute(INSERT, {"account": "checking", "amount": -amount})
        db.execute(INSERT, {"account": "savings", "amount": amount})

    # The port is released by the interceptor before the coordinator commits.
    port = ConnectionDbAccess.from_data_source(coordinator, SQLiteDialect())
    coordinated_transfer(port, 25)
    print("Port released:", port.released)

    with ConnectionDbAccess(sqlite3.connect(path), SQLiteDialect()) as db:
        print("Rows after coordinated commit:", count(db))


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "ledger.db")
        local_demo(path)
        coordinated_demo(path)


if __name__ == "__main__":
    main()
