"""Batch execution and generated keys with a per-call data-source port."""

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

from dbaccess import ConnectDataSource, DataSourceDbAccess, MissingParameterError, dialect_for


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        source = ConnectDataSource(sqlite3.connect, os.path.join(tmp, "items.db"))
        db = DataSourceDbAccess(source, dialect_for("sqlite"))

        db.execute("CREATE TABLE item (id INTEGER PRIMARY KEY AUTOINCREMENT, sku TEXT, qty INTEGER)")
        key = db.execute_returning_key(
            "INSERT INTO item (sku, qty) VALUES (:sku, :qty)", {"sku": "A-1", "qty": 3}
        )
        print("Generated key:", key)

        counts = db.execute_batch(
            "INSERT INTO item (sku, qty) VALUES (:sku, :qty)",
            [{"sku": "B-1", "qty": 1}, {"sku": "B-2", "qty": 2}, {"sku": "B-3", "qty": 5}],
        )
        print("Batch counts:", counts)
        print("Rows:", db.query_rows("SELECT sku, qty FROM item ORDER BY id"))

        try:
            db.execute("UPDATE item SET qty = :qty WHERE sku = :sku", {"sku": "A-1"})
        except MissingParameterError as exc:
            print("Rejected:", exc)


if __name__ == "__main__":
    main()
