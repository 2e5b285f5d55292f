"""Named parameters and dataclass row mapping with a connection-scoped port."""

from __future__ import annotations

import sqlite3
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "dbaccess").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dbaccess import ConnectionDbAccess, SQLiteDialect, configure_logging, to_positional_form


@dataclass
class Customer:
    # Columns are matched as snake_case: full_name, credit_limit.
    id: Optional[int] = None
    fullName: str = ""
    creditLimit: float = 0.0


def main() -> None:
    configure_logging(level="INFO")
    sql = "SELECT * FROM customer WHERE credit_limit >= :minimum AND full_name <> :name"
    print("Positional form:", to_positional_form(sql))

    with ConnectionDbAccess(sqlite3.connect(":memory:"), SQLiteDialect()) as db:
        db.execute(
            "CREATE TABLE customer (id INTEGER PRIMARY KEY, full_name TEXT, credit_limit REAL)"
        )
        for name, limit in (("Ada", 500.0), ("Grace", 1500.0), ("Linus", 900.0)):
            db.execute(
                "INSERT INTO customer (full_name, credit_limit) VALUES (:fullName, :creditLimit)",
                {"fullName": name, "creditLimit": limit},
            )

        customers = db.query_records(sql, {"minimum": 800.0, "name": "Linus"}, Customer)
        print("Customers:", customers)

        total = db.query_scalar(
            "SELECT SUM(credit_limit) AS total FROM customer", None, "total"
        )
        print("Total credit:", total)
        print("First row:", db.query_first_row("SELECT * FROM customer ORDER BY id"))


if __name__ == "__main__":
    main()
