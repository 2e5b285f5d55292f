from __future__ import annotations

import os
import sqlite3
import tempfile
import unittest
from typing import Any

from dbaccess import (
    ConnectDataSource,
    DataAccessError,
    DataSourceDbAccess,
    InvalidInterceptionTargetError,
    SQLiteDialect,
    transactional,
)
from tests.db_test_helpers import (
    COUNT_ROWS,
    INSERT_NAMED,
    INSERT_POSITIONAL,
    SELECT_ALL,
    SampleRow,
    count_rows,
    create_test_table,
    sample_params,
    sample_values,
)


class _RecordingSource:
    """Data source that keeps every connection it hands out."""

    def __init__(self, path: str):
        self.path = path
        self.connections: list[sqlite3.Connection] = []

    def get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        self.connections.append(conn)
        return conn


class _FaultyCursor:
    def __init__(self, events: list[str]):
        self.events = events

    def execute(self, sql: str, params: Any = None) -> None:
        raise RuntimeError("engine fault")

    def close(self) -> None:
        self.events.append("cursor_close")


class _RollbackTrackingConnection:
    def __init__(self) -> None:
        self.events: list[str] = []

    def cursor(self) -> _FaultyCursor:
        return _FaultyCursor(self.events)

    def close(self) -> None:
        self.events.append("close")

    def commit(self) -> None:
        self.events.append("commit")

    def rollback(self) -> None:
        self.events.append("rollback")


class DataSourceDbAccessTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = os.path.join(tmp.name, "dbaccess.db")
        create_test_table(self.path)
        self.source = _RecordingSource(self.path)
        self.db = DataSourceDbAccess(self.source, SQLiteDialect())

    def test_writes_are_committed_per_call(self) -> None:
        self.assertEqual(self.db.execute(INSERT_NAMED, sample_params()), 1)
        self.assertEqual(count_rows(self.path), 1)

        key = self.db.execute_returning_key(INSERT_NAMED, sample_params("second"), "id")
        self.assertGreater(key, 0)
        self.assertEqual(count_rows(self.path), 2)

    def test_reads_see_committed_rows(self) -> None:
        self.db.execute_batch(INSERT_POSITIONAL, [sample_values("a"), sample_values("b")])

        records = self.db.query_records(SELECT_ALL, None, SampleRow)
        self.assertEqual([r.charField for r in records], ["a", "b"])
        self.assertEqual(self.db.query_scalar(COUNT_ROWS, None, "row_count"), 2)

    def test_every_call_uses_and_closes_its_own_connection(self) -> None:
        self.db.execute(INSERT_NAMED, sample_params())
        self.db.query_rows(SELECT_ALL)
        with self.assertRaises(DataAccessError):
            self.db.query_rows("SELECT * FROM missing_table")

        self.assertEqual(len(self.source.connections), 3)
        self.assertEqual(len({id(conn) for conn in self.source.connections}), 3)
        for conn in self.source.connections:
            with self.assertRaises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")

    def test_failed_batch_is_rolled_back(self) -> None:
        with self.assertRaises(DataAccessError):
            self.db.execute_batch(INSERT_POSITIONAL, [sample_values(), ["too", "few"]])
        self.assertEqual(count_rows(self.path), 0)

    def test_failed_write_rolls_back_before_close(self) -> None:
        conn = _RollbackTrackingConnection()
        db = DataSourceDbAccess(ConnectDataSource(lambda: conn), SQLiteDialect())

        with self.assertRaises(DataAccessError) as ctx:
            db.execute("DELETE FROM t")

        self.assertIsInstance(ctx.exception.cause, RuntimeError)
        self.assertEqual(conn.events, ["cursor_close", "rollback", "close"])

    def test_release_is_a_no_op(self) -> None:
        self.db.release()
        self.db.release()
        self.assertIsNone(self.db.connection)
        self.assertEqual(self.db.execute(INSERT_NAMED, sample_params()), 1)

    def test_connect_data_source_passes_arguments(self) -> None:
        source = ConnectDataSource(sqlite3.connect, self.path, timeout=1.0)
        conn = source.get_connection()
        try:
            self.assertEqual(conn.execute("SELECT COUNT(*) FROM test_table").fetchone()[0], 0)
        finally:
            conn.close()

    def test_local_transactions_need_a_connection_scoped_port(self) -> None:
        @transactional
        def insert(db: DataSourceDbAccess) -> None:
            db.execute(INSERT_NAMED, sample_params())

        with self.assertRaises(InvalidInterceptionTargetError):
            insert(self.db)
        self.assertEqual(count_rows(self.path), 0)


if __name__ == "__main__":
    unittest.main()
