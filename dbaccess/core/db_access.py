"""Strategy-independent data-access port.

`DbAccess` implements every caller-facing operation on top of one primitive,
`_cursor()`, which each execution strategy provides. Parameters may be given
positionally (already using the dialect's marker) or as a mapping, in which
case the SQL is treated as a ``:name`` template and translated first.
"""

from __future__ import annotations

import abc
import contextlib
import re
from collections.abc import Mapping
from typing import Any, Callable, ContextManager, List, Optional, Sequence, Type, TypeVar

from .contracts import DialectPort
from .errors import DataAccessError, DbAccessError, UnsupportedOperationError
from .log import get_logger
from .mapping import RowMapper, column_names, iter_cursor, row_to_mapping
from .parameters import ParameterTranslator
from .types import ArgumentMatrix, BatchParams, MaybeRow, QueryParams, Rows

T = TypeVar("T")
R = TypeVar("R")

logger = get_logger(__name__)

# JDBC `Statement.SUCCESS_NO_INFO`: the row succeeded, its count is unknown.
SUCCESS_NO_INFO = -2

_RETURNING = re.compile(r"\breturning\b", re.IGNORECASE)


def close_quietly(resource: Any, what: str) -> None:
    """Close `resource`, logging instead of raising on failure."""

    if resource is None:
        return
    close = getattr(resource, "close", None)
    if not callable(close):
        return
    try:
        close()
    except Exception as exc:
        logger.error("close_failed", resource=what, error=str(exc))


def row_count(rowcount: Optional[int]) -> int:
    """Affected-row count of one batch row; unknown counts become `SUCCESS_NO_INFO`."""

    if rowcount is None or rowcount < 0:
        return SUCCESS_NO_INFO
    return rowcount


def column_value(row: Mapping[str, Any], name: str) -> Any:
    """Value of column `name` in `row`, matched case-insensitively; first match wins."""

    wanted = name.casefold()
    for column, value in row.items():
        if str(column).casefold() == wanted:
            return value
    return None


class DbAccess(abc.ABC):
    """Base class for execution strategies.

    Subclasses implement `_cursor()` and `release()`. Strategies that own a
    long-lived connection expose it through `connection`, which local
    transactions require.
    """

    def __init__(self, dialect: DialectPort, *, mapper: Optional[RowMapper] = None):
        self.dialect = dialect
        self.mapper = mapper or RowMapper()
        self.translator = ParameterTranslator(dialect.marker)

    @property
    def connection(self) -> Any:
        """Connection held for the life of the port, if the strategy has one."""

        return None

    @abc.abstractmethod
    def _cursor(self, *, write: bool) -> ContextManager[Any]:
        """Provide a cursor for one statement and clean up on every exit path."""

    @abc.abstractmethod
    def release(self) -> None:
        """Release held resources. Safe to call repeatedly."""

    def _prepare(self, sql: str, params: QueryParams) -> tuple[str, Optional[list]]:
        if params is None:
            return sql, None
        if isinstance(params, Mapping):
            return self.translator.translate(sql, params)
        if isinstance(params, (str, bytes)):
            raise TypeError("params must be a mapping or a sequence of values, not a string.")
        return sql, list(params)

    def _run(
        self,
        operation: str,
        sql: str,
        args: Any,
        work: Callable[[Any], R],
        *,
        write: bool = False,
    ) -> R:
        logger.debug("statement", operation=operation, sql=sql, params=args)
        try:
            with self._cursor(write=write) as cursor:
                return work(cursor)
        except DbAccessError:
            raise
        except Exception as exc:
            raise DataAccessError(operation, sql, args, exc) from exc

    @staticmethod
    def _execute(cursor: Any, sql: str, args: Optional[list]) -> None:
        if args is None:
            cursor.execute(sql)
        else:
            cursor.execute(sql, args)

    def query_records(self, sql: str, params: QueryParams, shape: Type[T]) -> List[T]:
        """Run a query and map every row onto `shape`; empty list if no rows."""

        record_shape = self.mapper.describe(shape)
        sql, args = self._prepare(sql, params)

        def work(cursor: Any) -> List[T]:
            self._execute(cursor, sql, args)
            return self.mapper.map_cursor(cursor, record_shape)

        return self._run("query_records", sql, args, work)

    def query_rows(self, sql: str, params: QueryParams = None) -> Rows:
        """Run a query and return rows as dicts in column order."""

        sql, args = self._prepare(sql, params)

        def work(cursor: Any) -> Rows:
            self._execute(cursor, sql, args)
            columns = column_names(cursor)
            return [row_to_mapping(columns, row) for row in iter_cursor(cursor)]

        return self._run("query_rows", sql, args, work)

    def query_first_record(self, sql: str, params: QueryParams, shape: Type[T]) -> Optional[T]:
        records = self.query_records(sql, params, shape)
        return records[0] if records else None

    def query_first_row(self, sql: str, params: QueryParams = None) -> MaybeRow:
        rows = self.query_rows(sql, params)
        return rows[0] if rows else None

    def query_scalar(self, sql: str, params: QueryParams, field_name: str) -> Any:
        """Value of column `field_name` in the first row, or `None`."""

        row = self.query_first_row(sql, params)
        if row is None:
            return None
        return column_value(row, field_name)

    def execute(self, sql: str, params: QueryParams = None) -> int:
        """Run an INSERT/UPDATE/DELETE and return the affected row count."""

        sql, args = self._prepare(sql, params)

        def work(cursor: Any) -> int:
            self._execute(cursor, sql, args)
            return cursor.rowcount

        return self._run("execute", sql, args, work, write=True)

    def execute_returning_keys(
        self,
        sql: str,
        params: QueryParams = None,
        *,
        key_columns: Sequence[str] = ("id",),
    ) -> MaybeRow:
        """Run an INSERT and return the generated key columns as a row.

        Raises:
            UnsupportedOperationError: The dialect cannot report generated keys.
        """

        strategy = self.dialect.generated_keys
        if strategy not in ("lastrowid", "returning"):
            raise UnsupportedOperationError(
                f"Dialect {self.dialect.name!r} cannot return generated keys."
            )
        sql, args = self._prepare(sql, params)

        if strategy == "returning":
            if not _RETURNING.search(sql):
                sql = sql.rstrip().rstrip(";") + self.dialect.returning_clause(key_columns)

            def work(cursor: Any) -> MaybeRow:
                self._execute(cursor, sql, args)
                row = cursor.fetchone()
                if row is None:
                    return None
                return row_to_mapping(column_names(cursor), row)

        else:

            def work(cursor: Any) -> MaybeRow:
                self._execute(cursor, sql, args)
                key = self.dialect.get_lastrowid(cursor)
                # MySQL reports 0 when no AUTO_INCREMENT value was generated.
                if key is None or key == 0:
                    return None
                return {key_columns[0]: key}

        return self._run("execute_returning_keys", sql, args, work, write=True)

    def execute_returning_key(self, sql: str, params: QueryParams, key_name: str = "id") -> int:
        """Run an INSERT and return the integer generated key `key_name`."""

        keys = self.execute_returning_keys(sql, params, key_columns=(key_name,))
        key = None if keys is None else column_value(keys, key_name)
        if key is None:
            raise DataAccessError("execute_returning_key", sql, params)
        return int(key)

    def execute_batch(self, sql: str, param_rows: BatchParams) -> List[int]:
        """Run one statement for every parameter row.

        Returns one affected-row count per input row, in order. Rows run one
        `execute` at a time on a single cursor. A fault on any row aborts the call with
        `DataAccessError`; no partial result is returned.
        """

        if not param_rows:
            return []
        named = [isinstance(row, Mapping) for row in param_rows]
        matrix: ArgumentMatrix
        if all(named):
            sql, matrix = self.translator.translate_batch(sql, param_rows)  # type: ignore[arg-type]
        elif not any(named):
            matrix = [list(row) for row in param_rows]
        else:
            raise TypeError("Batch rows must be all mappings or all sequences.")

        def work(cursor: Any) -> List[int]:
            counts: List[int] = []
            for args in matrix:
                cursor.execute(sql, args)
                counts.append(row_count(cursor.rowcount))
            return counts

        return self._run("execute_batch", sql, matrix, work, write=True)

    def __enter__(self) -> DbAccess:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.release()


@contextlib.contextmanager
def closing_cursor(conn: Any):
    """Open a cursor on `conn` and close it on every exit path."""

    cursor = conn.cursor()
    try:
        yield cursor
    finally:
        close_quietly(cursor, "cursor")
