"""Connection-scoped execution strategy."""

from __future__ import annotations

from typing import Any, ContextManager, Optional

from ...core.autocommit import set_autocommit
from ...core.contracts import DataSourcePort, DialectPort
from ...core.db_access import DbAccess, close_quietly, closing_cursor
from ...core.mapping import RowMapper


class ConnectionDbAccess(DbAccess):
    """Port bound to one exclusively owned DB-API connection.

    Each operation opens and closes its own cursor; the connection stays open
    across calls until `release()`, so several operations can share one
    transaction. Not safe for concurrent use.
    """

    def __init__(
        self,
        conn: Any,
        dialect: DialectPort,
        *,
        autocommit: Optional[bool] = True,
        mapper: Optional[RowMapper] = None,
    ):
        """Create connection-scoped port.

        Args:
            conn: DB-API connection object.
            dialect: Concrete SQL dialect instance.
            autocommit: Auto-commit mode to apply now; ``None`` leaves the
                connection as it is.
            mapper: Row mapper to use for typed queries.
        """

        super().__init__(dialect, mapper=mapper)
        self._conn: Any | None = conn
        if autocommit is not None:
            set_autocommit(conn, autocommit)

    @classmethod
    def from_data_source(
        cls,
        source: DataSourcePort,
        dialect: DialectPort,
        *,
        autocommit: Optional[bool] = None,
        mapper: Optional[RowMapper] = None,
    ) -> ConnectionDbAccess:
        """Take one connection from `source` and hold it for the port's life."""

        return cls(source.get_connection(), dialect, autocommit=autocommit, mapper=mapper)

    @property
    def connection(self) -> Any:
        return self._conn

    @property
    def released(self) -> bool:
        return self._conn is None

    def _require_open_connection(self) -> Any:
        if self._conn is None:
            raise RuntimeError("connection is closed")
        return self._conn

    def _cursor(self, *, write: bool) -> ContextManager[Any]:
        return closing_cursor(self._require_open_connection())

    def release(self) -> None:
        """Close the connection; later calls do nothing."""

        conn = self._conn
        self._conn = None
        close_quietly(conn, "connection")
