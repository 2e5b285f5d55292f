"""Per-call execution strategy backed by a data source."""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterator
from typing import Any, Optional

from ...core.contracts import DataSourcePort, DialectPort
from ...core.db_access import DbAccess, close_quietly, closing_cursor
from ...core.log import get_logger
from ...core.mapping import RowMapper

logger = get_logger(__name__)


class ConnectDataSource:
    """Data source that opens a new connection with `connect` on every request."""

    def __init__(self, connect: Callable[..., Any], *connect_args: Any, **connect_kwargs: Any):
        self._connect = connect
        self._connect_args = connect_args
        self._connect_kwargs = connect_kwargs

    def get_connection(self) -> Any:
        return self._connect(*self._connect_args, **self._connect_kwargs)


class DataSourceDbAccess(DbAccess):
    """Port that borrows a connection from `source` for each operation.

    Writes are committed before the connection is closed and rolled back on
    failure. No state is shared between calls, so the port is as safe for
    concurrent callers as its data source.
    """

    def __init__(
        self,
        source: DataSourcePort,
        dialect: DialectPort,
        *,
        mapper: Optional[RowMapper] = None,
    ):
        super().__init__(dialect, mapper=mapper)
        self.source = source

    @contextlib.contextmanager
    def _cursor(self, *, write: bool) -> Iterator[Any]:
        conn = self.source.get_connection()
        try:
            with closing_cursor(conn) as cursor:
                yield cursor
            if write:
                conn.commit()
        except BaseException:
            if write:
                _rollback_quietly(conn)
            raise
        finally:
            close_quietly(conn, "connection")

    def release(self) -> None:
        """Connections are returned after every call; nothing is held."""


def _rollback_quietly(conn: Any) -> None:
    try:
        conn.rollback()
    except Exception as exc:
        logger.warning("rollback_failed", error=str(exc))
