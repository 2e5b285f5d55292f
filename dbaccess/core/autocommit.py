"""Read and toggle auto-commit across DB-API drivers.

Drivers disagree on the API: psycopg exposes a boolean `autocommit`
attribute, PyMySQL an `autocommit(flag)` method with `get_autocommit()`,
and `sqlite3` (legacy transaction control) uses `isolation_level is None`.
"""

from __future__ import annotations

from typing import Any

from .errors import UnsupportedOperationError

_SQLITE_DEFAULT_ISOLATION = "DEFERRED"


def get_autocommit(conn: Any) -> bool:
    """Return whether `conn` commits every statement on its own."""

    getter = getattr(conn, "get_autocommit", None)
    if callable(getter):
        return bool(getter())

    value = getattr(conn, "autocommit", None)
    if isinstance(value, bool):
        return value

    if hasattr(conn, "isolation_level"):
        return conn.isolation_level is None

    return False


def set_autocommit(conn: Any, enabled: bool) -> None:
    """Switch auto-commit on or off.

    Raises:
        UnsupportedOperationError: The connection has no known auto-commit API.
    """

    attr = getattr(conn, "autocommit", None)
    if callable(attr):
        attr(enabled)
        return
    if isinstance(attr, bool):
        conn.autocommit = enabled
        return
    if hasattr(conn, "isolation_level"):
        conn.isolation_level = None if enabled else _SQLITE_DEFAULT_ISOLATION
        return
    raise UnsupportedOperationError(
        f"{type(conn).__name__} does not expose an auto-commit setting."
    )
