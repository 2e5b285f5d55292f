"""Reference transaction coordinator for coordinator-managed transactions.

`ConnectionCoordinator` plays the role of a distributed transaction manager
for one resource. Ports take enlisted connection handles from it; all handles
share one physical connection while a global transaction is active. The
coordinator ends the transaction itself and reclaims the physical connection,
so every handle must be closed before `commit()` or `rollback()`.
"""

from __future__ import annotations

import threading
import uuid
from typing import Any, Optional

from ...core.autocommit import set_autocommit
from ...core.contracts import DataSourcePort
from ...core.db_access import close_quietly
from ...core.errors import UnsupportedOperationError
from ...core.log import get_logger

logger = get_logger(__name__)

_FORMAT_ID = 1


class EnlistedConnection:
    """Connection handle bound to a coordinator's physical connection.

    `commit()` and `rollback()` are no-ops: only the coordinator ends a
    global transaction. `close()` returns the handle to the coordinator.
    """

    def __init__(self, coordinator: ConnectionCoordinator, physical: Any):
        self._coordinator = coordinator
        self._physical = physical
        self.closed = False

    def cursor(self) -> Any:
        if self.closed:
            raise RuntimeError("connection handle is closed")
        return self._physical.cursor()

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._coordinator._release(self)


class ConnectionCoordinator:
    """Coordinates one global transaction over connections from `source`.

    Uses the DB-API two-phase commit extension (`tpc_begin`, `tpc_prepare`,
    `tpc_commit`, `tpc_rollback`) when the driver provides it, and plain
    `commit()`/`rollback()` otherwise. Outside a global transaction the work
    of a handle is committed when the last open handle closes.
    """

    def __init__(self, source: DataSourcePort):
        self.source = source
        self._physical: Any | None = None
        self._open_handles = 0
        self._active = False
        self._xid: Optional[Any] = None
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def open_handles(self) -> int:
        return self._open_handles

    def get_connection(self) -> EnlistedConnection:
        """Hand out a handle enlisted in the current (or next) transaction."""

        with self._lock:
            physical = self._ensure_physical()
            self._open_handles += 1
        return EnlistedConnection(self, physical)

    def begin(self) -> None:
        with self._lock:
            if self._active:
                raise RuntimeError("global transaction is already active")
            physical = self._ensure_physical()
            if _supports_tpc(physical):
                self._xid = physical.xid(_FORMAT_ID, uuid.uuid4().hex, "dbaccess")
                physical.tpc_begin(self._xid)
            self._active = True
        logger.debug("coordinator_begin", two_phase=self._xid is not None)

    def commit(self) -> None:
        with self._lock:
            physical = self._require_reclaimable("commit")
            try:
                if self._xid is not None:
                    physical.tpc_prepare()
                    physical.tpc_commit()
                else:
                    physical.commit()
            finally:
                self._end()
        logger.debug("coordinator_commit")

    def rollback(self) -> None:
        with self._lock:
            physical = self._require_reclaimable("rollback")
            try:
                if self._xid is not None:
                    physical.tpc_rollback()
                else:
                    physical.rollback()
            finally:
                self._end()
        logger.debug("coordinator_rollback")

    def close(self) -> None:
        """Drop the physical connection, rolling back any open work."""

        with self._lock:
            if self._physical is not None and self._active:
                rollback = getattr(self._physical, "rollback", None)
                if callable(rollback):
                    rollback()
            self._end()

    def _ensure_physical(self) -> Any:
        if self._physical is None:
            physical = self.source.get_connection()
            try:
                set_autocommit(physical, False)
            except UnsupportedOperationError:
                # DB-API connections start with auto-commit off.
                logger.debug("coordinator_autocommit_untouched", driver=type(physical).__name__)
            self._physical = physical
        return self._physical

    def _require_reclaimable(self, action: str) -> Any:
        if not self._active or self._physical is None:
            raise RuntimeError(f"cannot {action}: no active global transaction")
        if self._open_handles:
            raise RuntimeError(
                f"cannot {action}: {self._open_handles} connection handle(s) still open"
            )
        return self._physical

    def _end(self) -> None:
        self._active = False
        self._xid = None
        physical = self._physical
        self._physical = None
        close_quietly(physical, "connection")

    def _release(self, handle: EnlistedConnection) -> None:
        with self._lock:
            self._open_handles -= 1
            if self._active or self._open_handles or self._physical is None:
                return
            physical = self._physical
            try:
                physical.commit()
            finally:
                self._end()


def _supports_tpc(conn: Any) -> bool:
    return all(
        callable(getattr(conn, name, None))
        for name in ("xid", "tpc_begin", "tpc_prepare", "tpc_commit", "tpc_rollback")
    )
