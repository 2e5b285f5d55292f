"""Transaction interception for operations that take a port first.

An operation is marked transactional with `@transaction` (marker only, bound
later with `TransactionInterceptor.bind`) or `@transactional` (marked and
wrapped at once). The wrapper begins a transaction against the port passed as
the operation's first parameter, commits on return, and rolls back on any
exception before re-raising it.

Two managers decide what begin/commit/rollback mean:

- `LocalTransactions` turns auto-commit off on the port's connection, then
  commits or rolls back on that connection *before* restoring auto-commit.
- `CoordinatedTransactions` delegates to an external coordinator and
  releases the port *before* asking the coordinator to commit or roll back,
  because the coordinator reclaims the physical connection when it ends the
  global transaction.
"""

from __future__ import annotations

import functools
import inspect
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence, TypeVar

from .autocommit import get_autocommit, set_autocommit
from .contracts import TransactionCoordinator
from .db_access import DbAccess
from .errors import InvalidInterceptionTargetError
from .log import get_logger

F = TypeVar("F", bound=Callable[..., Any])

logger = get_logger(__name__)

MARKER = "__transactional__"


class TransactionState(str, Enum):
    """Lifecycle of one transactional invocation."""

    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


_TRANSITIONS: Dict[TransactionState, frozenset[TransactionState]] = {
    TransactionState.IDLE: frozenset({TransactionState.ACTIVE}),
    TransactionState.ACTIVE: frozenset(
        {TransactionState.COMMITTED, TransactionState.ROLLED_BACK}
    ),
    TransactionState.COMMITTED: frozenset(),
    TransactionState.ROLLED_BACK: frozenset(),
}


class TransactionBoundary:
    """Scope of one transactional invocation.

    Holds the state machine plus whatever a manager must remember between
    begin and commit/rollback (the previous auto-commit flag).
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.state = TransactionState.IDLE
        self.saved_autocommit: Optional[bool] = None

    def _move(self, target: TransactionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Transaction for {self.operation} cannot go from "
                f"{self.state.value} to {target.value}."
            )
        self.state = target

    def begin(self) -> None:
        self._move(TransactionState.ACTIVE)

    def commit(self) -> None:
        self._move(TransactionState.COMMITTED)

    def rollback(self) -> None:
        self._move(TransactionState.ROLLED_BACK)


class TransactionManager(Protocol):
    """Begin/commit/rollback against the resource reachable from a port."""

    def validate(self, port: DbAccess) -> None: ...

    def begin(self, port: DbAccess, boundary: TransactionBoundary) -> None: ...

    def commit(self, port: DbAccess, boundary: TransactionBoundary) -> None: ...

    def rollback(self, port: DbAccess, boundary: TransactionBoundary) -> None: ...


class LocalTransactions:
    """Transactions on the port's own connection via auto-commit toggling."""

    def validate(self, port: DbAccess) -> None:
        if port.connection is None:
            raise InvalidInterceptionTargetError(
                f"{type(port).__name__} holds no connection; "
                "local transactions need a connection-scoped port."
            )

    def begin(self, port: DbAccess, boundary: TransactionBoundary) -> None:
        conn = port.connection
        boundary.saved_autocommit = get_autocommit(conn)
        set_autocommit(conn, False)

    def commit(self, port: DbAccess, boundary: TransactionBoundary) -> None:
        conn = port.connection
        conn.commit()
        set_autocommit(conn, bool(boundary.saved_autocommit))

    def rollback(self, port: DbAccess, boundary: TransactionBoundary) -> None:
        conn = port.connection
        if conn is None:
            return
        try:
            conn.rollback()
        finally:
            set_autocommit(conn, bool(boundary.saved_autocommit))


class CoordinatedTransactions:
    """Transactions driven by an external coordinator."""

    def __init__(self, coordinator: TransactionCoordinator):
        self.coordinator = coordinator

    def validate(self, port: DbAccess) -> None:
        if getattr(port, "released", False):
            raise InvalidInterceptionTargetError(
                f"{type(port).__name__} is already released."
            )

    def begin(self, port: DbAccess, boundary: TransactionBoundary) -> None:
        self.coordinator.begin()

    def commit(self, port: DbAccess, boundary: TransactionBoundary) -> None:
        port.release()
        self.coordinator.commit()

    def rollback(self, port: DbAccess, boundary: TransactionBoundary) -> None:
        port.release()
        self.coordinator.rollback()


def _port_parameter(fn: Callable[..., Any]) -> tuple[int, Optional[str]]:
    """Position and name of the parameter that carries the port."""

    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return 0, None
    index = 1 if params and params[0].name in ("self", "cls") else 0
    name = params[index].name if index < len(params) else None
    return index, name


class TransactionInterceptor:
    """Wraps operations in a transaction run by `manager`."""

    def __init__(self, manager: Optional[TransactionManager] = None):
        self.manager: TransactionManager = manager or LocalTransactions()

    def wrap(self, fn: F) -> F:
        """Return `fn` wrapped in a transaction boundary."""

        index, name = _port_parameter(fn)

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            port = self._find_port(fn, args, kwargs, index, name)
            return self.invoke(fn, port, args, kwargs)

        setattr(wrapper, MARKER, True)
        return wrapper  # type: ignore[return-value]

    def bind(self, obj: Any) -> Any:
        """Wrap every method of `obj` marked with `@transaction`, in place."""

        for attr in dir(type(obj)):
            member = inspect.getattr_static(type(obj), attr, None)
            if isinstance(member, (staticmethod, classmethod)):
                member = member.__func__
            if callable(member) and is_transactional(member):
                setattr(obj, attr, self.wrap(getattr(obj, attr)))
        return obj

    def invoke(
        self,
        fn: Callable[..., Any],
        port: DbAccess,
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
    ) -> Any:
        boundary = TransactionBoundary(getattr(fn, "__qualname__", repr(fn)))
        self.manager.begin(port, boundary)
        boundary.begin()
        try:
            result = fn(*args, **kwargs)
            self.manager.commit(port, boundary)
            boundary.commit()
        except BaseException as exc:
            self._rollback(port, boundary, exc)
            raise
        logger.debug("transaction_committed", operation=boundary.operation)
        return result

    def _find_port(
        self,
        fn: Callable[..., Any],
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
        index: int,
        name: Optional[str],
    ) -> DbAccess:
        if index < len(args):
            port = args[index]
        elif name is not None and name in kwargs:
            port = kwargs[name]
        else:
            port = None
        if not isinstance(port, DbAccess):
            raise InvalidInterceptionTargetError(
                f"First parameter of {getattr(fn, '__qualname__', fn)!s} must be a "
                f"DbAccess instance, not {type(port).__name__}."
            )
        self.manager.validate(port)
        return port

    def _rollback(self, port: DbAccess, boundary: TransactionBoundary, exc: BaseException) -> None:
        logger.debug("transaction_rollback", operation=boundary.operation, error=repr(exc))
        try:
            self.manager.rollback(port, boundary)
        except Exception as rollback_exc:
            logger.error(
                "transaction_rollback_failed",
                operation=boundary.operation,
                error=repr(rollback_exc),
                cause=repr(exc),
            )
        finally:
            if boundary.state is TransactionState.ACTIVE:
                boundary.rollback()


def is_transactional(fn: Any) -> bool:
    return bool(getattr(fn, MARKER, False))


def transaction(fn: F) -> F:
    """Mark `fn` as transactional without wrapping it (see `bind`)."""

    setattr(fn, MARKER, True)
    return fn


def transactional(
    fn: Optional[F] = None,
    *,
    manager: Optional[TransactionManager] = None,
    coordinator: Optional[TransactionCoordinator] = None,
) -> Any:
    """Mark and wrap `fn` in a transaction.

    Usable bare (``@transactional``, local transactions) or with
    ``manager=`` / ``coordinator=`` to pick how the transaction is run.
    """

    if manager is not None and coordinator is not None:
        raise ValueError("Pass either manager or coordinator, not both.")
    if coordinator is not None:
        manager = CoordinatedTransactions(coordinator)
    interceptor = TransactionInterceptor(manager)
    if fn is None:
        return interceptor.wrap
    return interceptor.wrap(fn)
