"""Core port contracts used by adapters, the port, and transactions."""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, Type, TypeVar

from .types import BatchParams, MaybeRow, QueryParams, Rows

T = TypeVar("T")


class DialectPort(Protocol):
    """Dialect behavior required by the port."""

    name: str
    paramstyle: str
    supports_returning: bool
    generated_keys: Optional[str]

    @property
    def marker(self) -> str: ...

    def q(self, ident: str) -> str: ...

    def placeholder(self, key: str = "") -> str: ...

    def returning_clause(self, columns: Sequence[str]) -> str: ...

    def get_lastrowid(self, cursor: Any) -> Optional[int]: ...


class ConnectionPort(Protocol):
    """The slice of a DB-API connection the port relies on."""

    def cursor(self) -> Any: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


class DataSourcePort(Protocol):
    """Hands out connections; closing one returns it to its owner."""

    def get_connection(self) -> ConnectionPort: ...


class TransactionCoordinator(Protocol):
    """External manager that owns a global (distributed) transaction."""

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class DbAccessPort(Protocol):
    """Operations callers depend on, independent of the execution strategy."""

    dialect: DialectPort

    def query_records(self, sql: str, params: QueryParams, shape: Type[T]) -> List[T]: ...

    def query_rows(self, sql: str, params: QueryParams = None) -> Rows: ...

    def query_first_record(
        self, sql: str, params: QueryParams, shape: Type[T]
    ) -> Optional[T]: ...

    def query_first_row(self, sql: str, params: QueryParams = None) -> MaybeRow: ...

    def query_scalar(self, sql: str, params: QueryParams, field_name: str) -> Any: ...

    def execute(self, sql: str, params: QueryParams = None) -> int: ...

    def execute_returning_keys(
        self,
        sql: str,
        params: QueryParams = None,
        *,
        key_columns: Sequence[str] = ("id",),
    ) -> MaybeRow: ...

    def execute_batch(self, sql: str, param_rows: BatchParams) -> List[int]: ...

    def release(self) -> None: ...
