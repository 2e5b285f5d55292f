"""Exception taxonomy raised by the data-access layer."""

from __future__ import annotations

from typing import Any, Optional


class DbAccessError(Exception):
    """Base class for every error raised by `dbaccess`."""


class MissingParameterError(DbAccessError, KeyError):
    """Named placeholder has no entry in the parameter mapping."""

    def __init__(self, name: str, sql: str):
        super().__init__(name)
        self.name = name
        self.sql = sql

    def __str__(self) -> str:
        return f"No value supplied for the SQL parameter {self.name!r}: sql={self.sql}"


class UnmappableShapeError(DbAccessError, TypeError):
    """Record type cannot be used as a row-mapping target."""

    def __init__(self, shape: Any, reason: str):
        name = getattr(shape, "__name__", repr(shape))
        super().__init__(f"{name} cannot be mapped from rows: {reason}")
        self.shape = shape


class UnmappableFieldError(DbAccessError, AttributeError):
    """Record field has no writable setter."""

    def __init__(self, shape: Any, field: str, reason: str):
        name = getattr(shape, "__name__", repr(shape))
        super().__init__(f"{name}.{field} cannot be set from a row: {reason}")
        self.shape = shape
        self.field = field


class DataAccessError(DbAccessError):
    """Engine-level fault wrapped with the statement that caused it.

    Attributes:
        operation: Port operation name, e.g. ``"query_rows"``.
        sql: SQL text as sent to the driver.
        params: Snapshot of the bound arguments.
        cause: Underlying driver exception.
    """

    def __init__(
        self,
        operation: str,
        sql: str,
        params: Any = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(f"{operation}: sql={sql}, params={params!r}")
        self.operation = operation
        self.sql = sql
        self.params = params
        self.cause = cause


class UnsupportedOperationError(DbAccessError, NotImplementedError):
    """Execution engine lacks a capability the operation needs."""


class InvalidInterceptionTargetError(DbAccessError, TypeError):
    """Transactional operation was not called with a usable port."""
