"""Public port exports for concrete adapter implementations."""

from .db_api import (
    ConnectDataSource,
    ConnectionCoordinator,
    ConnectionDbAccess,
    DataSourceDbAccess,
    Dialect,
    EnlistedConnection,
    MySQLDialect,
    PostgresDialect,
    SQLiteDialect,
    dialect_for,
)

__all__ = [
    "ConnectDataSource",
    "ConnectionCoordinator",
    "ConnectionDbAccess",
    "DataSourceDbAccess",
    "Dialect",
    "EnlistedConnection",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "dialect_for",
]
