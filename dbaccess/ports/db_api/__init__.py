"""DB-API execution strategies and dialect exports."""

from .connection import ConnectionDbAccess
from .coordinator import ConnectionCoordinator, EnlistedConnection
from .data_source import ConnectDataSource, DataSourceDbAccess
from .dialects import Dialect, MySQLDialect, PostgresDialect, SQLiteDialect, dialect_for

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
