"""Vendor-neutral data access over DB-API connections."""

from .core import (
    CamelToSnake,
    ConnectionPort,
    CoordinatedTransactions,
    DataAccessError,
    DataSourcePort,
    DbAccess,
    DbAccessError,
    DbAccessPort,
    DialectPort,
    FieldDescriptor,
    InvalidInterceptionTargetError,
    LocalTransactions,
    MissingParameterError,
    NamingConvention,
    ParameterTranslator,
    ParsedSql,
    RecordShape,
    RowMapper,
    SUCCESS_NO_INFO,
    TransactionBoundary,
    TransactionCoordinator,
    TransactionInterceptor,
    TransactionManager,
    TransactionState,
    UnmappableFieldError,
    UnmappableShapeError,
    UnsupportedOperationError,
    configure_logging,
    describe_shape,
    get_autocommit,
    get_logger,
    is_transactional,
    parse_named_sql,
    reconcile_names,
    resolve_setters,
    set_autocommit,
    to_argument_matrix,
    to_argument_vector,
    to_positional_form,
    transaction,
    transactional,
)
from .ports import (
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
    "CamelToSnake",
    "ConnectionPort",
    "CoordinatedTransactions",
    "DataAccessError",
    "DataSourcePort",
    "DbAccess",
    "DbAccessError",
    "DbAccessPort",
    "DialectPort",
    "FieldDescriptor",
    "InvalidInterceptionTargetError",
    "LocalTransactions",
    "MissingParameterError",
    "NamingConvention",
    "ParameterTranslator",
    "ParsedSql",
    "RecordShape",
    "RowMapper",
    "SUCCESS_NO_INFO",
    "TransactionBoundary",
    "TransactionCoordinator",
    "TransactionInterceptor",
    "TransactionManager",
    "TransactionState",
    "UnmappableFieldError",
    "UnmappableShapeError",
    "UnsupportedOperationError",
    "configure_logging",
    "describe_shape",
    "get_autocommit",
    "get_logger",
    "is_transactional",
    "parse_named_sql",
    "reconcile_names",
    "resolve_setters",
    "set_autocommit",
    "to_argument_matrix",
    "to_argument_vector",
    "to_positional_form",
    "transaction",
    "transactional",
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
