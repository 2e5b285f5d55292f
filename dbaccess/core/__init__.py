"""Public core API for parameter translation, row mapping, and transactions."""

from .autocommit import get_autocommit, set_autocommit
from .contracts import (
    ConnectionPort,
    DataSourcePort,
    DbAccessPort,
    DialectPort,
    TransactionCoordinator,
)
from .db_access import SUCCESS_NO_INFO, DbAccess
from .errors import (
    DataAccessError,
    DbAccessError,
    InvalidInterceptionTargetError,
    MissingParameterError,
    UnmappableFieldError,
    UnmappableShapeError,
    UnsupportedOperationError,
)
from .log import configure_logging, get_logger
from .mapping import (
    CamelToSnake,
    FieldDescriptor,
    NamingConvention,
    RecordShape,
    RowMapper,
    describe_shape,
    reconcile_names,
    resolve_setters,
)
from .parameters import (
    ParameterTranslator,
    ParsedSql,
    parse_named_sql,
    to_argument_matrix,
    to_argument_vector,
    to_positional_form,
)
from .transaction import (
    CoordinatedTransactions,
    LocalTransactions,
    TransactionBoundary,
    TransactionInterceptor,
    TransactionManager,
    TransactionState,
    is_transactional,
    transaction,
    transactional,
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
]
