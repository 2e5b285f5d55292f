"""Concrete SQL dialect implementations for DB-API adapters."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Type


class Dialect:
    """Base dialect that defines placeholder and generated-key behavior.

    `generated_keys` names how inserted keys are read back:
    ``"lastrowid"`` uses `cursor.lastrowid`, ``"returning"`` appends a
    `RETURNING` clause, and ``None`` means the engine cannot report them.
    """

    name: str = "generic"
    paramstyle: str = "qmark"
    quote_char: str = '"'
    supports_returning: bool = False
    generated_keys: Optional[str] = None

    def q(self, ident: str) -> str:
        """Quote SQL identifier."""

        return f"{self.quote_char}{ident}{self.quote_char}"

    def placeholder(self, key: str = "") -> str:
        """Return parameter placeholder for current param style."""

        if self.paramstyle == "named":
            return f":{key}"
        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        raise ValueError(f"Unsupported paramstyle: {self.paramstyle}")

    @property
    def marker(self) -> str:
        """Positional marker that named templates are rewritten to."""

        if self.paramstyle == "named":
            raise ValueError("Named paramstyle has no positional marker.")
        return self.placeholder()

    def returning_clause(self, columns: Sequence[str]) -> str:
        """Return `RETURNING` clause when dialect supports it."""

        if self.supports_returning and columns:
            return " RETURNING " + ", ".join(self.q(name) for name in columns)
        return ""

    def get_lastrowid(self, cursor: Any) -> Optional[int]:
        """Extract `lastrowid` from DB-API cursor when available."""

        return getattr(cursor, "lastrowid", None)


class SQLiteDialect(Dialect):
    """SQLite dialect (`?` parameters, keys from `lastrowid`)."""

    name = "sqlite"
    paramstyle = "qmark"
    quote_char = '"'
    supports_returning = True
    generated_keys = "lastrowid"


class PostgresDialect(Dialect):
    """PostgreSQL dialect (`%s` positional parameters, keys via `RETURNING`)."""

    name = "postgres"
    paramstyle = "format"
    quote_char = '"'
    supports_returning = True
    generated_keys = "returning"


class MySQLDialect(Dialect):
    """MySQL dialect (`%s` positional parameters, keys from `lastrowid`)."""

    name = "mysql"
    paramstyle = "format"
    quote_char = "`"
    supports_returning = False
    generated_keys = "lastrowid"


_DIALECTS: Dict[str, Type[Dialect]] = {
    "sqlite": SQLiteDialect,
    "postgres": PostgresDialect,
    "postgresql": PostgresDialect,
    "mysql": MySQLDialect,
    "generic": Dialect,
}


def dialect_for(name: str) -> Dialect:
    """Return a dialect instance for a backend name such as ``"postgresql"``."""

    try:
        return _DIALECTS[name.lower()]()
    except KeyError:
        known = ", ".join(sorted(_DIALECTS))
        raise ValueError(f"Unknown dialect {name!r}; expected one of: {known}.") from None
