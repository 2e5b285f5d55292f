"""Named-parameter translation for DB-API drivers.

SQL templates use ``:name`` placeholders. Drivers bind positionally, so a
template is rewritten with the dialect's positional marker and the mapping of
values is flattened into a vector whose order matches the placeholder
occurrences read left to right. A name used twice takes two slots.

Quoted literals, comments, and ``::`` casts are copied through untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Sequence, Tuple

from .errors import MissingParameterError
from .types import ArgumentMatrix, ArgumentVector, NamedParams

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class ParsedSql:
    """One scan of a SQL template.

    `fragments` always holds one more item than `names`; the template is
    ``fragments[0] + :names[0] + fragments[1] + ...``.
    """

    fragments: Tuple[str, ...]
    names: Tuple[str, ...]

    @property
    def placeholder_count(self) -> int:
        return len(self.names)

    def join(self, marker: str) -> str:
        """Rebuild the template with `marker` in place of every placeholder."""

        fragments = self.fragments
        if marker == "%s":
            # format paramstyle: literal percent signs must be doubled.
            fragments = tuple(part.replace("%", "%%") for part in fragments)
        out = [fragments[0]]
        for fragment in fragments[1:]:
            out.append(marker)
            out.append(fragment)
        return "".join(out)


@lru_cache(maxsize=256)
def parse_named_sql(sql: str) -> ParsedSql:
    """Split `sql` into literal fragments and placeholder names."""

    fragments: list[str] = []
    names: list[str] = []
    buf: list[str] = []
    i = 0
    n = len(sql)

    while i < n:
        ch = sql[i]
        nxt = sql[i + 1] if i + 1 < n else ""

        if ch in ("'", '"'):
            end = sql.find(ch, i + 1)
            end = n if end == -1 else end + 1
            buf.append(sql[i:end])
            i = end
            continue

        if ch == "-" and nxt == "-":
            end = sql.find("\n", i)
            end = n if end == -1 else end
            buf.append(sql[i:end])
            i = end
            continue

        if ch == "/" and nxt == "*":
            end = sql.find("*/", i + 2)
            end = n if end == -1 else end + 2
            buf.append(sql[i:end])
            i = end
            continue

        if ch == ":":
            if nxt == ":":
                buf.append("::")
                i += 2
                continue
            match = _IDENTIFIER.match(sql, i + 1)
            if match is not None:
                fragments.append("".join(buf))
                buf = []
                names.append(match.group(0))
                i = match.end()
                continue

        buf.append(ch)
        i += 1

    fragments.append("".join(buf))
    return ParsedSql(fragments=tuple(fragments), names=tuple(names))


def to_positional_form(sql: str, marker: str = "?") -> str:
    """Replace each ``:name`` occurrence with a positional `marker`."""

    return parse_named_sql(sql).join(marker)


def to_argument_vector(sql: str, params: NamedParams) -> ArgumentVector:
    """Return values from `params` in placeholder occurrence order.

    Raises:
        MissingParameterError: A placeholder name has no entry in `params`.
    """

    values: ArgumentVector = []
    for name in parse_named_sql(sql).names:
        if name not in params:
            raise MissingParameterError(name, sql)
        values.append(params[name])
    return values


def to_argument_matrix(sql: str, param_maps: Sequence[NamedParams]) -> ArgumentMatrix:
    """Build one argument vector per mapping, preserving list order."""

    return [to_argument_vector(sql, params) for params in param_maps]


class ParameterTranslator:
    """Translate named templates for one positional marker style."""

    def __init__(self, marker: str = "?"):
        self.marker = marker

    def translate(self, sql: str, params: Mapping[str, Any]) -> tuple[str, ArgumentVector]:
        return to_positional_form(sql, self.marker), to_argument_vector(sql, params)

    def translate_batch(
        self, sql: str, param_maps: Sequence[Mapping[str, Any]]
    ) -> tuple[str, ArgumentMatrix]:
        return to_positional_form(sql, self.marker), to_argument_matrix(sql, param_maps)
