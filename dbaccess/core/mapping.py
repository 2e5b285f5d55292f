"""Row-to-record mapping for dataclass record types.

A record type is described once per mapping operation as an explicit table of
`FieldDescriptor` entries (field name, declared type, expected column, and a
setter). Column positions are then resolved once per cursor from
`cursor.description`, and every row is applied through that resolution.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Mapping
from dataclasses import MISSING, dataclass, fields, is_dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Type, TypeVar

from .errors import UnmappableFieldError, UnmappableShapeError
from .types import Row

T = TypeVar("T")

Setter = Callable[[Any, Any], None]

_UPPER_BOUNDARY = re.compile(r"(?=[A-Z])")


class NamingConvention:
    """Maps a record field name to the column name expected in result rows."""

    name = "identity"

    def field_to_column(self, field_name: str) -> str:
        return field_name


class CamelToSnake(NamingConvention):
    """``fooBarBaz`` -> ``foo_bar_baz``; snake_case names pass through."""

    name = "camel_to_snake"

    def field_to_column(self, field_name: str) -> str:
        words = [word for word in _UPPER_BOUNDARY.split(field_name) if word]
        return "_".join(words).lower()


@dataclass(frozen=True)
class FieldDescriptor:
    """One mapped field of a record type."""

    name: str
    type: Any
    column: str
    setter: Setter


@dataclass(frozen=True)
class RecordShape:
    """Field table for one record type under one naming convention."""

    model: type
    convention: NamingConvention
    fields: tuple[FieldDescriptor, ...]

    def resolve_columns(self, columns: Sequence[str]) -> List[tuple[FieldDescriptor, int]]:
        """Pair each field with the position of its column in `columns`.

        Matching is case-insensitive against the expected column name or the
        field name itself; the first matching column wins. Fields without a
        column are left out and keep their construction-time default.
        """

        folded = [str(column).casefold() for column in columns]
        resolved: List[tuple[FieldDescriptor, int]] = []
        for descriptor in self.fields:
            wanted = {descriptor.column.casefold(), descriptor.name.casefold()}
            for position, column in enumerate(folded):
                if column in wanted:
                    resolved.append((descriptor, position))
                    break
        return resolved


def is_synthetic(field_name: str) -> bool:
    """Private/generated names are never mapped from rows."""

    return field_name.startswith("_")


def reconcile_names(
    field_names: Sequence[str],
    convention: Optional[NamingConvention] = None,
) -> Dict[str, str]:
    """Return ``field -> expected column`` for every non-synthetic field."""

    convention = convention or CamelToSnake()
    return {
        name: convention.field_to_column(name)
        for name in field_names
        if not is_synthetic(name)
    }


def resolve_setters(field_names: Sequence[str], shape: type) -> Dict[str, Setter]:
    """Resolve the write operation for each field of `shape`.

    Raises:
        UnmappableFieldError: Field is unknown, the dataclass is frozen, or a
            read-only property shadows the field.
    """

    declared = {f.name for f in fields(shape)} if is_dataclass(shape) else set()
    frozen = bool(getattr(getattr(shape, "__dataclass_params__", None), "frozen", False))

    setters: Dict[str, Setter] = {}
    for name in field_names:
        if name not in declared:
            raise UnmappableFieldError(shape, name, "not a declared field")
        if frozen:
            raise UnmappableFieldError(shape, name, "dataclass is frozen")
        attr = inspect.getattr_static(shape, name, None)
        if isinstance(attr, property) and attr.fset is None:
            raise UnmappableFieldError(shape, name, "read-only property")
        setters[name] = _attribute_setter(name)
    return setters


def _attribute_setter(name: str) -> Setter:
    def set_value(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return set_value


def describe_shape(
    shape: Type[Any],
    convention: Optional[NamingConvention] = None,
) -> RecordShape:
    """Build the field table for `shape`.

    A field may name its column explicitly with
    ``field(metadata={"column": "..."})``.

    Raises:
        UnmappableShapeError: `shape` is not a dataclass type or cannot be
            constructed without arguments.
    """

    if not isinstance(shape, type) or not is_dataclass(shape):
        raise UnmappableShapeError(shape, "record types must be dataclasses")

    convention = convention or CamelToSnake()
    declared = list(fields(shape))
    for f in declared:
        if f.init and f.default is MISSING and f.default_factory is MISSING:
            raise UnmappableShapeError(
                shape,
                f"field {f.name!r} has no default, so the type has no zero-argument constructor",
            )

    mapped = [f for f in declared if not is_synthetic(f.name)]
    columns = reconcile_names([f.name for f in mapped], convention)
    setters = resolve_setters([f.name for f in mapped], shape)

    descriptors = []
    for f in mapped:
        column = f.metadata.get("column") or columns[f.name]
        descriptors.append(
            FieldDescriptor(name=f.name, type=f.type, column=column, setter=setters[f.name])
        )
    return RecordShape(model=shape, convention=convention, fields=tuple(descriptors))


def column_names(cursor: Any) -> List[str]:
    """Column names of the cursor's current result set."""

    description = getattr(cursor, "description", None) or ()
    return [d[0] for d in description]


def row_to_mapping(columns: Sequence[str], row: Any) -> Row:
    """Normalize one driver row (tuple, mapping, or `sqlite3.Row`) to a dict."""

    if isinstance(row, Mapping):
        return dict(row)
    if isinstance(row, (tuple, list)) or hasattr(row, "keys"):
        if not columns:
            raise TypeError("Cursor has no description; cannot map tuple rows to dict.")
        return {column: row[i] for i, column in enumerate(columns)}
    raise TypeError(f"Unsupported row type: {type(row)}")


def iter_cursor(cursor: Any) -> Iterator[Any]:
    """Yield rows one at a time; a cursor is single-pass."""

    while True:
        row = cursor.fetchone()
        if row is None:
            return
        yield row


def _cell(row: Any, position: int, columns: Sequence[str]) -> Any:
    if isinstance(row, Mapping):
        return row[columns[position]]
    return row[position]


class RowMapper:
    """Map cursor rows onto dataclass record instances."""

    def __init__(self, convention: Optional[NamingConvention] = None):
        self.convention = convention or CamelToSnake()

    def describe(self, shape: Type[T]) -> RecordShape:
        return describe_shape(shape, self.convention)

    def map_rows(self, cursor: Any, shape: Type[T]) -> List[T]:
        """Read every remaining row of `cursor` into new `shape` instances.

        The field table and the column resolution are built once for the
        whole cursor. If reading fails part way, the exception propagates and
        the rows mapped so far are dropped.
        """

        return self.map_cursor(cursor, self.describe(shape))

    def map_cursor(self, cursor: Any, record_shape: RecordShape) -> List[Any]:
        """Same as `map_rows` for a field table that is already built."""

        columns = column_names(cursor)
        resolved = record_shape.resolve_columns(columns)

        records: List[Any] = []
        for row in iter_cursor(cursor):
            instance = record_shape.model()
            for descriptor, position in resolved:
                descriptor.setter(instance, _cell(row, position, columns))
            records.append(instance)
        return records

    def map_row(self, row: Mapping[str, Any], shape: Type[T]) -> T:
        """Map one already-normalized row mapping onto a new `shape` instance."""

        record_shape = self.describe(shape)
        columns = list(row.keys())
        instance = shape()
        for descriptor, position in record_shape.resolve_columns(columns):
            descriptor.setter(instance, row[columns[position]])
        return instance
