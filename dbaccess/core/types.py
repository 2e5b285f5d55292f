"""Shared core type aliases used across contracts, mapping, and ports."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

NamedParams = Mapping[str, Any]
PositionalParams = Sequence[Any]
QueryParams = Union[NamedParams, PositionalParams, None]

ArgumentVector = List[Any]
ArgumentMatrix = List[ArgumentVector]
BatchParams = Sequence[Union[NamedParams, PositionalParams]]

Row = Dict[str, Any]
Rows = List[Row]
MaybeRow = Optional[Row]
