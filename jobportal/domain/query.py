"""
Structured query descriptors shared by the query translator and document stores.

Client query strings are never handed to a store verbatim; they are parsed
into tagged clauses over a closed operator set and every store adapter
compiles those clauses into its own query language.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple


class FilterOperator(str, Enum):
    """Closed set of supported filter operators."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    REGEX = "regex"


@dataclass(frozen=True)
class TextPattern:
    """
    Safe text pattern used by REGEX clauses.

    Only a leading ``^`` anchor is honoured; the remaining text is matched
    literally, either as a prefix (anchored) or as a substring.
    """

    text: str
    anchored: bool = False
    case_insensitive: bool = False


@dataclass(frozen=True)
class FilterClause:
    """A single ``field <operator> value`` predicate."""

    field: str
    operator: FilterOperator
    value: Any

    @property
    def path(self) -> Tuple[str, ...]:
        return tuple(self.field.split("."))


@dataclass(frozen=True)
class SortField:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Projection:
    """
    Field projection; either an include list or an exclude list.

    Dot paths reach into nested records (and into each item of a list of
    records): ``role.name`` keeps ``role`` trimmed to its ``name``, while
    ``-history.updatedBy`` drops that key from every history entry.
    """

    fields: FrozenSet[str]
    exclude: bool = False

    def _paths(self) -> List[Tuple[str, ...]]:
        return [tuple(name.split(".")) for name in self.fields]

    def apply(self, document: Dict[str, Any]) -> Dict[str, Any]:
        if self.exclude:
            return _exclude_paths(document, self._paths())
        shaped = _include_paths(document, self._paths())
        if "id" in document:
            shaped["id"] = document["id"]
        return shaped

    def without(self, field_name: str) -> "Projection":
        """Return a projection that never yields ``field_name`` or anything below it."""
        if self.exclude:
            return Projection(fields=self.fields | {field_name}, exclude=True)
        kept = {name for name in self.fields if name.split(".", 1)[0] != field_name}
        return Projection(fields=frozenset(kept), exclude=False)


def _group(paths: Sequence[Tuple[str, ...]]) -> Dict[str, List[Tuple[str, ...]]]:
    grouped: Dict[str, List[Tuple[str, ...]]] = {}
    for path in paths:
        grouped.setdefault(path[0], []).append(path[1:])
    return grouped


def _include_paths(value: Any, paths: Sequence[Tuple[str, ...]]) -> Any:
    # An empty remainder means the whole value was requested
    if any(not path for path in paths):
        return value
    if isinstance(value, list):
        return [_include_paths(item, paths) for item in value]
    if not isinstance(value, dict):
        return value
    grouped = _group(paths)
    return {k: _include_paths(v, grouped[k]) for k, v in value.items() if k in grouped}


def _exclude_paths(value: Any, paths: Sequence[Tuple[str, ...]]) -> Any:
    if isinstance(value, list):
        return [_exclude_paths(item, paths) for item in value]
    if not isinstance(value, dict):
        return value
    dropped = {path[0] for path in paths if len(path) == 1}
    nested = _group([path for path in paths if len(path) > 1])
    return {
        k: _exclude_paths(v, nested[k]) if k in nested else v
        for k, v in value.items()
        if k not in dropped
    }


@dataclass
class QueryDescriptor:
    """Result of translating a raw query string."""

    filter: List[FilterClause] = field(default_factory=list)
    sort: Optional[List[SortField]] = None
    population: Optional[List[str]] = None
    projection: Optional[Projection] = None


def resolve_path(document: Dict[str, Any], path: Sequence[str]) -> Tuple[bool, Any]:
    """Walk a dot path through nested dicts; returns (found, value)."""
    current: Any = document
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return False, None
        current = current[key]
    return True, current


__all__ = [
    "FilterOperator",
    "TextPattern",
    "FilterClause",
    "SortField",
    "Projection",
    "QueryDescriptor",
    "resolve_path",
]
