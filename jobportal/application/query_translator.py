"""
Query string translation into structured query descriptors.

Raw client query strings are parsed into tagged filter clauses over a closed
operator set, plus optional sort, population and projection directives.
Nothing the client sends reaches a store query without passing through here.

Supported syntax::

    name=John                 equality
    age[gte]=18               comparison (gt, gte, lt, lte, ne, eq)
    status=A,B                membership (also status[in]=A,B)
    name=/^jo/i               prefix/substring text match, case-insensitive
    company.name=Acme         nested dot path
    sort=-age,name            descending on age, then ascending on name
    populate=role,company     expand references
    fields=name,email         include projection (fields=-password excludes)
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl

import structlog

from jobportal.domain.exceptions import ValidationError
from jobportal.domain.query import (
    FilterClause,
    FilterOperator,
    Projection,
    QueryDescriptor,
    SortField,
    TextPattern,
)

logger = structlog.get_logger(__name__)

PAGINATION_KEYS = frozenset({"current", "pageSize"})
SORT_KEY = "sort"
POPULATE_KEY = "populate"
FIELDS_KEY = "fields"

_NAME = r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*"
_FIELD_NAME = re.compile(rf"^{_NAME}$")
_FILTER_KEY = re.compile(rf"^(?P<field>{_NAME})(?:\[(?P<op>[^\[\]]*)\])?$")
_PATTERN_VALUE = re.compile(r"^/(?P<body>.*)/(?P<flags>[gimsuy]*)$", re.DOTALL)
_INT = re.compile(r"^-?\d+$")
_FLOAT = re.compile(r"^-?(?:\d+\.\d*|\.\d+)(?:[eE][-+]?\d+)?$")

RawQuery = Union[str, Mapping[str, Any], List[Tuple[str, str]], None]


def coerce_value(raw: str) -> Any:
    """Type a query string value: int, float, bool, null, else string."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw == "null":
        return None
    if _INT.match(raw):
        return int(raw)
    if _FLOAT.match(raw):
        return float(raw)
    return raw


def parse_text_pattern(body: str, flags: str = "") -> TextPattern:
    anchored = body.startswith("^")
    return TextPattern(
        text=body[1:] if anchored else body,
        anchored=anchored,
        case_insensitive="i" in flags,
    )


def _split_list(raw: str) -> List[Any]:
    return [coerce_value(part.strip()) for part in raw.split(",") if part.strip() != ""]


def _check_field(name: str) -> str:
    if not _FIELD_NAME.match(name):
        raise ValidationError(f"Invalid field name in query: {name!r}")
    return name


def _pairs(raw: RawQuery) -> List[Tuple[str, str]]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return parse_qsl(raw.lstrip("?"), keep_blank_values=True)
    if isinstance(raw, Mapping):
        pairs = []
        for key, value in raw.items():
            values = value if isinstance(value, (list, tuple)) else [value]
            pairs.extend((key, "" if v is None else str(v)) for v in values)
        return pairs
    return [(str(k), str(v)) for k, v in raw]


def _clause(key: str, raw_value: str) -> FilterClause:
    match = _FILTER_KEY.match(key)
    if not match:
        raise ValidationError(f"Invalid filter key in query: {key!r}")

    field_name = match.group("field")
    op_name = match.group("op")
    operator = None
    if op_name is not None:
        try:
            operator = FilterOperator(op_name.lower())
        except ValueError:
            # Unknown operators degrade to plain equality
            logger.debug("Unknown filter operator treated as equality", field=field_name, operator=op_name)
            return FilterClause(field_name, FilterOperator.EQ, coerce_value(raw_value))

    if operator is FilterOperator.IN:
        return FilterClause(field_name, FilterOperator.IN, _split_list(raw_value))
    if operator is FilterOperator.REGEX:
        pattern = _PATTERN_VALUE.match(raw_value)
        if pattern:
            return FilterClause(
                field_name,
                FilterOperator.REGEX,
                parse_text_pattern(pattern.group("body"), pattern.group("flags")),
            )
        return FilterClause(field_name, FilterOperator.REGEX, parse_text_pattern(raw_value))
    if operator is not None:
        return FilterClause(field_name, operator, coerce_value(raw_value))

    pattern = _PATTERN_VALUE.match(raw_value)
    if pattern and raw_value != "/":
        return FilterClause(
            field_name,
            FilterOperator.REGEX,
            parse_text_pattern(pattern.group("body"), pattern.group("flags")),
        )
    if "," in raw_value:
        return FilterClause(field_name, FilterOperator.IN, _split_list(raw_value))
    return FilterClause(field_name, FilterOperator.EQ, coerce_value(raw_value))


def _merge_equalities(clauses: List[FilterClause]) -> List[FilterClause]:
    """Repeated plain equality keys (``a=1&a=2``) collapse into one ``in``."""
    merged: List[FilterClause] = []
    positions: Dict[str, int] = {}
    for clause in clauses:
        if clause.operator is not FilterOperator.EQ:
            merged.append(clause)
            continue
        if clause.field not in positions:
            positions[clause.field] = len(merged)
            merged.append(clause)
            continue
        index = positions[clause.field]
        previous = merged[index]
        values = previous.value if previous.operator is FilterOperator.IN else [previous.value]
        merged[index] = FilterClause(clause.field, FilterOperator.IN, [*values, clause.value])
    return merged


def _parse_sort(raw: str) -> Optional[List[SortField]]:
    fields = []
    for token in re.split(r"[,\s]+", raw.strip()):
        if not token:
            continue
        descending = token.startswith("-")
        name = token.lstrip("+-")
        fields.append(SortField(field=_check_field(name), descending=descending))
    return fields or None


def _parse_populate(raw: str) -> Optional[List[str]]:
    names = [_check_field(name.strip()) for name in raw.split(",") if name.strip()]
    return names or None


def _parse_fields(raw: str) -> Optional[Projection]:
    tokens = [token for token in re.split(r"[,\s]+", raw.strip()) if token]
    if not tokens:
        return None
    included = {_check_field(t) for t in tokens if not t.startswith("-")}
    if included:
        return Projection(fields=frozenset(included))
    return Projection(fields=frozenset(_check_field(t[1:]) for t in tokens), exclude=True)


def translate(raw: RawQuery) -> QueryDescriptor:
    """
    Translate a raw query string into a QueryDescriptor.

    Args:
        raw: Query string (with or without a leading ``?``), a mapping of
            parameters, or a list of key/value pairs

    Returns:
        Descriptor with filter clauses, sort, population and projection;
        the pagination keys ``current`` and ``pageSize`` are stripped

    Raises:
        ValidationError: If a field name is not a plain identifier or dot path
    """
    descriptor = QueryDescriptor()
    clauses: List[FilterClause] = []

    for key, value in _pairs(raw):
        if key in PAGINATION_KEYS:
            continue
        if key == SORT_KEY:
            descriptor.sort = _parse_sort(value)
        elif key == POPULATE_KEY:
            descriptor.population = _parse_populate(value)
        elif key == FIELDS_KEY:
            descriptor.projection = _parse_fields(value)
        else:
            clauses.append(_clause(key, value))

    descriptor.filter = _merge_equalities(clauses)
    return descriptor


__all__ = ["translate", "coerce_value", "parse_text_pattern", "PAGINATION_KEYS"]
