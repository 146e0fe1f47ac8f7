"""Query model: a recursive predicate tree and the criteria it is built from.

Queries may be built from the node classes directly or from the dict form
used on the wire (``{"$and": [...]}``, ``{"age": {"$gt": 6}}``,
``{"$text": "a b"}``); ``parse_query`` converts the latter and rejects any
node that matches none of the shapes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from ..core.errors import InvalidQueryError
from ..core.types import Value

AND_KEY = "$and"
OR_KEY = "$or"
TEXT_KEY = "$text"


@dataclass(frozen=True)
class Gt:
    """Field value strictly greater than ``value``."""

    value: Value


@dataclass(frozen=True)
class Lt:
    """Field value strictly less than ``value``."""

    value: Value


@dataclass(frozen=True)
class Eq:
    """Field value strictly equal to ``value``."""

    value: Value


@dataclass(frozen=True)
class In:
    """Field value strictly equal to one of ``values``."""

    values: tuple[Value, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


Criterion = Union[Gt, Lt, Eq, In]

CRITERION_KEYS: dict[str, type] = {"$gt": Gt, "$lt": Lt, "$eq": Eq, "$in": In}


@dataclass(frozen=True)
class Condition:
    """Per-field criteria, all of which must hold."""

    criteria: Mapping[str, Criterion] = field(default_factory=dict)


@dataclass(frozen=True)
class And:
    queries: tuple[Query, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "queries", tuple(self.queries))


@dataclass(frozen=True)
class Or:
    queries: tuple[Query, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "queries", tuple(self.queries))


@dataclass(frozen=True)
class Text:
    """Free-text search over the configured full-text fields."""

    search: str


Query = Union[Condition, And, Or, Text]

QUERY_TYPES = (Condition, And, Or, Text)
CRITERION_TYPES = (Gt, Lt, Eq, In)


def parse_criterion(raw: Any) -> Criterion:
    """Convert ``{"$op": operand}`` into a criterion node."""
    if isinstance(raw, CRITERION_TYPES):
        return raw
    if not isinstance(raw, Mapping) or len(raw) != 1:
        raise InvalidQueryError("criterion must hold exactly one operator", raw)

    op, operand = next(iter(raw.items()))
    if op not in CRITERION_KEYS:
        raise InvalidQueryError(f"unknown criterion operator {op!r}", raw)

    if op == "$in":
        if isinstance(operand, (str, bytes)) or not isinstance(operand, Sequence):
            raise InvalidQueryError("$in expects a list of values", raw)
        return In(tuple(operand))
    return CRITERION_KEYS[op](operand)


def _parse_subqueries(key: str, raw: Mapping[str, Any]) -> tuple[Query, ...]:
    subs = raw[key]
    if isinstance(subs, (str, bytes, Mapping)) or not isinstance(subs, Sequence):
        raise InvalidQueryError(f"{key} expects a list of queries", raw)
    return tuple(parse_query(sub) for sub in subs)


def parse_query(raw: Any) -> Query:
    """Convert the dict form of a query into typed nodes.

    Typed nodes are returned unchanged. Raises InvalidQueryError for a node
    that mixes shapes or uses an unknown operator.
    """
    if isinstance(raw, QUERY_TYPES):
        return raw
    if raw is None:
        return Condition()
    if not isinstance(raw, Mapping):
        raise InvalidQueryError("query must be a mapping", raw)

    operators = [key for key in raw if isinstance(key, str) and key.startswith("$")]
    if operators:
        if len(raw) != 1:
            raise InvalidQueryError("operator node cannot hold other keys", raw)
        key = operators[0]
        if key == AND_KEY:
            return And(_parse_subqueries(key, raw))
        if key == OR_KEY:
            return Or(_parse_subqueries(key, raw))
        if key == TEXT_KEY:
            if not isinstance(raw[key], str):
                raise InvalidQueryError("$text expects a string", raw)
            return Text(raw[key])
        raise InvalidQueryError(f"unknown query operator {key!r}", raw)

    criteria: dict[str, Criterion] = {}
    for name, criterion in raw.items():
        if not isinstance(name, str):
            raise InvalidQueryError("field names must be strings", raw)
        criteria[name] = parse_criterion(criterion)
    return Condition(criteria)
