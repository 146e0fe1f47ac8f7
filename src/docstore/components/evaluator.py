"""Query evaluation against a single record.

Pure and recursive; no I/O. Comparisons between values of incompatible kinds
resolve to "no match" rather than raising.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.errors import InvalidQueryError
from ..core.types import MISSING, Record, Value
from .query import And, Condition, Criterion, Eq, Gt, In, Lt, Or, Query, Text, parse_query


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equal(left: Any, right: Any) -> bool:
    """Equality that never coerces between kinds (``1`` is not ``True``)."""
    if left is MISSING or right is MISSING:
        return False
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if left is None or right is None:
        return left is right
    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(strict_equal(left[k], right[k]) for k in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(strict_equal(a, b) for a, b in zip(left, right))
    return False


def _ordered(left: Any, right: Any) -> bool:
    return (_is_number(left) and _is_number(right)) or (
        isinstance(left, str) and isinstance(right, str)
    )


def check_criterion(value: Value, criterion: Criterion) -> bool:
    """Return True if a field value satisfies a criterion.

    An absent field never satisfies any criterion.
    """
    if value is MISSING:
        return False
    if isinstance(criterion, Eq):
        return strict_equal(value, criterion.value)
    if isinstance(criterion, In):
        return any(strict_equal(value, candidate) for candidate in criterion.values)
    if isinstance(criterion, Gt):
        return _ordered(value, criterion.value) and value > criterion.value
    if isinstance(criterion, Lt):
        return _ordered(value, criterion.value) and value < criterion.value
    raise InvalidQueryError("unknown criterion", criterion)


def tokenize(text: str) -> list[str]:
    """Lowercase and split on single spaces."""
    return text.lower().split(" ")


def render_text(value: Any) -> str:
    """Text form of a field value for full-text matching."""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(render_text(item) for item in value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _text_matches(record: Record, search: str, full_text_fields: Iterable[str]) -> bool:
    words = set(tokenize(search))
    field_tokens = [
        set(tokenize(render_text(record[name])))
        for name in full_text_fields
        if name in record
    ]
    return all(any(word in tokens for tokens in field_tokens) for word in words)


def matches(record: Record, query: Query | Mapping[str, Any], full_text_fields: Iterable[str] = ()) -> bool:
    """Decide whether ``record`` satisfies ``query``.

    Args:
        record: Record to test
        query: Typed query node or its dict form
        full_text_fields: Fields searched by ``$text`` nodes

    Returns:
        True on match
    """
    node = parse_query(query)
    full_text_fields = tuple(full_text_fields)

    if isinstance(node, And):
        return all(matches(record, sub, full_text_fields) for sub in node.queries)
    if isinstance(node, Or):
        return any(matches(record, sub, full_text_fields) for sub in node.queries)
    if isinstance(node, Text):
        return _text_matches(record, node.search, full_text_fields)
    if isinstance(node, Condition):
        return all(
            check_criterion(record.get(name, MISSING), criterion)
            for name, criterion in node.criteria.items()
        )
    raise InvalidQueryError("unknown query node", node)
