"""Read pipeline: filter, sort and project stages.

Stages run in a fixed order (filter -> sort -> project). Projecting first
could drop fields the sort depends on, so ``run_pipeline`` never reorders.
"""

from __future__ import annotations

import locale
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Callable

from sortedcontainers import SortedKeyList

from ..core.errors import InvalidQueryError
from ..core.types import MISSING, Record
from .evaluator import matches
from .query import Query, parse_query

if TYPE_CHECKING:
    from ..interfaces.pipeline import PipelineOperator

logger = logging.getLogger(__name__)

Comparator = Callable[[Record, Record], int]


class SortOrder(IntEnum):
    ASCENDING = 1
    DESCENDING = -1


_DIRECTION_NAMES = {
    "asc": SortOrder.ASCENDING,
    "ascending": SortOrder.ASCENDING,
    "desc": SortOrder.DESCENDING,
    "descending": SortOrder.DESCENDING,
}


def _coerce_direction(name: str, direction: Any) -> SortOrder:
    if isinstance(direction, str) and direction.lower() in _DIRECTION_NAMES:
        return _DIRECTION_NAMES[direction.lower()]
    if not isinstance(direction, bool) and direction in (1, -1):
        return SortOrder(direction)
    raise InvalidQueryError(f"invalid sort direction for {name!r}", direction)


def normalize_sort(sort: Mapping[str, Any]) -> dict[str, SortOrder]:
    """Validate a sort spec, keeping its insertion (priority) order."""
    if not isinstance(sort, Mapping):
        raise InvalidQueryError("sort must be a mapping", sort)
    return {name: _coerce_direction(name, direction) for name, direction in sort.items()}


def normalize_projection(projection: Mapping[str, Any] | Iterable[str]) -> tuple[str, ...]:
    """Validate a projection spec and return the included field names.

    Only inclusion is supported; ``{"name": 0}`` is rejected.
    """
    if isinstance(projection, Mapping):
        for name, flag in projection.items():
            if flag is not True and (isinstance(flag, bool) or flag != 1):
                raise InvalidQueryError(f"projection only supports inclusion, got {name!r}", flag)
        return tuple(projection)
    if isinstance(projection, str):
        raise InvalidQueryError("projection must be a mapping or list of fields", projection)
    return tuple(projection)


@dataclass
class FindOptions:
    """Optional sort and projection for ``find``.

    Attributes:
        sort: Field -> direction, first entry has the highest priority
        projection: Field -> 1 for every field to keep
    """

    sort: Mapping[str, Any] | None = None
    projection: Mapping[str, Any] | None = None

    @classmethod
    def coerce(cls, options: FindOptions | Mapping[str, Any] | None) -> FindOptions:
        if options is None:
            return cls()
        if isinstance(options, FindOptions):
            return options
        if not isinstance(options, Mapping):
            raise InvalidQueryError("find options must be a mapping", options)
        unknown = set(options) - {"sort", "projection"}
        if unknown:
            raise InvalidQueryError(f"unknown find options {sorted(unknown)}", options)
        return cls(sort=options.get("sort"), projection=options.get("projection"))


class Filter:
    """Keep records matching a query, preserving order."""

    def __init__(self, arr: Sequence[Record], query: Query | Mapping[str, Any], full_text_fields: Iterable[str] = ()):
        self.arr = arr
        self.query = parse_query(query)
        self.full_text_fields = tuple(full_text_fields)

    def get(self) -> list[Record]:
        return [record for record in self.arr if matches(record, self.query, self.full_text_fields)]


def compare_values(left: Any, right: Any) -> int:
    """Three-way compare; incomparable pairs tie (return 0)."""
    if (
        isinstance(left, (int, float)) and not isinstance(left, bool)
        and isinstance(right, (int, float)) and not isinstance(right, bool)
    ):
        return (left > right) - (left < right)
    if isinstance(left, str) and isinstance(right, str):
        # Letters first, case only breaks ties: "apple" < "Banana" < "banana".
        result = locale.strcoll(left.casefold(), right.casefold()) or locale.strcoll(left, right)
        return (result > 0) - (result < 0)
    return 0


def _field_comparator(name: str, order: SortOrder) -> Comparator:
    def compare(a: Record, b: Record) -> int:
        return int(order) * compare_values(a.get(name, MISSING), b.get(name, MISSING))
    return compare


class Sorter:
    """Stable multi-field sort.

    Comparators are tried in sort-spec order; the first non-zero result
    decides. Records tied on every field keep their input order.
    """

    def __init__(self, arr: Sequence[Record], sort: Mapping[str, Any]):
        self.arr = arr
        self.sort = normalize_sort(sort)
        self._comparators = [_field_comparator(name, order) for name, order in self.sort.items()]

    def _compare(self, a: Record, b: Record) -> int:
        for comparator in self._comparators:
            result = comparator(a, b)
            if result != 0:
                return result
        return 0

    def get(self) -> list[Record]:
        ordered = SortedKeyList(self.arr, key=cmp_to_key(self._compare))
        return list(ordered)


class Projector:
    """Keep only the projected fields of each record."""

    def __init__(self, arr: Sequence[Record], projection: Mapping[str, Any] | Iterable[str]):
        self.arr = arr
        self.fields = normalize_projection(projection)

    def get(self) -> list[Record]:
        return [
            {name: record[name] for name in self.fields if name in record}
            for record in self.arr
        ]


def run_pipeline(
    records: Sequence[Record],
    query: Query | Mapping[str, Any] | None,
    options: FindOptions | Mapping[str, Any] | None = None,
    full_text_fields: Iterable[str] = (),
) -> list[Record]:
    """Filter, then sort, then project ``records``."""
    opts = FindOptions.coerce(options)

    stage: PipelineOperator = Filter(records, parse_query(query), full_text_fields)
    result = stage.get()
    logger.debug(f"Filter kept {len(result)} of {len(records)} records")

    if opts.sort is not None:
        stage = Sorter(result, opts.sort)
        result = stage.get()

    if opts.projection is not None:
        stage = Projector(result, opts.projection)
        result = stage.get()

    return result
