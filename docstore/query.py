"""Single-field equality filtering over collection records.

Comparison is type-strict: a stored 1 does not match 1.0 or True. A record
missing the field, or holding a value of another type, is simply left out.
There is no index; every call is a linear scan.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")


def _same_value(candidate: Any, value: Any) -> bool:
    return type(candidate) is type(value) and candidate == value


def filter_equals(records: Iterable[Any], field: str, value: Any) -> list[Any]:
    """Return the records whose `field` holds `value` (same type, equal)."""
    return [
        rec
        for rec in records
        if isinstance(rec, Mapping) and field in rec and _same_value(rec[field], value)
    ]


def all_records(records: list[T]) -> list[T]:
    """Pass-through counterpart of filter_equals."""
    return records


def filter_by(records: Iterable[T], accessor: Callable[[T], Any], value: Any) -> list[T]:
    """Typed variant: the caller supplies how to read the compared field."""
    return [rec for rec in records if _same_value(accessor(rec), value)]
