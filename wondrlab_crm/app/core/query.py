"""
Search, filter, sort and pagination helpers shared by the list pages.

All helpers work on plain sequences of records (pydantic models or
mappings) and return new lists; the input sequences are never
modified.

Sorting uses a three-way comparator on a single field with no
secondary key.  Python's sort is stable, so records with equal keys
keep their input order in both directions; reversing an ascending
result therefore only equals the descending result when the keys are
unique.
"""

from __future__ import annotations

from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, TypeVar

from ..schemas.listing import FieldFilter, Page, SortOrder

T = TypeVar("T")


def field_value(record: Any, name: str) -> Any:
    """Read ``name`` from a model or a mapping."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def as_text(value: Any) -> str:
    """Render a field value the way filters and search compare it."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def matches_search(record: Any, term: Optional[str], fields: Iterable[str]) -> bool:
    """Case-insensitive substring match against any of ``fields``.

    An empty term matches everything.
    """
    if not term:
        return True
    needle = term.lower()
    return any(needle in as_text(field_value(record, name)).lower() for name in fields)


def matches_filters(record: Any, filters: Iterable[FieldFilter]) -> bool:
    """True when every non-empty filter equals the record's field."""
    for flt in filters:
        if not flt.is_active:
            continue
        if as_text(field_value(record, flt.field.value)) != flt.value:
            return False
    return True


def filter_records(
    records: Sequence[T],
    search_term: Optional[str],
    filters: Iterable[FieldFilter],
    search_fields: Iterable[str],
) -> List[T]:
    filters = list(filters)
    search_fields = tuple(search_fields)
    return [
        r for r in records
        if matches_search(r, search_term, search_fields) and matches_filters(r, filters)
    ]


# ---------------------------------------------------------------------------
# Sorting and pagination
# ---------------------------------------------------------------------------

def sort_value(record: Any, key: str) -> Any:
    """The value ``key`` sorts on.

    Enums compare by their ``sort_key`` when they define one (ranked
    values such as priorities) and by their value otherwise.
    """
    value = field_value(record, key)
    if isinstance(value, Enum):
        return getattr(value, "sort_key", value.value)
    return value


def descending_comparator(a: Any, b: Any, key: str) -> int:
    """Three-way compare that orders ``a`` before ``b`` when ``a`` is larger.

    Missing values compare lower than any present value.
    """
    left, right = sort_value(a, key), sort_value(b, key)
    if left is None or right is None:
        if left is None and right is None:
            return 0
        return 1 if left is None else -1
    if right < left:
        return -1
    if right > left:
        return 1
    return 0


def get_comparator(order: SortOrder, key: str) -> Callable[[Any, Any], int]:
    if SortOrder(order) is SortOrder.DESC:
        return lambda a, b: descending_comparator(a, b, key)
    return lambda a, b: -descending_comparator(a, b, key)


def sort_records(records: Sequence[T], sort_key: str, order: SortOrder = SortOrder.ASC) -> List[T]:
    return sorted(records, key=cmp_to_key(get_comparator(order, sort_key)))


def paginate(records: Sequence[T], page: int, page_size: int) -> List[T]:
    """Return the zero-based ``page`` of ``records``.

    Pages outside the collection, before the first or past the last,
    are empty and the last page may be short.  ``page_size`` must be
    positive.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    if page < 0:
        return []
    start = page * page_size
    return list(records[start:start + page_size])


def sort_and_page(
    records: Sequence[T],
    sort_key: str,
    order: SortOrder,
    page: int,
    page_size: int,
) -> List[T]:
    return paginate(sort_records(records, sort_key, order), page, page_size)


def build_page(
    records: Sequence[T],
    search_term: Optional[str],
    filters: Iterable[FieldFilter],
    search_fields: Iterable[str],
    sort_key: str,
    order: SortOrder,
    page: int,
    page_size: int,
) -> Page[T]:
    """Run the full list pipeline: filter, then sort, then window."""
    matched = filter_records(records, search_term, filters, search_fields)
    return Page(
        items=sort_and_page(matched, sort_key, order, page, page_size),
        total=len(matched),
        page=page,
        page_size=page_size,
    )
