"""
Module: deduplicator

Purpose: Keep the first record for each composite key.

The output keeps the input order; charts downstream rely on the source being
pre-sorted by year.
"""

from typing import Any, Callable, Hashable, Iterable, Sequence, TypeVar

T = TypeVar("T")

KEY_SEPARATOR = "|"
DEFAULT_KEY_FIELDS: tuple[str, ...] = ("year", "make", "body")


def _field_value(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def composite_key(record: Any, fields: Sequence[str] = DEFAULT_KEY_FIELDS) -> str:
    """
    Build a composite string key from categorized field values.

    Range labels contain "-", so fields are joined with "|".

    Args:
        record: Object or mapping exposing the fields
        fields: Field names to concatenate, in order

    Returns:
        Key such as "2011-2015|Japanese|sedan"
    """
    return KEY_SEPARATOR.join(str(_field_value(record, name)) for name in fields)


def deduplicate(
    records: Iterable[T],
    key: Callable[[T], Hashable] | None = None,
    *,
    fields: Sequence[str] = DEFAULT_KEY_FIELDS,
) -> list[T]:
    """
    Return the records whose key has not been seen before, in original order.

    Args:
        records: Records to deduplicate
        key: Key extraction function; defaults to composite_key over ``fields``
        fields: Fields used by the default key

    Returns:
        Stable, first-seen-wins subsequence of ``records``
    """
    key_func = key or (lambda r: composite_key(r, fields))
    seen: set[Hashable] = set()
    unique: list[T] = []
    for record in records:
        record_key = key_func(record)
        if record_key in seen:
            continue
        seen.add(record_key)
        unique.append(record)
    return unique


def count_duplicates(
    records: Iterable[T],
    key: Callable[[T], Hashable] | None = None,
    *,
    fields: Sequence[str] = DEFAULT_KEY_FIELDS,
) -> int:
    """Number of records a deduplicate() call would drop."""
    items = list(records)
    return len(items) - len(deduplicate(items, key, fields=fields))
