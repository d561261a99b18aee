"""
Module: aggregators

Purpose: Group-by aggregations over car sales records.

Pure functions for computing chart summaries from record sequences. Every
aggregation is computed in one invocation over the full input; an empty input
always produces an empty mapping.
"""

import logging
from collections import Counter
from typing import Any, Callable, Hashable, Iterable, Sequence, TypeVar

from carsales.exceptions import AggregationError
from carsales.features.categorizers import OTHER, normalize_make, parse_number

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


# =============================================================================
# GROUPING
# =============================================================================


def count_by_key(records: Iterable[T], key: Callable[[T], K]) -> dict[K, int]:
    """
    Count records per key.

    Args:
        records: Records to group
        key: Grouping key function

    Returns:
        Mapping key -> count, in order of first appearance
    """
    counts: dict[K, int] = {}
    for record in records:
        k = key(record)
        counts[k] = counts.get(k, 0) + 1
    return counts


def count_by_two_keys(
    records: Iterable[T],
    outer_key: Callable[[T], Hashable],
    inner_key: Callable[[T], Hashable],
) -> dict[Hashable, dict[Hashable, int]]:
    """
    Count records per (outer, inner) key pair as a nested mapping.

    Used for nested breakdowns such as odometer range -> make -> count.
    """
    nested: dict[Hashable, dict[Hashable, int]] = {}
    for record in records:
        inner = nested.setdefault(outer_key(record), {})
        k = inner_key(record)
        inner[k] = inner.get(k, 0) + 1
    return nested


def mean_by_key(
    records: Iterable[T],
    key: Callable[[T], K],
    value: Callable[[T], Any],
) -> dict[K, float]:
    """
    Average a numeric field per key in a single pass.

    Values that do not parse as finite numbers are skipped. A group with no
    usable values is left out of the result instead of producing NaN.

    Args:
        records: Records to group
        key: Grouping key function
        value: Extracts the numeric value to average

    Returns:
        Mapping key -> arithmetic mean, in order of first appearance
    """
    sums: dict[K, float] = {}
    counts: dict[K, int] = {}
    skipped = 0

    for record in records:
        k = key(record)
        number = parse_number(value(record))
        if number is None:
            skipped += 1
            continue
        sums[k] = sums.get(k, 0.0) + number
        counts[k] = counts.get(k, 0) + 1

    if skipped:
        logger.debug(f"mean_by_key skipped {skipped} non-numeric values")

    return {k: sums[k] / counts[k] for k in sums if counts[k] > 0}


# =============================================================================
# POST-PROCESSING
# =============================================================================


def collapse_long_tail(
    counts: dict[K, int],
    threshold: float = 0.025,
    *,
    other_label: str = OTHER,
) -> dict[Any, int]:
    """
    Merge every key whose share of the total is below ``threshold`` into one bucket.

    Runs in two passes: the total is computed first, then keys are kept or
    merged. Counts already filed under ``other_label`` are always merged into
    the synthetic bucket, which is placed last.

    Args:
        counts: Count-by-key result
        threshold: Minimum share of the total (0.025 = 2.5%) to keep a key
        other_label: Name of the merged bucket

    Returns:
        New mapping with the same total count

    Raises:
        AggregationError: If threshold is not in [0, 1)
    """
    if not 0 <= threshold < 1:
        raise AggregationError(
            f"Long-tail threshold must be in [0, 1), got {threshold}",
            operation="collapse_long_tail",
            context={"threshold": threshold},
        )

    total = sum(counts.values())
    if total == 0:
        return {}

    kept: dict[Any, int] = {}
    other_count = 0
    for k, count in counts.items():
        if k == other_label or count / total < threshold:
            other_count += count
        else:
            kept[k] = count

    if other_count > 0:
        kept[other_label] = other_count
    return kept


def top_n_inner(
    nested: dict[Hashable, dict[Hashable, int]],
    n: int,
) -> dict[Hashable, dict[Hashable, int]]:
    """
    Keep the ``n`` largest inner keys under every outer key.

    Ties keep the inner key that appeared first.
    """
    if n <= 0:
        return {outer: {} for outer in nested}
    result: dict[Hashable, dict[Hashable, int]] = {}
    for outer, inner in nested.items():
        top = Counter(inner).most_common(n)
        result[outer] = dict(top)
    return result


def sort_by_key(
    mapping: dict[K, Any],
    order: Sequence[K] | None = None,
) -> dict[K, Any]:
    """
    Reorder a mapping by an explicit key order, or by natural key order.

    Keys missing from ``order`` are placed after the ordered ones, in their
    existing order.
    """
    if order is None:
        return {k: mapping[k] for k in sorted(mapping)}
    position = {k: i for i, k in enumerate(order)}
    ordered = sorted(
        enumerate(mapping),
        key=lambda item: (position.get(item[1], len(position)), item[0]),
    )
    return {k: mapping[k] for _, k in ordered}


def to_records(
    mapping: dict[Any, Any],
    key_name: str = "key",
    value_name: str = "count",
) -> list[dict[str, Any]]:
    """Convert a mapping to a list of {key_name, value_name} dicts."""
    return [{key_name: k, value_name: v} for k, v in mapping.items()]


def exclude_makes(
    records: Iterable[T],
    makes: Iterable[str],
    *,
    make: Callable[[T], Any] = lambda r: getattr(r, "make", None),
    aliases: dict[str, str] | None = None,
) -> list[T]:
    """
    Drop records whose normalized make is in ``makes``.

    Used to take luxury brands out of the make breakdowns. Pass the same
    ``aliases`` used for counting, so an alternative spelling of an excluded
    brand is dropped too.
    """
    excluded = {normalize_make(m, aliases) for m in makes}
    return [r for r in records if normalize_make(make(r), aliases) not in excluded]
