"""
Treemap specification: odometer range containing the top brands by count.
"""

from typing import Any

from carsales.charts.base import ChartSpec
from carsales.data.schemas import RawRecord
from carsales.features.aggregators import count_by_two_keys, sort_by_key, top_n_inner
from carsales.features.categorizers import (
    DEFAULT_CONFIG,
    CategorizationConfig,
    bucket_numeric,
    normalize_make,
)


def create_treemap_spec(
    chart_id: str,
    records: list[RawRecord],
    *,
    config: CategorizationConfig = DEFAULT_CONFIG,
    top_n: int = 5,
) -> ChartSpec:
    """Create a treemap of odometer ranges broken down by their top makes.

    Args:
        chart_id: Unique identifier for the chart
        records: Validated records
        config: Categorization tables
        top_n: Number of makes kept per odometer range

    Returns:
        ChartSpec with a ``{name, children}`` hierarchy; leaves carry ``value``
    """
    nested = count_by_two_keys(
        records,
        lambda r: bucket_numeric(r.odometer, config.odometer_ranges),
        lambda r: normalize_make(r.make, config.make_aliases),
    )
    nested = sort_by_key(top_n_inner(nested, top_n), config.odometer_ranges.labels)

    children: list[dict[str, Any]] = []
    for bucket, makes in nested.items():
        children.append({
            "name": bucket,
            "children": [{"name": make, "value": count} for make, count in makes.items()],
        })

    return ChartSpec(
        chart_id=chart_id,
        chart_type="treemap",
        data={"name": "odometer", "children": children},
        config={"top_n": top_n},
    )
