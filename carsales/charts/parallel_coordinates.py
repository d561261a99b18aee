"""
Parallel coordinates specification relating year, make, body, mileage and price.

Odometer and price are plotted as bucket midpoints so each axis has a small
number of positions. Luxury brands are left out, and only one line is kept per
(year range, make, body) combination.
"""

from typing import Any

from carsales.charts.base import ChartSpec
from carsales.data.schemas import MakeMode, NumericMode, RawRecord
from carsales.features.aggregators import exclude_makes
from carsales.features.categorizers import (
    DEFAULT_CONFIG,
    CategorizationConfig,
    categorize_record,
)
from carsales.features.deduplicator import deduplicate

DIMENSIONS = ["year", "make", "body", "odometer", "price"]


def create_parallel_coordinates_spec(
    chart_id: str,
    records: list[RawRecord],
    *,
    config: CategorizationConfig = DEFAULT_CONFIG,
    price_window: tuple[float, float] | None = (1000, 30000),
) -> ChartSpec:
    """Create a parallel coordinates specification.

    Records are filtered before deduplication, so a dropped record never
    claims a (year, make, body) key.

    Args:
        chart_id: Unique identifier for the chart
        records: Validated records, sorted by year
        config: Categorization tables
        price_window: Inclusive (min, max) bounds on the price midpoint, or None

    Returns:
        ChartSpec with one line per unique (year, make, body)
    """
    candidates = exclude_makes(records, config.luxury_brands, aliases=config.make_aliases)
    categorized = [
        categorize_record(
            r,
            make_mode=MakeMode.BRAND,
            numeric_mode=NumericMode.MIDPOINT,
            config=config,
        )
        for r in candidates
    ]

    if price_window is not None:
        low, high = price_window
        categorized = [c for c in categorized if c.price is not None and low <= c.price <= high]

    lines = deduplicate(categorized, fields=("year", "make", "body"))
    rows: list[dict[str, Any]] = [line.to_dict() for line in lines]

    year_order = [r.label for r in config.year_ranges.ranges]
    return ChartSpec(
        chart_id=chart_id,
        chart_type="parallel_coordinates",
        data={"lines": rows},
        config={
            "dimensions": DIMENSIONS,
            "numeric_dimensions": ["odometer", "price"],
            "year_order": [y for y in year_order if any(r["year"] == y for r in rows)],
            "price_window": list(price_window) if price_window is not None else None,
            "duplicates_removed": len(categorized) - len(lines),
        },
    )
