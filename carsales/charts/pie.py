"""
Pie chart specifications for market share by make and by region.
"""

from carsales.charts.base import ChartSpec
from carsales.data.schemas import RawRecord, Region
from carsales.features.aggregators import (
    collapse_long_tail,
    count_by_key,
    exclude_makes,
    to_records,
)
from carsales.features.categorizers import (
    DEFAULT_CONFIG,
    CategorizationConfig,
    categorize_make_to_region,
    normalize_make,
)


def create_make_pie_spec(
    chart_id: str,
    records: list[RawRecord],
    *,
    config: CategorizationConfig = DEFAULT_CONFIG,
    threshold: float = 0.025,
    exclude_luxury: bool = True,
) -> ChartSpec:
    """Create a pie chart of cars sold per make.

    Makes below ``threshold`` share of the total are merged into "Other".

    Args:
        chart_id: Unique identifier for the chart
        records: Validated records
        config: Categorization tables
        threshold: Minimum share for a make to get its own slice
        exclude_luxury: Leave luxury brands out of the breakdown

    Returns:
        ChartSpec with slices and the total count
    """
    if exclude_luxury:
        candidates = exclude_makes(records, config.luxury_brands, aliases=config.make_aliases)
    else:
        candidates = list(records)
    counts = count_by_key(candidates, lambda r: normalize_make(r.make, config.make_aliases))
    slices = collapse_long_tail(counts, threshold)

    return ChartSpec(
        chart_id=chart_id,
        chart_type="pie",
        data={
            "slices": to_records(slices, "make", "count"),
            "total": sum(counts.values()),
        },
        config={"threshold": threshold, "exclude_luxury": exclude_luxury},
    )


def create_region_pie_spec(
    chart_id: str,
    records: list[RawRecord],
    *,
    config: CategorizationConfig = DEFAULT_CONFIG,
) -> ChartSpec:
    """Create a pie chart of cars sold per region of origin."""
    counts = count_by_key(
        records,
        lambda r: categorize_make_to_region(r.make, config.region_brands, aliases=config.make_aliases),
    )
    order = [region.value for region in Region]
    ordered = {region: counts[region] for region in order if region in counts}

    return ChartSpec(
        chart_id=chart_id,
        chart_type="pie",
        data={
            "slices": to_records(ordered, "category", "count"),
            "total": sum(counts.values()),
        },
    )
