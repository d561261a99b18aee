"""
Scatter plot specification for odometer against selling price.
"""

from carsales.charts.base import ChartSpec
from carsales.data.schemas import RawRecord
from carsales.features.categorizers import (
    DEFAULT_CONFIG,
    CategorizationConfig,
    categorize_make_to_region,
    categorize_year,
)


def sample_evenly(records: list[RawRecord], max_points: int) -> list[RawRecord]:
    """Take at most ``max_points`` records at a fixed stride.

    Deterministic, so the same input always gives the same points.
    """
    if max_points <= 0:
        return []
    if len(records) <= max_points:
        return list(records)
    stride = len(records) / max_points
    return [records[int(i * stride)] for i in range(max_points)]


def create_scatter_spec(
    chart_id: str,
    records: list[RawRecord],
    *,
    config: CategorizationConfig = DEFAULT_CONFIG,
    max_points: int = 2000,
) -> ChartSpec:
    """Create a scatter plot of odometer vs price, coloured by region.

    Args:
        chart_id: Unique identifier for the chart
        records: Validated records
        config: Categorization tables
        max_points: Upper bound on plotted points

    Returns:
        ChartSpec with one point per sampled record
    """
    sampled = sample_evenly(records, max_points)
    points = [
        {
            "odometer": r.odometer,
            "price": r.price,
            "year": categorize_year(r.year, config.year_ranges),
            "region": categorize_make_to_region(r.make, config.region_brands, aliases=config.make_aliases),
        }
        for r in sampled
    ]

    return ChartSpec(
        chart_id=chart_id,
        chart_type="scatter",
        data={"points": points},
        config={
            "x": "odometer",
            "y": "price",
            "color": "region",
            "sampled": len(records) > len(sampled),
            "total_records": len(records),
        },
    )
