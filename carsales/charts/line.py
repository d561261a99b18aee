"""
Line chart specification for average selling price over model years.
"""

from carsales.charts.base import ChartSpec
from carsales.data.schemas import RawRecord
from carsales.features.aggregators import mean_by_key, sort_by_key, to_records
from carsales.features.categorizers import DEFAULT_CONFIG, CategorizationConfig, categorize_year


def create_price_line_spec(
    chart_id: str,
    records: list[RawRecord],
    *,
    config: CategorizationConfig = DEFAULT_CONFIG,
) -> ChartSpec:
    """Create a line chart of mean price by year range and by single year.

    Args:
        chart_id: Unique identifier for the chart
        records: Validated records
        config: Categorization tables

    Returns:
        ChartSpec with two series: ``by_year_range`` in table order and
        ``by_year`` ascending
    """
    by_range = mean_by_key(
        records,
        lambda r: categorize_year(r.year, config.year_ranges),
        lambda r: r.price,
    )
    by_range = sort_by_key(by_range, config.year_ranges.labels)
    by_year = sort_by_key(mean_by_key(records, lambda r: r.year, lambda r: r.price))

    return ChartSpec(
        chart_id=chart_id,
        chart_type="line",
        data={
            "by_year_range": to_records(by_range, "year", "price"),
            "by_year": to_records(by_year, "year", "price"),
        },
        config={"x": "year", "y": "price"},
    )
