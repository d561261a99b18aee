"""
Bar chart specification for the number of cars sold per model year.
"""

from carsales.charts.base import ChartSpec
from carsales.data.schemas import RawRecord
from carsales.features.aggregators import count_by_key, sort_by_key, to_records

# Bar colour steps, from scarce to plentiful
COLOR_THRESHOLDS = [10000, 50000, 100000]
COLORS = ["#ff0000", "#ffb700", "#d0ff00", "#0fd971"]


def create_year_bar_spec(chart_id: str, records: list[RawRecord]) -> ChartSpec:
    """Create a bar chart of record counts per model year, ascending."""
    counts = sort_by_key(count_by_key(records, lambda r: r.year))

    return ChartSpec(
        chart_id=chart_id,
        chart_type="bar",
        data={"bars": to_records(counts, "year", "count")},
        config={
            "color_thresholds": COLOR_THRESHOLDS,
            "colors": COLORS,
        },
    )
