"""
D3 chart data specifications for the car sales dashboard.

This module provides functions to create ChartSpec objects for each
visualization type. The specs contain the data and configuration that
the D3.js code needs to render the charts.

Each chart type has its own module with a create_*_spec function.
"""

from carsales.charts.bar import create_year_bar_spec
from carsales.charts.base import ChartSpec
from carsales.charts.line import create_price_line_spec
from carsales.charts.parallel_coordinates import create_parallel_coordinates_spec
from carsales.charts.pie import create_make_pie_spec, create_region_pie_spec
from carsales.charts.sankey import create_sankey_spec
from carsales.charts.scatter import create_scatter_spec
from carsales.charts.selection import SelectionState, apply_selection, highlighted_values
from carsales.charts.treemap import create_treemap_spec

__all__ = [
    "ChartSpec",
    "create_make_pie_spec",
    "create_parallel_coordinates_spec",
    "create_price_line_spec",
    "create_region_pie_spec",
    "create_sankey_spec",
    "create_scatter_spec",
    "create_treemap_spec",
    "create_year_bar_spec",
    # Parallel coordinates interaction
    "SelectionState",
    "apply_selection",
    "highlighted_values",
]
