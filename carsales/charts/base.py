"""
Base container for dashboard chart data.

A ChartSpec carries the data and configuration a D3 chart needs. Rendering,
scales, colours and interaction all happen in JavaScript; this just provides
the spec.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ChartSpec:
    """Specification for a D3 chart."""

    chart_id: str
    chart_type: str  # "parallel_coordinates", "sankey", "pie", "line", "bar", "treemap", "scatter"

    # Data for the chart (will be JSON-serialized)
    data: dict[str, Any] = field(default_factory=dict)

    # Chart configuration
    config: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "chart_id": self.chart_id,
            "chart_type": self.chart_type,
            "data": self.data,
            "config": self.config,
        }
