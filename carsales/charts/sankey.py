"""
Sankey diagram specification for the flow year range -> region -> body type.
"""

from typing import Any

from carsales.charts.base import ChartSpec
from carsales.data.schemas import MakeMode, RawRecord
from carsales.features.aggregators import count_by_two_keys
from carsales.features.categorizers import (
    DEFAULT_CONFIG,
    CategorizationConfig,
    categorize_records,
)


def create_sankey_spec(
    chart_id: str,
    records: list[RawRecord],
    *,
    config: CategorizationConfig = DEFAULT_CONFIG,
    width: int = 800,
    height: int = 500,
    node_width: int = 20,
    node_padding: int = 10,
) -> ChartSpec:
    """Create a Sankey diagram specification.

    Nodes are grouped into three columns (year range, region, body); link
    values are record counts.

    Args:
        chart_id: Unique identifier for the chart
        records: Validated records
        config: Categorization tables
        width: Chart width in pixels
        height: Chart height in pixels
        node_width: Width of Sankey nodes
        node_padding: Padding between nodes

    Returns:
        ChartSpec for D3 Sankey rendering
    """
    categorized = categorize_records(records, make_mode=MakeMode.REGION, config=config)

    flows = [
        ("year", "make", count_by_two_keys(categorized, lambda c: c.year, lambda c: c.make)),
        ("make", "body", count_by_two_keys(categorized, lambda c: c.make, lambda c: c.body)),
    ]
    group_of = {"year": 0, "make": 1, "body": 2}

    # Build node list with indices and group assignments
    nodes: list[dict[str, Any]] = []
    node_index: dict[str, int] = {}

    def node_for(dimension: str, name: str) -> int:
        node_id = f"{dimension}:{name}"
        if node_id not in node_index:
            node_index[node_id] = len(nodes)
            nodes.append({
                "id": node_id,
                "name": name,
                "index": node_index[node_id],
                "group": group_of[dimension],  # Column position for Sankey layout
            })
        return node_index[node_id]

    links: list[dict[str, Any]] = []
    for source_dim, target_dim, nested in flows:
        for source_name, targets in nested.items():
            source = node_for(source_dim, source_name)
            for target_name, value in targets.items():
                target = node_for(target_dim, target_name)
                links.append({
                    "source": source,
                    "target": target,
                    "value": value,
                    "source_id": nodes[source]["id"],
                    "target_id": nodes[target]["id"],
                })

    return ChartSpec(
        chart_id=chart_id,
        chart_type="sankey",
        data={
            "nodes": nodes,
            "links": links,
        },
        config={
            "width": width,
            "height": height,
            "nodeWidth": node_width,
            "nodePadding": node_padding,
            "linkOpacity": 0.5,
            "linkOpacityHover": 0.8,
        },
    )
