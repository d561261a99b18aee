#!/usr/bin/env python3
"""
Quick start: build the dashboard charts from synthetic data.

Usage:
    python examples/quick_start.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from carsales.data.synthetic_generator import generate_small_dataset
from carsales.features.aggregators import collapse_long_tail, count_by_key
from carsales.features.categorizers import categorize_make_to_region
from carsales.pipeline import DashboardConfig, format_pipeline_summary, run_dashboard


def main():
    records = generate_small_dataset(seed=7)

    # Aggregations can be used directly...
    regions = count_by_key(records, lambda r: categorize_make_to_region(r.make))
    print("Cars per region:", collapse_long_tail(regions, 0.05))

    # ...or through the pipeline, which builds every chart at once
    result = run_dashboard(records, config=DashboardConfig(scatter_max_points=200))
    print(format_pipeline_summary(result))

    pie = result.get_chart("make_pie")
    if pie:
        for slice_ in pie.data["slices"]:
            print(f"  {slice_['make']:<15} {slice_['count']:>5}")


if __name__ == "__main__":
    main()
