#!/usr/bin/env python3
"""
Build dashboard chart data from the car sales dataset.

Usage:
    python scripts/build_dashboard_data.py [--data-path FILE] [--output FILE] [--verbose]

Example:
    python scripts/build_dashboard_data.py --data-path data/car_prices.csv -o public/charts.json
    python scripts/build_dashboard_data.py --synthetic 5000 --verbose
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from carsales.logging_config import configure_logging
from carsales.pipeline import (
    export_results_to_json,
    format_pipeline_summary,
    run_dashboard,
)
from carsales.settings import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Build dashboard chart data from car_prices.csv"
    )
    parser.add_argument(
        "--data-path",
        type=str,
        default=settings.data_path,
        help="CSV or parquet dataset (default: CARSALES_DATA_PATH)",
    )
    parser.add_argument(
        "--synthetic",
        type=int,
        metavar="N",
        help="Ignore --data-path and generate N synthetic records",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=settings.long_tail_threshold,
        help="Share below which makes are merged into 'Other' (default: 0.025)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Output file for chart data JSON (optional)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print verbose output",
    )

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else settings.log_level, settings.log_format)

    config = settings.to_dashboard_config()
    config.long_tail_threshold = args.threshold
    config.verbose = args.verbose

    if args.synthetic is not None:
        config.n_records = args.synthetic
        result = run_dashboard(config=config)
    elif args.data_path:
        data_path = Path(args.data_path)
        if not data_path.exists():
            print(f"Error: Dataset not found: {data_path}")
            sys.exit(1)
        result = run_dashboard(config=config, dataset_path=data_path)
    else:
        print("Error: pass --data-path, set CARSALES_DATA_PATH, or use --synthetic N")
        sys.exit(1)

    print(format_pipeline_summary(result))

    if args.output and result.success:
        path = export_results_to_json(result, args.output)
        print(f"\nChart data written to {path}")

    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
