"""
Module: pipeline

Purpose: Orchestrator turning the car sales dataset into dashboard chart data.

Key Functions:
- run_dashboard: Execute the pipeline from records (or a file) to chart specs
- DashboardConfig: Configuration for pipeline execution
- DashboardResult: Container for pipeline outputs

Architecture Notes:
- The dataset is passed in explicitly; nothing is held at module level
- Every stage is a pure function of (records, config), so re-running with the
  same inputs gives the same charts
- Stage failures are captured in the result instead of propagating
"""

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from carsales.charts import (
    ChartSpec,
    create_make_pie_spec,
    create_parallel_coordinates_spec,
    create_price_line_spec,
    create_region_pie_spec,
    create_sankey_spec,
    create_scatter_spec,
    create_treemap_spec,
    create_year_bar_spec,
)
from carsales.data.loader import DatasetLoader
from carsales.data.schemas import RawRecord
from carsales.data.synthetic_generator import SyntheticDataGenerator
from carsales.exceptions import PipelineError
from carsales.features.categorizers import DEFAULT_CONFIG, CategorizationConfig

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass
class DashboardConfig:
    """Configuration for pipeline execution."""

    # Data generation (used when no records or file are given)
    n_records: int = 1000
    data_seed: int = 42

    # Categorization
    categorization: CategorizationConfig = DEFAULT_CONFIG

    # Chart parameters
    long_tail_threshold: float = 0.025
    top_brands_per_bucket: int = 5
    price_window: tuple[float, float] | None = (1000, 30000)
    scatter_max_points: int = 2000

    # Output options
    verbose: bool = False


@dataclass
class PipelineStageResult:
    """Result from a single pipeline stage."""

    stage_name: str
    success: bool
    duration_ms: float
    metrics: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None


@dataclass
class DashboardResult:
    """Complete pipeline execution result."""

    records: list[RawRecord]
    charts: dict[str, ChartSpec]

    # Metadata
    config: DashboardConfig
    load_summary: dict[str, Any] = field(default_factory=dict)
    stage_results: list[PipelineStageResult] = field(default_factory=list)
    total_duration_ms: float = 0.0
    success: bool = True
    error_message: str | None = None
    failed_stage: str | None = None

    def get_chart(self, chart_id: str) -> ChartSpec | None:
        return self.charts.get(chart_id)

    def get_summary(self) -> dict[str, Any]:
        """Get summary of pipeline results."""
        return {
            "total_records": len(self.records),
            "charts": sorted(self.charts),
            "total_duration_ms": self.total_duration_ms,
            "success": self.success,
            "stages": [
                {
                    "name": s.stage_name,
                    "success": s.success,
                    "duration_ms": s.duration_ms,
                }
                for s in self.stage_results
            ],
        }


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================


def _time_stage(
    stage_name: str,
    func: Callable[[], Any],
    verbose: bool = False,
) -> tuple[Any, PipelineStageResult]:
    """Execute a stage and time it.

    Raises:
        PipelineError: Wrapping whatever the stage raised, tagged with the stage name
    """
    if verbose:
        print(f"[Pipeline] Starting: {stage_name}")

    start = time.perf_counter()
    try:
        result = func()
    except Exception as e:
        duration = (time.perf_counter() - start) * 1000
        if verbose:
            print(f"[Pipeline] Failed: {stage_name} - {e}")
        raise PipelineError(
            f"Stage '{stage_name}' failed: {e}",
            stage=stage_name,
            context={"duration_ms": duration},
        ) from e

    duration = (time.perf_counter() - start) * 1000
    if verbose:
        print(f"[Pipeline] Completed: {stage_name} ({duration:.1f}ms)")
    logger.debug(f"Stage {stage_name} completed in {duration:.1f}ms")

    return result, PipelineStageResult(
        stage_name=stage_name,
        success=True,
        duration_ms=duration,
    )


def _chart_builders(config: DashboardConfig) -> dict[str, Callable[[list[RawRecord]], ChartSpec]]:
    """Chart id -> builder bound to the config."""
    tables = config.categorization
    return {
        "parallel_coordinates": lambda records: create_parallel_coordinates_spec(
            "parallel_coordinates", records, config=tables, price_window=config.price_window
        ),
        "sankey": lambda records: create_sankey_spec("sankey", records, config=tables),
        "make_pie": lambda records: create_make_pie_spec(
            "make_pie", records, config=tables, threshold=config.long_tail_threshold
        ),
        "region_pie": lambda records: create_region_pie_spec("region_pie", records, config=tables),
        "price_line": lambda records: create_price_line_spec("price_line", records, config=tables),
        "year_bar": lambda records: create_year_bar_spec("year_bar", records),
        "odometer_treemap": lambda records: create_treemap_spec(
            "odometer_treemap", records, config=tables, top_n=config.top_brands_per_bucket
        ),
        "scatter": lambda records: create_scatter_spec(
            "scatter", records, config=tables, max_points=config.scatter_max_points
        ),
    }


def run_dashboard(
    records: list[RawRecord] | None = None,
    *,
    config: DashboardConfig | None = None,
    dataset_path: str | Path | None = None,
) -> DashboardResult:
    """
    Execute the complete dashboard pipeline.

    Can accept data in three ways:
    1. records: Already validated records
    2. dataset_path: CSV or parquet file loaded with DatasetLoader
    3. Neither: Generate synthetic records based on config

    Args:
        records: Optional list of validated records
        config: Pipeline configuration
        dataset_path: Optional source file

    Returns:
        DashboardResult; on failure ``success`` is False and ``failed_stage``
        names the stage that raised
    """
    config = config or DashboardConfig()
    start_time = time.perf_counter()
    stage_results: list[PipelineStageResult] = []
    load_summary: dict[str, Any] = {}
    data: list[RawRecord] = []

    try:
        # Stage 1: Data Acquisition
        def acquire_data() -> list[RawRecord]:
            if records is not None:
                return list(records)
            if dataset_path is not None:
                loaded = DatasetLoader(dataset_path).load()
                load_summary.update(loaded.summary())
                return loaded.records
            generator = SyntheticDataGenerator(seed=config.data_seed)
            return generator.generate_records(config.n_records)

        data, stage = _time_stage("Data Acquisition", acquire_data, config.verbose)
        stage.metrics = {"n_records": len(data), **load_summary}
        stage_results.append(stage)

        # Stage 2: Table Validation
        _, stage = _time_stage(
            "Table Validation",
            config.categorization.validate,
            config.verbose,
        )
        stage_results.append(stage)

        # Stage 3+: one stage per chart
        charts: dict[str, ChartSpec] = {}
        for chart_id, build in _chart_builders(config).items():
            spec, stage = _time_stage(
                f"Chart: {chart_id}",
                lambda build=build: build(data),
                config.verbose,
            )
            stage.metrics = {"n_items": _count_items(spec)}
            stage_results.append(stage)
            charts[chart_id] = spec

        total_duration = (time.perf_counter() - start_time) * 1000
        logger.info(f"Built {len(charts)} charts from {len(data)} records in {total_duration:.1f}ms")

        return DashboardResult(
            records=data,
            charts=charts,
            config=config,
            load_summary=load_summary,
            stage_results=stage_results,
            total_duration_ms=total_duration,
            success=True,
        )

    except PipelineError as e:
        total_duration = (time.perf_counter() - start_time) * 1000
        logger.error(f"Dashboard pipeline failed: {e.message}")
        stage_results.append(
            PipelineStageResult(
                stage_name=e.stage or "unknown",
                success=False,
                duration_ms=e.context.get("duration_ms", 0.0),
                error_message=str(e.__cause__ or e),
            )
        )

        # Return partial result on failure
        return DashboardResult(
            records=data,
            charts={},
            config=config,
            load_summary=load_summary,
            stage_results=stage_results,
            total_duration_ms=total_duration,
            success=False,
            error_message=e.message,
            failed_stage=e.stage,
        )


def _count_items(spec: ChartSpec) -> int:
    """Number of top-level data items in a chart (lines, slices, nodes...)."""
    return sum(len(v) for v in spec.data.values() if isinstance(v, list))


# =============================================================================
# EXPORT AND FORMATTING
# =============================================================================


def export_results_to_dict(result: DashboardResult) -> dict[str, Any]:
    """
    Export pipeline result as a JSON-serializable dict.

    Args:
        result: DashboardResult

    Returns:
        Dictionary with summary, load statistics and every chart spec
    """
    return {
        "summary": result.get_summary(),
        "load": result.load_summary,
        "charts": {chart_id: spec.to_dict() for chart_id, spec in result.charts.items()},
        "error": result.error_message,
    }


def export_results_to_json(result: DashboardResult, path: str | Path) -> Path:
    """Write export_results_to_dict output to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(export_results_to_dict(result), f, indent=2, default=str)
    return path


def format_pipeline_summary(result: DashboardResult) -> str:
    """
    Format pipeline result as human-readable summary.

    Args:
        result: DashboardResult

    Returns:
        Formatted summary string
    """
    lines = [
        "=" * 60,
        "CAR SALES DASHBOARD DATA",
        "=" * 60,
        "",
        f"Status: {'SUCCESS' if result.success else 'FAILED'}",
        f"Duration: {result.total_duration_ms:.1f}ms",
        "",
        "DATA:",
        f"  - Records: {len(result.records)}",
    ]

    if result.load_summary:
        lines.append(f"  - Rows read: {result.load_summary.get('rows_read', 0)}")
        lines.append(f"  - Dropped (missing): {result.load_summary.get('dropped_missing', 0)}")
        lines.append(f"  - Dropped (zero price): {result.load_summary.get('dropped_zero_price', 0)}")
        lines.append(f"  - Dropped (invalid): {result.load_summary.get('dropped_invalid', 0)}")

    lines.extend(["", "CHARTS:"])
    for chart_id, spec in result.charts.items():
        lines.append(f"  - {chart_id} ({spec.chart_type}): {_count_items(spec)} items")

    lines.extend(["", "STAGES:"])
    for stage in result.stage_results:
        status = "OK" if stage.success else "FAILED"
        lines.append(f"  - {stage.stage_name}: {status} ({stage.duration_ms:.1f}ms)")

    if result.error_message:
        lines.extend(["", f"ERROR ({result.failed_stage}): {result.error_message}"])

    return "\n".join(lines)
