"""
Dataset loader for the used-car sales file.

Reads ``car_prices.csv`` (or a parquet export of it) into validated RawRecord
objects. Rows with a missing or non-numeric required field, a blank make/body,
or a selling price of 0 are dropped here, so nothing downstream has to handle
them. The surviving records are sorted by year.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from carsales.data.schemas import RawRecord
from carsales.exceptions import DataLoadError, DataValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("year", "make", "body", "odometer", "price")
NUMERIC_FIELDS = ("year", "odometer", "price")
TEXT_FIELDS = ("make", "body")

# Strings treated as an empty cell
NA_TOKENS = {"", "nan", "none", "null", "<na>", "na", "n/a", "unspecified"}


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class SourceColumns:
    """Names of the source columns holding each RawRecord field."""

    year: str = "year"
    make: str = "make"
    body: str = "body"
    odometer: str = "odometer"
    price: str = "sellingprice"

    def rename_map(self) -> dict[str, str]:
        """Source column -> RawRecord field."""
        return {getattr(self, name): name for name in REQUIRED_FIELDS}


@dataclass
class LoadResult:
    """Result of loading the source dataset."""

    records: list[RawRecord] = field(default_factory=list)

    # Statistics
    rows_read: int = 0
    dropped_missing: int = 0
    dropped_zero_price: int = 0
    dropped_invalid: int = 0
    load_duration_ms: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def rows_dropped(self) -> int:
        return self.dropped_missing + self.dropped_zero_price + self.dropped_invalid

    def summary(self) -> dict[str, Any]:
        """Statistics as a plain dict."""
        return {
            "rows_read": self.rows_read,
            "records": len(self.records),
            "dropped_missing": self.dropped_missing,
            "dropped_zero_price": self.dropped_zero_price,
            "dropped_invalid": self.dropped_invalid,
            "load_duration_ms": self.load_duration_ms,
        }


# =============================================================================
# DATASET LOADER
# =============================================================================


class DatasetLoader:
    """
    Load the car sales dataset from a CSV or parquet file.

    Usage:
        loader = DatasetLoader("data/car_prices.csv")
        result = loader.load()

        # Use with the dashboard pipeline
        from carsales.pipeline import run_dashboard
        dashboard = run_dashboard(result.records)
    """

    def __init__(
        self,
        path: str | Path,
        *,
        columns: SourceColumns | None = None,
        strict: bool = False,
    ):
        """
        Initialize loader.

        Args:
            path: CSV or parquet file
            columns: Source column names (defaults to the car_prices.csv layout)
            strict: Raise DataValidationError on invalid rows instead of dropping them
        """
        self.path = Path(path)
        self.columns = columns or SourceColumns()
        self.strict = strict
        self._pandas_module: Any = None

    def _get_pandas(self) -> Any:
        """Lazy import of pandas."""
        if self._pandas_module is None:
            try:
                import pandas as pd
                self._pandas_module = pd
            except ImportError:
                raise ImportError(
                    "pandas is required: pip install pandas pyarrow"
                )
        return self._pandas_module

    def read_frame(self) -> Any:
        """Read the file into a DataFrame without any cleaning."""
        pd = self._get_pandas()

        if not self.path.exists():
            raise DataLoadError(f"Dataset file not found: {self.path}", path=str(self.path))

        suffix = self.path.suffix.lower()
        try:
            if suffix == ".parquet":
                return pd.read_parquet(self.path)
            if suffix in (".csv", ".txt"):
                return pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except (OSError, ValueError) as e:
            raise DataLoadError(f"Could not read {self.path}: {e}", path=str(self.path)) from e

        raise DataLoadError(
            f"Unsupported file type '{suffix}', expected .csv or .parquet",
            path=str(self.path),
        )

    def load(self) -> LoadResult:
        """
        Load, filter and validate the dataset.

        Returns:
            LoadResult with records sorted by year and drop statistics

        Raises:
            DataLoadError: If the file is missing, unreadable or lacks a column
            DataValidationError: In strict mode, if a row fails validation
        """
        start_time = time.perf_counter()
        df = self.read_frame()
        result = records_from_dataframe(df, columns=self.columns, strict=self.strict)
        result.load_duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Loaded {len(result.records)} records from {self.path.name} "
            f"({result.rows_read} rows read, {result.rows_dropped} dropped) "
            f"in {result.load_duration_ms:.1f}ms"
        )
        return result


# =============================================================================
# CONVERSION
# =============================================================================


def records_from_dataframe(
    df: Any,
    *,
    columns: SourceColumns | None = None,
    strict: bool = False,
) -> LoadResult:
    """
    Convert a raw DataFrame into validated, year-sorted RawRecords.

    Rows with missing fields or a zero price are always dropped. Rows that are
    present but fail RawRecord validation (negative odometer, year out of
    range) are dropped and described in ``LoadResult.errors``, unless
    ``strict`` is set.

    Args:
        df: DataFrame with the source columns (extra columns are ignored)
        columns: Source column names
        strict: Raise on the first invalid row instead of dropping it

    Returns:
        LoadResult (load_duration_ms is left at 0)

    Raises:
        DataLoadError: If a required source column is missing
        DataValidationError: In strict mode, for the first invalid row
    """
    import pandas as pd

    columns = columns or SourceColumns()
    rename = columns.rename_map()
    missing_columns = [c for c in rename if c not in df.columns]
    if missing_columns:
        raise DataLoadError(
            f"Dataset is missing required columns: {missing_columns}",
            context={"missing_columns": missing_columns},
        )

    result = LoadResult(rows_read=len(df))
    frame = df[list(rename)].rename(columns=rename).copy()

    for name in TEXT_FIELDS:
        text = frame[name].astype("string").str.strip()
        frame[name] = text.mask(text.str.lower().isin(NA_TOKENS))
    for name in NUMERIC_FIELDS:
        frame[name] = pd.to_numeric(frame[name], errors="coerce")

    missing_mask = frame[list(REQUIRED_FIELDS)].isna().any(axis=1)
    result.dropped_missing = int(missing_mask.sum())
    frame = frame[~missing_mask]

    zero_price_mask = frame["price"] == 0
    result.dropped_zero_price = int(zero_price_mask.sum())
    frame = frame[~zero_price_mask]

    frame = frame.sort_values("year", kind="stable")

    for row in frame.itertuples():
        try:
            result.records.append(
                RawRecord(
                    year=int(row.year),
                    make=str(row.make),
                    body=str(row.body),
                    odometer=float(row.odometer),
                    price=float(row.price),
                )
            )
        except ValidationError as e:
            first = e.errors()[0]
            field_name = str(first["loc"][0]) if first.get("loc") else None
            _reject_row(
                result, row.Index, field_name, first.get("input"), first.get("msg", ""), strict
            )
        except OverflowError:
            # year of +/-inf
            _reject_row(result, row.Index, "year", row.year, "year is not finite", strict)

    return result


def _reject_row(
    result: LoadResult,
    index: Any,
    field_name: str | None,
    value: Any,
    message: str,
    strict: bool,
) -> None:
    """Count an invalid row, or raise DataValidationError in strict mode."""
    error = f"row {index}: {field_name}: {message}"
    if strict:
        raise DataValidationError(
            f"Invalid row in dataset: {error}",
            field=field_name,
            value=value,
            context={"row": index},
        )
    result.dropped_invalid += 1
    result.errors.append(error)
    logger.debug(f"Dropping invalid {error}")


def load_dataset(path: str | Path, *, columns: SourceColumns | None = None) -> list[RawRecord]:
    """
    Convenience function to load validated records from a file.

    Args:
        path: CSV or parquet file
        columns: Source column names

    Returns:
        Records sorted by year
    """
    return DatasetLoader(path, columns=columns).load().records
