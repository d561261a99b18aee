"""
Tests for the synthetic data generator.
"""

import pandas as pd

from carsales.data.loader import records_from_dataframe
from carsales.data.synthetic_generator import (
    YEAR_RANGE,
    SyntheticDataGenerator,
    generate_small_dataset,
)


class TestSyntheticDataGenerator:
    """Tests for SyntheticDataGenerator."""

    def test_deterministic(self) -> None:
        """Test same seed gives same records."""
        a = SyntheticDataGenerator(seed=1).generate_records(50)
        b = SyntheticDataGenerator(seed=1).generate_records(50)
        assert a == b

    def test_different_seeds(self) -> None:
        """Test different seeds give different records."""
        a = SyntheticDataGenerator(seed=1).generate_records(50)
        b = SyntheticDataGenerator(seed=2).generate_records(50)
        assert a != b

    def test_sorted_by_year(self) -> None:
        """Test records are sorted like the loader sorts them."""
        records = SyntheticDataGenerator(seed=3).generate_records(200)
        years = [r.year for r in records]
        assert years == sorted(years)

    def test_value_ranges(self) -> None:
        """Test generated values are plausible."""
        for record in SyntheticDataGenerator(seed=4).generate_records(200):
            assert YEAR_RANGE[0] <= record.year <= YEAR_RANGE[1]
            assert record.odometer >= 1
            assert record.price >= 100

    def test_small_dataset(self) -> None:
        """Test small dataset helper."""
        assert len(generate_small_dataset()) == 500


class TestRawRows:
    """Tests for generate_raw_rows."""

    def test_columns(self) -> None:
        """Test rows use the source column names."""
        rows = SyntheticDataGenerator(seed=5).generate_raw_rows(3)
        assert set(rows[0]) == {"year", "make", "model", "body", "odometer", "sellingprice"}

    def test_clean_rows_all_load(self) -> None:
        """Test rows without defects all pass the loader."""
        rows = SyntheticDataGenerator(seed=6).generate_raw_rows(100, invalid_probability=0.0)
        result = records_from_dataframe(pd.DataFrame(rows))
        assert len(result.records) == 100

    def test_corrupted_rows_all_dropped(self) -> None:
        """Test every corrupted row is filtered by the loader."""
        rows = SyntheticDataGenerator(seed=7).generate_raw_rows(100, invalid_probability=1.0)
        result = records_from_dataframe(pd.DataFrame(rows))
        assert result.records == []
        assert result.rows_dropped == 100
