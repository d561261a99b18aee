"""
Tests for group-by aggregation functions.
"""

import pytest

from carsales.data.schemas import RawRecord
from carsales.exceptions import AggregationError
from carsales.features.aggregators import (
    collapse_long_tail,
    count_by_key,
    count_by_two_keys,
    exclude_makes,
    mean_by_key,
    sort_by_key,
    to_records,
    top_n_inner,
)
from carsales.features.categorizers import LUXURY_BRANDS, normalize_make


# =============================================================================
# FIXTURES
# =============================================================================


def make_record(make: str, year: int = 2012, price: float = 10000) -> RawRecord:
    """Helper to create RawRecord."""
    return RawRecord(year=year, make=make, body="Sedan", odometer=10000, price=price)


@pytest.fixture
def records() -> list[RawRecord]:
    """A handful of records across makes and years."""
    return [
        make_record("Toyota", 2012, 12000),
        make_record("Toyota", 2013, 14000),
        make_record("Ford", 2012, 8000),
        make_record("Kia", 2010, 6000),
        make_record("Ferrari", 2014, 150000),
    ]


# =============================================================================
# COUNTING TESTS
# =============================================================================


class TestCountByKey:
    """Tests for count_by_key."""

    def test_counts(self, records: list[RawRecord]) -> None:
        """Test counts per make."""
        result = count_by_key(records, lambda r: r.make)
        assert result == {"Toyota": 2, "Ford": 1, "Kia": 1, "Ferrari": 1}

    def test_first_appearance_order(self, records: list[RawRecord]) -> None:
        """Test keys come out in first-seen order."""
        result = count_by_key(records, lambda r: r.year)
        assert list(result) == [2012, 2013, 2010, 2014]

    def test_empty(self) -> None:
        """Test empty input gives an empty mapping."""
        assert count_by_key([], lambda r: r) == {}

    def test_total_preserved(self, records: list[RawRecord]) -> None:
        """Test counts sum to the number of records."""
        assert sum(count_by_key(records, lambda r: r.year).values()) == len(records)

    def test_idempotent(self, records: list[RawRecord]) -> None:
        """Test repeated calls give the same result."""
        assert count_by_key(records, lambda r: r.make) == count_by_key(records, lambda r: r.make)


class TestCountByTwoKeys:
    """Tests for count_by_two_keys."""

    def test_nested(self, records: list[RawRecord]) -> None:
        """Test nested counts."""
        result = count_by_two_keys(records, lambda r: r.year, lambda r: r.make)
        assert result[2012] == {"Toyota": 1, "Ford": 1}
        assert result[2013] == {"Toyota": 1}

    def test_empty(self) -> None:
        """Test empty input."""
        assert count_by_two_keys([], lambda r: r, lambda r: r) == {}


class TestMeanByKey:
    """Tests for mean_by_key."""

    def test_mean(self, records: list[RawRecord]) -> None:
        """Test mean price per make."""
        result = mean_by_key(records, lambda r: r.make, lambda r: r.price)
        assert result["Toyota"] == pytest.approx(13000)
        assert result["Kia"] == pytest.approx(6000)

    def test_empty(self) -> None:
        """Test empty input gives an empty mapping."""
        assert mean_by_key([], lambda r: r, lambda r: r) == {}

    def test_non_numeric_values_skipped(self) -> None:
        """Test unparseable values are skipped and empty groups omitted."""
        rows = [("a", 10), ("a", "20"), ("a", "x"), ("b", None), ("c", float("nan"))]
        result = mean_by_key(rows, lambda r: r[0], lambda r: r[1])
        assert result == {"a": pytest.approx(15)}


# =============================================================================
# POST-PROCESSING TESTS
# =============================================================================


class TestCollapseLongTail:
    """Tests for collapse_long_tail."""

    def test_merges_small_keys(self) -> None:
        """Test keys below the threshold are merged into Other."""
        counts = {"ford": 90, "kia": 5, "dot": 3, "geo": 2}
        result = collapse_long_tail(counts, 0.04)
        assert result == {"ford": 90, "kia": 5, "Other": 5}
        assert list(result)[-1] == "Other"

    def test_total_preserved(self) -> None:
        """Test the merged mapping has the same total."""
        counts = {f"make{i}": i + 1 for i in range(40)}
        result = collapse_long_tail(counts, 0.025)
        assert sum(result.values()) == sum(counts.values())

    def test_kept_keys_meet_threshold(self) -> None:
        """Test every key other than Other is at or above the threshold."""
        counts = {f"make{i}": i + 1 for i in range(40)}
        total = sum(counts.values())
        result = collapse_long_tail(counts, 0.03)
        for key, count in result.items():
            if key != "Other":
                assert count / total >= 0.03

    def test_existing_other_merged(self) -> None:
        """Test an existing Other key is folded into the bucket."""
        result = collapse_long_tail({"ford": 50, "Other": 40, "kia": 10}, 0.2)
        assert result == {"ford": 50, "Other": 50}

    def test_zero_threshold_keeps_everything(self) -> None:
        """Test threshold 0 keeps every key."""
        counts = {"ford": 1, "kia": 1}
        assert collapse_long_tail(counts, 0) == counts

    def test_empty(self) -> None:
        """Test empty input."""
        assert collapse_long_tail({}, 0.025) == {}

    @pytest.mark.parametrize("threshold", [-0.1, 1.0, 2.5])
    def test_invalid_threshold(self, threshold: float) -> None:
        """Test thresholds outside [0, 1) raise."""
        with pytest.raises(AggregationError) as exc_info:
            collapse_long_tail({"ford": 1}, threshold)
        assert exc_info.value.operation == "collapse_long_tail"


class TestTopNInner:
    """Tests for top_n_inner."""

    def test_keeps_largest(self) -> None:
        """Test the n largest inner keys are kept."""
        nested = {"0-1000 miles": {"ford": 5, "kia": 1, "toyota": 3}}
        assert top_n_inner(nested, 2) == {"0-1000 miles": {"ford": 5, "toyota": 3}}

    def test_ties_keep_first_seen(self) -> None:
        """Test ties are broken by first appearance."""
        result = top_n_inner({"x": {"a": 1, "b": 3, "c": 3}}, 1)
        assert result == {"x": {"b": 3}}

    def test_non_positive_n(self) -> None:
        """Test n <= 0 empties every group."""
        assert top_n_inner({"x": {"a": 1}}, 0) == {"x": {}}


class TestSortAndConvert:
    """Tests for sort_by_key and to_records."""

    def test_natural_order(self) -> None:
        """Test sorting by natural key order."""
        assert list(sort_by_key({2014: 1, 2010: 2, 2012: 3})) == [2010, 2012, 2014]

    def test_explicit_order(self) -> None:
        """Test keys missing from the order go last."""
        result = sort_by_key({"c": 1, "a": 2, "b": 3}, ["b", "x"])
        assert list(result) == ["b", "c", "a"]

    def test_to_records(self) -> None:
        """Test mapping to list of dicts."""
        assert to_records({"ford": 2}, "make", "count") == [{"make": "ford", "count": 2}]


class TestExcludeMakes:
    """Tests for exclude_makes."""

    def test_luxury_example(self) -> None:
        """Test luxury brands are taken out before counting."""
        records = [make_record("toyota"), make_record("kia"), make_record("ferrari")]
        kept = exclude_makes(records, LUXURY_BRANDS)
        assert count_by_key(kept, lambda r: normalize_make(r.make)) == {"toyota": 1, "kia": 1}

    def test_case_insensitive(self) -> None:
        """Test matching ignores case."""
        records = [make_record("FERRARI"), make_record("Ford")]
        assert [r.make for r in exclude_makes(records, ["Ferrari"])] == ["Ford"]

    def test_aliases(self) -> None:
        """Test an alias of an excluded brand is dropped too."""
        records = [make_record("Merc"), make_record("Toyota")]
        kept = exclude_makes(records, ["mercedes-benz"], aliases={"merc": "mercedes-benz"})
        assert [r.make for r in kept] == ["Toyota"]

    def test_custom_accessor(self) -> None:
        """Test dict rows with a custom make accessor."""
        rows = [{"make": "bmw"}, {"make": "ford"}]
        assert exclude_makes(rows, ["bmw"], make=lambda r: r["make"]) == [{"make": "ford"}]
