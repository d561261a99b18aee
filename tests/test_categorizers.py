"""
Tests for field categorizers and numeric bucketing.
"""

import pytest

from carsales.data.schemas import (
    BucketTable,
    MakeMode,
    NumericMode,
    RawRecord,
    Region,
)
from carsales.exceptions import CategorizationConfigError
from carsales.features.categorizers import (
    DEFAULT_CONFIG,
    LUXURY_BRANDS,
    ODOMETER_RANGES,
    PRICE_RANGES,
    REGION_BRANDS,
    YEAR_RANGES,
    CategorizationConfig,
    bucket_index,
    bucket_midpoint,
    bucket_numeric,
    categorize_body,
    categorize_make_to_region,
    categorize_odometer,
    categorize_price,
    categorize_record,
    categorize_records,
    categorize_year,
    check_region_lists_disjoint,
    is_luxury_brand,
    normalize_make,
)


def make_record(
    year: int = 2012,
    make: str = "Toyota",
    body: str = "Sedan",
    odometer: float = 23000,
    price: float = 12000,
) -> RawRecord:
    """Helper to create RawRecord."""
    return RawRecord(year=year, make=make, body=body, odometer=odometer, price=price)


# =============================================================================
# TABLE TESTS
# =============================================================================


class TestCanonicalTables:
    """Tests for the built-in tables."""

    def test_year_ranges_strictly_disjoint(self) -> None:
        """Test no model year belongs to two year ranges."""
        for previous, current in zip(YEAR_RANGES.ranges, YEAR_RANGES.ranges[1:]):
            assert current.start > previous.end

    def test_region_lists_disjoint(self) -> None:
        """Test no brand is listed under two regions."""
        seen: set[str] = set()
        for brands in REGION_BRANDS.values():
            assert not (seen & brands)
            seen |= brands

    def test_default_config_validates(self) -> None:
        """Test the default config passes its own checks."""
        assert DEFAULT_CONFIG.validate() is DEFAULT_CONFIG

    def test_overlapping_region_lists_rejected(self) -> None:
        """Test a brand listed twice raises."""
        brands = {
            Region.JAPANESE: frozenset({"toyota"}),
            Region.KOREAN: frozenset({"toyota", "kia"}),
        }
        with pytest.raises(CategorizationConfigError) as exc_info:
            check_region_lists_disjoint(brands)
        assert exc_info.value.context["brand"] == "toyota"

    def test_config_validate_checks_regions(self) -> None:
        """Test CategorizationConfig.validate catches overlapping regions."""
        config = CategorizationConfig(
            region_brands={
                Region.AMERICAN: frozenset({"ford"}),
                Region.EUROPEAN: frozenset({"ford"}),
            }
        )
        with pytest.raises(CategorizationConfigError):
            config.validate()


# =============================================================================
# YEAR TESTS
# =============================================================================


class TestCategorizeYear:
    """Tests for categorize_year."""

    @pytest.mark.parametrize(
        "year,expected",
        [
            (1985, "1985-1989"),
            (1989, "1985-1989"),
            (1990, "1990-1995"),
            (1998, "1996-2000"),
            (2012, "2011-2015"),
            (2020, "2016-2020"),
        ],
    )
    def test_in_range(self, year: int, expected: str) -> None:
        """Test years inside a range, including both ends."""
        assert categorize_year(year) == expected

    def test_outside_table(self) -> None:
        """Test years outside every range are Unknown."""
        assert categorize_year(1982) == "Unknown"
        assert categorize_year(2021) == "Unknown"

    def test_gap_is_unknown(self) -> None:
        """Test a year in a gap between ranges is Unknown."""
        table = BucketTable.from_tuples("year", [(1990, 1995, "early"), (2000, 2005, "late")], strict=True)
        assert categorize_year(1997, table) == "Unknown"

    def test_non_numeric(self) -> None:
        """Test non-numeric input is Unknown."""
        assert categorize_year(None) == "Unknown"
        assert categorize_year("abc") == "Unknown"


# =============================================================================
# MAKE TESTS
# =============================================================================


class TestMakes:
    """Tests for make normalization and region mapping."""

    def test_normalize_lowercases(self) -> None:
        """Test makes are lowercased and trimmed."""
        assert normalize_make("  Toyota ") == "toyota"
        assert normalize_make("Land   Rover") == "land rover"

    def test_normalize_aliases(self) -> None:
        """Test alternative spellings resolve to the canonical brand."""
        assert normalize_make("VW") == "volkswagen"
        assert normalize_make("mercedes-b") == "mercedes-benz"
        assert normalize_make("ford truck") == "ford"

    def test_normalize_custom_aliases(self) -> None:
        """Test an explicit alias map replaces the default one."""
        assert normalize_make("chevy", {"chevy": "chevrolet"}) == "chevrolet"
        assert normalize_make("vw", {}) == "vw"

    def test_normalize_empty(self) -> None:
        """Test empty makes normalize to 'unknown'."""
        assert normalize_make(None) == "unknown"
        assert normalize_make("  ") == "unknown"

    @pytest.mark.parametrize(
        "make,region",
        [
            ("Toyota", "Japanese"),
            ("LEXUS", "Japanese"),
            ("BMW", "European"),
            ("vw", "European"),
            ("Ford", "American"),
            ("geo", "European"),
            ("Fisker", "European"),
            ("Tesla", "American"),
            ("Kia", "Korean"),
            ("Dot", "Other"),
            ("", "Other"),
        ],
    )
    def test_region(self, make: str, region: str) -> None:
        """Test make to region mapping is case-insensitive."""
        assert categorize_make_to_region(make) == region

    def test_region_custom_brands(self) -> None:
        """Test an injected brand table is used."""
        brands = {Region.KOREAN: frozenset({"toyota"})}
        assert categorize_make_to_region("Toyota", brands) == "Korean"
        assert categorize_make_to_region("Ford", brands) == "Other"

    def test_region_empty_brands(self) -> None:
        """Test an empty brand table maps every make to Other."""
        assert categorize_make_to_region("Toyota", {}) == "Other"

    def test_luxury(self) -> None:
        """Test luxury brand detection."""
        assert is_luxury_brand("Ferrari")
        assert is_luxury_brand("Rolls Royce")
        assert not is_luxury_brand("Toyota")
        assert "porsche" in LUXURY_BRANDS

    def test_luxury_with_aliases(self) -> None:
        """Test aliases are resolved before the luxury lookup."""
        assert is_luxury_brand("Merc", aliases={"merc": "mercedes-benz"})
        assert not is_luxury_brand("Merc")


# =============================================================================
# BODY TESTS
# =============================================================================


class TestCategorizeBody:
    """Tests for categorize_body."""

    @pytest.mark.parametrize(
        "body,expected",
        [
            ("Sedan", "sedan"),
            ("G Sedan", "sedan"),
            ("Elantra Coupe", "coupe"),
            ("Koup", "coupe"),
            ("Navitgation", "suv"),
            ("SuperCrew", "truck"),
            ("Minivan", "minivan"),
            ("Transit Van", "van"),
            ("CTS Wagon", "wagon"),
            ("Crew Cab", "cab"),
            ("Hatchback", "hatchback"),
        ],
    )
    def test_keywords(self, body: str, expected: str) -> None:
        """Test overrides and keyword matching."""
        assert categorize_body(body) == expected

    def test_no_match_is_other(self) -> None:
        """Test unmatched bodies fall back to Other."""
        assert categorize_body("Limousine") == "Other"

    def test_empty_is_unknown(self) -> None:
        """Test empty bodies are Unknown."""
        assert categorize_body("") == "Unknown"
        assert categorize_body(None) == "Unknown"


# =============================================================================
# NUMERIC BUCKET TESTS
# =============================================================================


class TestBucketing:
    """Tests for bucket_numeric and bucket_midpoint."""

    def test_odometer_example(self) -> None:
        """Test a reading inside a range."""
        assert categorize_odometer(23000) == "20000-40000 miles"

    def test_shared_boundary_goes_to_first_range(self) -> None:
        """Test a value on a shared boundary belongs to the lower range."""
        assert bucket_numeric(1000, ODOMETER_RANGES) == "0-1000 miles"
        assert bucket_numeric(1000.5, ODOMETER_RANGES) == "1000-5000 miles"

    def test_gap_goes_to_next_range(self) -> None:
        """Test a value between two ranges goes to the next range up."""
        assert categorize_price(1000.5) == "$1001-$5000"

    def test_overflow(self) -> None:
        """Test values above the last range get the overflow label."""
        assert categorize_odometer(250000) == "200000+ miles"
        assert categorize_price(75000) == "$60000+"

    def test_out_of_domain(self) -> None:
        """Test negative and non-numeric values are Unknown."""
        assert bucket_numeric(-5, ODOMETER_RANGES) == "Unknown"
        assert bucket_numeric("n/a", ODOMETER_RANGES) == "Unknown"
        assert bucket_numeric(float("nan"), ODOMETER_RANGES) == "Unknown"
        assert bucket_index(None, PRICE_RANGES) == -1

    def test_below_first_range(self) -> None:
        """Test a value below the first start gets the first range."""
        table = BucketTable.from_tuples("t", [(100, 200, "a"), (200, 300, "b")])
        assert bucket_numeric(50, table) == "a"
        assert bucket_midpoint(50, table) == 150

    def test_zero(self) -> None:
        """Test zero lands in the first range."""
        assert categorize_price(0) == "$0-$1000"

    def test_monotonic(self) -> None:
        """Test bucket position never decreases as the value grows."""
        values = [0, 1, 999, 1000, 1001, 4999, 15000, 59999, 60000, 60001, 1e7]
        indices = [bucket_index(v, PRICE_RANGES) for v in values]
        assert indices == sorted(indices)

    def test_midpoint(self) -> None:
        """Test midpoints of in-range values."""
        assert bucket_midpoint(23000, ODOMETER_RANGES) == 30000
        assert bucket_midpoint(12000, PRICE_RANGES) == 15000.5

    def test_midpoint_overflow(self) -> None:
        """Test overflow midpoint extends the last range width."""
        assert bucket_midpoint(300000, ODOMETER_RANGES) == 220000
        assert bucket_midpoint(-1, ODOMETER_RANGES) is None


# =============================================================================
# RECORD TESTS
# =============================================================================


class TestCategorizeRecord:
    """Tests for categorize_record."""

    def test_region_labels(self) -> None:
        """Test default mode produces region and bucket labels."""
        result = categorize_record(make_record())
        assert result.year == "2011-2015"
        assert result.make == "Japanese"
        assert result.body == "sedan"
        assert result.odometer == "20000-40000 miles"
        assert result.price == "$10001-$20000"

    def test_brand_midpoints(self) -> None:
        """Test brand and midpoint modes."""
        result = categorize_record(
            make_record(make="VW"),
            make_mode=MakeMode.BRAND,
            numeric_mode=NumericMode.MIDPOINT,
        )
        assert result.make == "volkswagen"
        assert result.odometer == 30000
        assert result.price == 15000.5

    def test_does_not_mutate(self) -> None:
        """Test the input record is unchanged."""
        record = make_record()
        categorize_record(record)
        assert record.make == "Toyota"
        assert record.odometer == 23000

    def test_categorize_records_keeps_order(self) -> None:
        """Test order is preserved."""
        records = [make_record(year=2012), make_record(year=1990)]
        result = categorize_records(records)
        assert [r.year for r in result] == ["2011-2015", "1990-1995"]
