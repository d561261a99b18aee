"""
Module: categorizers

Purpose: Map raw field values to dashboard labels.

Every categorizer is a pure, total function over its input domain. Values that
fall outside every defined range or list come back as a sentinel label
("Unknown" or "Other"); nothing here raises on data.

Key Functions:
- categorize_year: Year -> year-range label
- categorize_make_to_region: Make -> Region label
- categorize_body: Free-text body -> normalized body type
- bucket_numeric / bucket_midpoint: Numeric value -> bucket label / midpoint
- categorize_record: Apply all of the above to a RawRecord
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any

from carsales.data.schemas import (
    BucketTable,
    CategorizedRecord,
    MakeMode,
    NumericMode,
    RawRecord,
    Region,
)
from carsales.exceptions import CategorizationConfigError


UNKNOWN = "Unknown"
OTHER = "Other"


# =============================================================================
# CANONICAL TABLES
# =============================================================================

YEAR_RANGES = BucketTable.from_tuples(
    "year",
    [
        (1985, 1989, "1985-1989"),
        (1990, 1995, "1990-1995"),
        (1996, 2000, "1996-2000"),
        (2001, 2005, "2001-2005"),
        (2006, 2010, "2006-2010"),
        (2011, 2015, "2011-2015"),
        (2016, 2020, "2016-2020"),
    ],
    overflow_label=UNKNOWN,
    strict=True,
)

ODOMETER_RANGES = BucketTable.from_tuples(
    "odometer",
    [
        (0, 1000, "0-1000 miles"),
        (1000, 5000, "1000-5000 miles"),
        (5000, 10000, "5000-10000 miles"),
        (10000, 20000, "10000-20000 miles"),
        (20000, 40000, "20000-40000 miles"),
        (40000, 60000, "40000-60000 miles"),
        (60000, 80000, "60000-80000 miles"),
        (80000, 100000, "80000-100000 miles"),
        (100000, 120000, "100000-120000 miles"),
        (120000, 160000, "120000-160000 miles"),
        (160000, 200000, "160000-200000 miles"),
    ],
    overflow_label="200000+ miles",
)

PRICE_RANGES = BucketTable.from_tuples(
    "price",
    [
        (0, 1000, "$0-$1000"),
        (1001, 5000, "$1001-$5000"),
        (5001, 10000, "$5001-$10000"),
        (10001, 20000, "$10001-$20000"),
        (20001, 30000, "$20001-$30000"),
        (30001, 40000, "$30001-$40000"),
        (40001, 50000, "$40001-$50000"),
        (50001, 60000, "$50001-$60000"),
    ],
    overflow_label="$60000+",
)

REGION_BRANDS: dict[Region, frozenset[str]] = {
    Region.JAPANESE: frozenset({
        "toyota", "isuzu", "honda", "nissan", "subaru", "mazda", "mitsubishi",
        "suzuki", "daihatsu", "lexus", "infiniti", "acura", "scion",
    }),
    Region.EUROPEAN: frozenset({
        "volkswagen", "geo", "rolls-royce", "fisker", "audi", "bmw",
        "mercedes-benz", "porsche", "volvo", "saab", "fiat", "alfa romeo",
        "jaguar", "land rover", "mini", "smart", "bentley", "aston martin",
        "lotus", "maserati", "lamborghini", "ferrari",
    }),
    Region.AMERICAN: frozenset({
        "ford", "ram", "chevrolet", "dodge", "jeep", "chrysler", "cadillac",
        "lincoln", "buick", "gmc", "plymouth", "saturn", "pontiac", "oldsmobile",
        "mercury", "hummer", "tesla",
    }),
    Region.KOREAN: frozenset({"hyundai", "kia", "genesis", "daewoo", "ssangyong"}),
}

LUXURY_BRANDS = frozenset({
    "ferrari", "rolls-royce", "fisker", "tesla", "lamborghini", "bentley",
    "porsche", "bmw", "mercedes-benz", "jaguar", "land rover", "maserati",
    "alfa romeo", "fiat", "smart", "hummer", "lotus", "aston martin",
})

# Spellings seen in the source data, mapped to the canonical brand name
MAKE_ALIASES: dict[str, str] = {
    "vw": "volkswagen",
    "mercedes": "mercedes-benz",
    "mercedes-b": "mercedes-benz",
    "landrover": "land rover",
    "chev truck": "chevrolet",
    "ford truck": "ford",
    "ford tk": "ford",
    "dodge tk": "dodge",
    "mazda tk": "mazda",
    "hyundai tk": "hyundai",
    "gmc truck": "gmc",
    "iszuzu": "isuzu",
    "alfa": "alfa romeo",
    "rolls royce": "rolls-royce",
}

# Checked in order before the keyword scan
BODY_OVERRIDES: tuple[tuple[str, str], ...] = (
    ("koup", "coupe"),
    ("navitgation", "suv"),  # misspelled navigation package trims
    ("supercrew", "truck"),
)

# Order matters: "minivan" must be tried before "van"
BODY_KEYWORDS: tuple[str, ...] = (
    "coupe", "sedan", "suv", "minivan", "truck", "van", "wagon",
    "hatchback", "convertible", "roadster", "cab",
)


@dataclass(frozen=True)
class CategorizationConfig:
    """All tables used by the categorizers, injected rather than global."""

    year_ranges: BucketTable = YEAR_RANGES
    odometer_ranges: BucketTable = ODOMETER_RANGES
    price_ranges: BucketTable = PRICE_RANGES
    region_brands: dict[Region, frozenset[str]] = field(default_factory=lambda: dict(REGION_BRANDS))
    luxury_brands: frozenset[str] = LUXURY_BRANDS
    make_aliases: dict[str, str] = field(default_factory=lambda: dict(MAKE_ALIASES))

    def validate(self) -> "CategorizationConfig":
        """Check cross-table invariants; raise CategorizationConfigError if broken."""
        check_region_lists_disjoint(self.region_brands)
        return self


DEFAULT_CONFIG = CategorizationConfig()


def check_region_lists_disjoint(region_brands: dict[Region, frozenset[str]]) -> None:
    """Raise if any brand appears in more than one region list."""
    seen: dict[str, Region] = {}
    for region, brands in region_brands.items():
        for brand in brands:
            if brand in seen and seen[brand] != region:
                raise CategorizationConfigError(
                    f"Brand {brand!r} is listed under both {seen[brand].value} and {region.value}",
                    table="region_brands",
                    context={"brand": brand},
                )
            seen[brand] = region


# =============================================================================
# FIELD CATEGORIZERS
# =============================================================================


def parse_number(value: Any) -> float | None:
    """Parse a value as a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def categorize_year(year: Any, table: BucketTable = YEAR_RANGES) -> str:
    """
    Categorize a model year into its year-range label.

    Args:
        year: Model year
        table: Year ranges to scan (inclusive at both ends)

    Returns:
        Label of the first matching range, or "Unknown" when no range matches
        (including gaps between ranges and non-numeric input)
    """
    number = parse_number(year)
    if number is None:
        return UNKNOWN
    for bucket in table.ranges:
        if bucket.start <= number <= bucket.end:
            return bucket.label
    return UNKNOWN


def normalize_make(make: Any, aliases: dict[str, str] | None = None) -> str:
    """Lowercase and trim a make, resolving known alternative spellings."""
    if make is None:
        return UNKNOWN.lower()
    text = re.sub(r"\s+", " ", str(make).strip().lower())
    if not text:
        return UNKNOWN.lower()
    alias_map = MAKE_ALIASES if aliases is None else aliases
    return alias_map.get(text, text)


def categorize_make_to_region(
    make: Any,
    brands: dict[Region, frozenset[str]] | None = None,
    *,
    aliases: dict[str, str] | None = None,
) -> str:
    """
    Map a make to its region of origin.

    Args:
        make: Raw make string (any case)
        brands: Region -> brand set mapping (defaults to REGION_BRANDS)
        aliases: Spelling aliases applied before lookup

    Returns:
        Region label, "Other" if the brand is in no list
    """
    normalized = normalize_make(make, aliases)
    brand_map = REGION_BRANDS if brands is None else brands
    for region, region_brands in brand_map.items():
        if normalized in region_brands:
            return region.value
    return Region.OTHER.value


def categorize_body(body: Any) -> str:
    """
    Normalize a free-text body description to a body type.

    Hard-coded substring overrides are checked first, then the first keyword
    contained in the text wins.

    Returns:
        Body type, "Other" if nothing matches, "Unknown" for empty input
    """
    if body is None:
        return UNKNOWN
    body_lower = str(body).strip().lower()
    if not body_lower:
        return UNKNOWN

    for marker, body_type in BODY_OVERRIDES:
        if marker in body_lower:
            return body_type

    for keyword in BODY_KEYWORDS:
        if keyword in body_lower:
            return keyword
    return OTHER


def is_luxury_brand(
    make: Any,
    luxury_brands: frozenset[str] = LUXURY_BRANDS,
    *,
    aliases: dict[str, str] | None = None,
) -> bool:
    """Check whether a make, after alias resolution, belongs to the luxury exclusion list."""
    return normalize_make(make, aliases) in luxury_brands


# =============================================================================
# NUMERIC BUCKETING
# =============================================================================


def bucket_index(value: Any, table: BucketTable) -> int:
    """
    Position of the bucket a value falls into.

    Matching rule shared by bucket_numeric and bucket_midpoint:
    - the first range with start <= value <= end wins
    - a non-negative value below the first range, or inside a gap between two
      ranges, goes to the next range up
    - a value above the last range gets len(table) (the overflow bucket)
    - negative or non-numeric input gets -1
    """
    number = parse_number(value)
    if number is None or number < 0:
        return -1
    for index, bucket in enumerate(table.ranges):
        if number <= bucket.end:
            return index
    return len(table.ranges)


def bucket_numeric(value: Any, table: BucketTable) -> str:
    """
    Bucket a numeric value into its range label.

    Args:
        value: Odometer reading, price, or any non-negative number
        table: Ordered bucket table

    Returns:
        Range label, the table's overflow label above the last range,
        or "Unknown" for negative/non-numeric input
    """
    index = bucket_index(value, table)
    if index < 0:
        return UNKNOWN
    if index == len(table.ranges):
        return table.overflow_label
    return table.ranges[index].label


def bucket_midpoint(value: Any, table: BucketTable) -> float | None:
    """
    Bucket a numeric value and return the bucket midpoint, for graphing.

    Values above the last range get the midpoint of a hypothetical next bucket
    with the same width as the last one. Out-of-domain input returns None.
    """
    index = bucket_index(value, table)
    if index < 0:
        return None
    if index == len(table.ranges):
        last = table.ranges[-1]
        return last.end + last.width / 2
    return table.ranges[index].midpoint


def categorize_odometer(odometer: Any, table: BucketTable = ODOMETER_RANGES) -> str:
    return bucket_numeric(odometer, table)


def categorize_price(price: Any, table: BucketTable = PRICE_RANGES) -> str:
    return bucket_numeric(price, table)


# =============================================================================
# RECORD CATEGORIZATION
# =============================================================================


def categorize_record(
    record: RawRecord,
    *,
    make_mode: MakeMode = MakeMode.REGION,
    numeric_mode: NumericMode = NumericMode.LABEL,
    config: CategorizationConfig = DEFAULT_CONFIG,
) -> CategorizedRecord:
    """
    Apply every field categorizer to one record.

    Args:
        record: Validated source record
        make_mode: Keep the lowercased brand or map it to a region
        numeric_mode: Return bucket labels or bucket midpoints for odometer/price
        config: Categorization tables

    Returns:
        New CategorizedRecord
    """
    if make_mode == MakeMode.REGION:
        make = categorize_make_to_region(
            record.make, config.region_brands, aliases=config.make_aliases
        )
    else:
        make = normalize_make(record.make, config.make_aliases)

    if numeric_mode == NumericMode.MIDPOINT:
        odometer: str | float | None = bucket_midpoint(record.odometer, config.odometer_ranges)
        price: str | float | None = bucket_midpoint(record.price, config.price_ranges)
    else:
        odometer = bucket_numeric(record.odometer, config.odometer_ranges)
        price = bucket_numeric(record.price, config.price_ranges)

    return CategorizedRecord(
        year=categorize_year(record.year, config.year_ranges),
        make=make,
        body=categorize_body(record.body),
        odometer=odometer,
        price=price,
    )


def categorize_records(
    records: list[RawRecord],
    *,
    make_mode: MakeMode = MakeMode.REGION,
    numeric_mode: NumericMode = NumericMode.LABEL,
    config: CategorizationConfig = DEFAULT_CONFIG,
) -> list[CategorizedRecord]:
    """Categorize a sequence of records, preserving order."""
    return [
        categorize_record(r, make_mode=make_mode, numeric_mode=numeric_mode, config=config)
        for r in records
    ]
