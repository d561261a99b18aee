"""
Module: schemas

Purpose: Pydantic models for the records flowing through the car sales data core.

All models use Pydantic v2 for validation with strict type hints. Records are
frozen: categorization and aggregation build new objects, they never mutate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from carsales.exceptions import CategorizationConfigError


# =============================================================================
# ENUMS
# =============================================================================


class Region(str, Enum):
    """Coarse grouping of vehicle makes by country of origin."""

    JAPANESE = "Japanese"
    EUROPEAN = "European"
    AMERICAN = "American"
    KOREAN = "Korean"
    OTHER = "Other"


class MakeMode(str, Enum):
    """How the make field is categorized for a given chart."""

    BRAND = "brand"  # lowercased brand name
    REGION = "region"  # Region label


class NumericMode(str, Enum):
    """How odometer and price are categorized for a given chart."""

    LABEL = "label"  # bucket label, e.g. "20000-40000 miles"
    MIDPOINT = "midpoint"  # arithmetic midpoint of the bucket


# =============================================================================
# BASE MODELS
# =============================================================================


class BaseSchema(BaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


# =============================================================================
# RECORDS
# =============================================================================


class RawRecord(BaseSchema):
    """One validated row of the source dataset.

    Every record that reaches the categorizers has a usable value for each
    field; rows that fail this model are dropped by the loader.
    """

    year: int = Field(ge=1900, le=2100)
    make: str = Field(min_length=1)
    body: str = Field(min_length=1)
    odometer: float = Field(ge=0, allow_inf_nan=False)
    price: float = Field(gt=0, allow_inf_nan=False)

    @field_validator("make", "body")
    @classmethod
    def reject_placeholders(cls, v: str) -> str:
        """Reject the placeholder strings used for blank cells."""
        if v.lower() in {"unspecified", "nan", "none", "null", "<na>"}:
            raise ValueError(f"placeholder value {v!r} is not a valid field value")
        return v


class CategorizedRecord(BaseSchema):
    """A RawRecord after every field has been mapped to a label.

    ``make`` holds either the lowercased brand or a Region label, and
    ``odometer``/``price`` hold either a bucket label or the bucket midpoint,
    depending on the chart consuming the record.
    """

    year: str
    make: str
    body: str
    odometer: str | float | None
    price: str | float | None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict for JSON output."""
        return self.model_dump()


# =============================================================================
# BUCKET TABLES
# =============================================================================


class BucketRange(BaseSchema):
    """A closed numeric interval with a human-readable label."""

    start: float
    end: float
    label: str = Field(min_length=1)

    @model_validator(mode="after")
    def check_bounds(self) -> "BucketRange":
        if self.start > self.end:
            raise ValueError(f"range {self.label!r} has start {self.start} > end {self.end}")
        return self

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2

    @property
    def width(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class BucketTable:
    """
    Ordered list of bucket ranges for one field.

    Attributes:
        name: Table name used in error messages ("year", "odometer", "price")
        ranges: Ranges sorted by start
        overflow_label: Label returned for values above the last range
        strict: If True, neighbouring ranges may not share a boundary value
    """

    name: str
    ranges: tuple[BucketRange, ...]
    overflow_label: str = "Unknown"
    strict: bool = False

    def __post_init__(self) -> None:
        if not self.ranges:
            raise CategorizationConfigError("Bucket table has no ranges", table=self.name)

        for previous, current in zip(self.ranges, self.ranges[1:]):
            if current.start < previous.start:
                raise CategorizationConfigError(
                    f"Ranges are not sorted: {current.label!r} starts before {previous.label!r}",
                    table=self.name,
                )
            overlaps = current.start <= previous.end if self.strict else current.start < previous.end
            if overlaps:
                raise CategorizationConfigError(
                    f"Ranges {previous.label!r} and {current.label!r} overlap",
                    table=self.name,
                )

        labels = [r.label for r in self.ranges]
        if len(set(labels)) != len(labels):
            raise CategorizationConfigError("Duplicate range labels", table=self.name)

    @classmethod
    def from_tuples(
        cls,
        name: str,
        ranges: list[tuple[float, float, str]],
        *,
        overflow_label: str = "Unknown",
        strict: bool = False,
    ) -> "BucketTable":
        """Build a table from (start, end, label) tuples."""
        return cls(
            name=name,
            ranges=tuple(BucketRange(start=s, end=e, label=label) for s, e, label in ranges),
            overflow_label=overflow_label,
            strict=strict,
        )

    @property
    def labels(self) -> list[str]:
        """Labels in table order, including the overflow label."""
        return [r.label for r in self.ranges] + [self.overflow_label]

    def __len__(self) -> int:
        return len(self.ranges)
