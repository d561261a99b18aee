"""
Load and apply categorization table overrides from YAML.

The canonical tables in ``categorizers`` cover the car_prices dataset. A
deployment can replace any of them (bucket boundaries, region lists, luxury
brands, make aliases) without code changes by pointing the settings at a YAML
file.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from carsales.data.schemas import BucketTable, Region
from carsales.exceptions import CategorizationConfigError
from carsales.features.categorizers import DEFAULT_CONFIG, CategorizationConfig

logger = logging.getLogger(__name__)

TABLE_FIELDS = {
    "year": "year_ranges",
    "odometer": "odometer_ranges",
    "price": "price_ranges",
}


# =============================================================================
# OVERRIDE LOADING
# =============================================================================


def load_table_overrides(path: Path | str) -> dict[str, Any]:
    """Load categorization overrides from a YAML file.

    Expected YAML format:
    ```yaml
    tables:
      odometer:
        overflow_label: "150000+ miles"
        ranges:
          - [0, 50000, "0-50000 miles"]
          - [50000, 150000, "50000-150000 miles"]
    region_brands:
      American: [ford, chevrolet]
    luxury_brands: [ferrari, bentley]
    make_aliases:
      chevy: chevrolet
    ```

    Args:
        path: Path to the YAML override file

    Returns:
        Dictionary with the recognised sections (missing sections omitted)

    Raises:
        FileNotFoundError: If the override file doesn't exist
        yaml.YAMLError: If the YAML is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Override file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid override file {path}, expected a mapping at top level")
        return {}

    result: dict[str, Any] = {}
    for section in ("tables", "region_brands", "make_aliases"):
        value = data.get(section)
        if value is None:
            continue
        if not isinstance(value, dict):
            logger.warning(f"Invalid '{section}' section in override file, expected dict")
            continue
        result[section] = value

    luxury = data.get("luxury_brands")
    if luxury is not None:
        if isinstance(luxury, list):
            result["luxury_brands"] = luxury
        else:
            logger.warning("Invalid 'luxury_brands' section in override file, expected list")

    return result


def load_table_overrides_safe(path: Path | str | None) -> dict[str, Any]:
    """Load overrides, returning an empty dict when the file is absent or unreadable.

    Args:
        path: Path to override file, or None

    Returns:
        Override dictionary, or empty dict if path is None or file can't be loaded
    """
    if path is None:
        return {}

    try:
        return load_table_overrides(path)
    except FileNotFoundError:
        logger.info(f"No table override file found at {path}")
        return {}
    except yaml.YAMLError as e:
        logger.warning(f"Invalid YAML in table override file {path}: {e}")
        return {}


# =============================================================================
# OVERRIDE APPLICATION
# =============================================================================


def _build_table(name: str, spec: dict[str, Any], base: BucketTable) -> BucketTable:
    ranges = spec.get("ranges")
    if not isinstance(ranges, list) or not ranges:
        raise CategorizationConfigError("Override table needs a non-empty 'ranges' list", table=name)

    tuples: list[tuple[float, float, str]] = []
    for entry in ranges:
        if isinstance(entry, dict):
            tuples.append((entry.get("start"), entry.get("end"), entry.get("label")))
        elif isinstance(entry, (list, tuple)) and len(entry) == 3:
            tuples.append((entry[0], entry[1], entry[2]))
        else:
            raise CategorizationConfigError(
                f"Invalid range entry {entry!r}, expected [start, end, label]",
                table=name,
            )

    try:
        return BucketTable.from_tuples(
            name,
            tuples,
            overflow_label=str(spec.get("overflow_label", base.overflow_label)),
            strict=base.strict,
        )
    except ValidationError as e:
        raise CategorizationConfigError(f"Invalid range in override table: {e}", table=name) from e


def apply_table_overrides(
    overrides: dict[str, Any],
    base: CategorizationConfig = DEFAULT_CONFIG,
) -> CategorizationConfig:
    """Apply overrides on top of a categorization config.

    Sections not present in ``overrides`` keep the base values. The result is
    validated before it is returned.

    Args:
        overrides: Output of load_table_overrides
        base: Config to start from

    Returns:
        New CategorizationConfig

    Raises:
        CategorizationConfigError: If an override table or brand list is invalid
    """
    changes: dict[str, Any] = {}

    for table_name, spec in overrides.get("tables", {}).items():
        field_name = TABLE_FIELDS.get(table_name)
        if field_name is None:
            logger.warning(f"Unknown table '{table_name}' in overrides, ignoring")
            continue
        if not isinstance(spec, dict):
            raise CategorizationConfigError("Override table must be a mapping", table=table_name)
        changes[field_name] = _build_table(table_name, spec, getattr(base, field_name))

    if "region_brands" in overrides:
        region_brands = dict(base.region_brands)
        for region_name, brands in overrides["region_brands"].items():
            try:
                region = Region(region_name)
            except ValueError as e:
                raise CategorizationConfigError(
                    f"Unknown region {region_name!r}",
                    table="region_brands",
                ) from e
            region_brands[region] = frozenset(str(b).strip().lower() for b in brands or [])
        changes["region_brands"] = region_brands

    if "luxury_brands" in overrides:
        changes["luxury_brands"] = frozenset(str(b).strip().lower() for b in overrides["luxury_brands"])

    if "make_aliases" in overrides:
        aliases = dict(base.make_aliases)
        aliases.update({str(k).strip().lower(): str(v).strip().lower() for k, v in overrides["make_aliases"].items()})
        changes["make_aliases"] = aliases

    config = dataclasses.replace(base, **changes)
    config.validate()
    logger.info(f"Applied categorization overrides: {sorted(changes)}")
    return config
