"""
Feature module: field categorization, deduplication and aggregation.
"""

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
from carsales.features.categorizers import (
    DEFAULT_CONFIG,
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
    is_luxury_brand,
    normalize_make,
)
from carsales.features.deduplicator import composite_key, count_duplicates, deduplicate

__all__ = [
    # Categorizers
    "CategorizationConfig",
    "DEFAULT_CONFIG",
    "bucket_index",
    "bucket_midpoint",
    "bucket_numeric",
    "categorize_body",
    "categorize_make_to_region",
    "categorize_odometer",
    "categorize_price",
    "categorize_record",
    "categorize_records",
    "categorize_year",
    "is_luxury_brand",
    "normalize_make",
    # Deduplication
    "composite_key",
    "count_duplicates",
    "deduplicate",
    # Aggregation
    "collapse_long_tail",
    "count_by_key",
    "count_by_two_keys",
    "exclude_makes",
    "mean_by_key",
    "sort_by_key",
    "to_records",
    "top_n_inner",
]
