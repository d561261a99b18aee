"""
Data module for the car sales dashboard core.

Contains record schemas, dataset loading and synthetic generation.
"""

from carsales.data.loader import (
    DatasetLoader,
    LoadResult,
    SourceColumns,
    load_dataset,
    records_from_dataframe,
)
from carsales.data.schemas import (
    BucketRange,
    BucketTable,
    CategorizedRecord,
    MakeMode,
    NumericMode,
    RawRecord,
    Region,
)
from carsales.data.synthetic_generator import SyntheticDataGenerator, generate_small_dataset

__all__ = [
    # Data loading
    "DatasetLoader",
    "LoadResult",
    "SourceColumns",
    "load_dataset",
    "records_from_dataframe",
    # Schemas
    "BucketRange",
    "BucketTable",
    "CategorizedRecord",
    "MakeMode",
    "NumericMode",
    "RawRecord",
    "Region",
    # Synthetic data
    "SyntheticDataGenerator",
    "generate_small_dataset",
]
