"""
Module: synthetic_generator

Purpose: Generate car_prices-like synthetic data for tests and demos.

Generates realistic synthetic data with:
- Deterministic generation with seed for reproducibility
- Make shares skewed like the real dataset (a few brands dominate)
- Messy body strings ("Crew Cab", "G Sedan", "Navitgation") and make aliases
- Price correlated with model year and odometer
- Optional invalid rows (blank cells, zero prices) to exercise the loader
"""

from typing import Any

import numpy as np

from carsales.data.schemas import RawRecord


# =============================================================================
# CONSTANTS
# =============================================================================

MAKE_WEIGHTS: dict[str, float] = {
    "Ford": 0.17,
    "Chevrolet": 0.11,
    "Nissan": 0.10,
    "Toyota": 0.07,
    "Dodge": 0.06,
    "Honda": 0.05,
    "Hyundai": 0.04,
    "BMW": 0.04,
    "Kia": 0.035,
    "Chrysler": 0.03,
    "Mercedes-Benz": 0.03,
    "Jeep": 0.03,
    "Infiniti": 0.025,
    "Volkswagen": 0.02,
    "Lexus": 0.02,
    "GMC": 0.02,
    "Mazda": 0.015,
    "Cadillac": 0.015,
    "Acura": 0.01,
    "Audi": 0.01,
    "Lincoln": 0.01,
    "Subaru": 0.01,
    "Buick": 0.01,
    "Ram": 0.01,
    "Mitsubishi": 0.008,
    "Volvo": 0.006,
    "Mini": 0.005,
    "Pontiac": 0.005,
    "Land Rover": 0.004,
    "Porsche": 0.003,
    "vw": 0.002,
    "ford truck": 0.002,
    "Ferrari": 0.001,
    "Daewoo": 0.001,
    "Oldsmobile": 0.002,
    "Saturn": 0.003,
    "Mercury": 0.003,
    "Suzuki": 0.002,
    "Scion": 0.003,
    "Fiat": 0.002,
    "Smart": 0.001,
    "Tesla": 0.001,
    "Bentley": 0.001,
    "Aston Martin": 0.0005,
    "Lotus": 0.0005,
    "Dot": 0.0005,
}

BODY_TYPES = [
    "Sedan", "SUV", "G Sedan", "Crew Cab", "Minivan", "Coupe", "Hatchback",
    "Wagon", "Convertible", "SuperCrew", "Extended Cab", "Van", "Koup",
    "Navitgation", "Regular Cab", "G Coupe", "Roadster", "CTS Wagon",
    "Access Cab", "Transit Van", "Promaster Cargo Van", "Elantra Coupe",
]

BODY_WEIGHTS = [
    0.40, 0.25, 0.04, 0.05, 0.04, 0.03, 0.04,
    0.02, 0.02, 0.02, 0.01, 0.005, 0.005,
    0.005, 0.01, 0.005, 0.002, 0.002,
    0.003, 0.003, 0.004, 0.006,
]

YEAR_RANGE = (1982, 2015)


# =============================================================================
# SYNTHETIC DATA GENERATOR
# =============================================================================


class SyntheticDataGenerator:
    """
    Generate car sales records resembling the car_prices dataset.

    Uses numpy random generator with seed for reproducibility.
    """

    def __init__(self, *, seed: int = 42) -> None:
        """
        Initialize generator with seed.

        Args:
            seed: Random seed for reproducibility
        """
        self.seed = seed
        self.rng = np.random.default_rng(seed)

        makes = list(MAKE_WEIGHTS)
        weights = np.array([MAKE_WEIGHTS[m] for m in makes])
        self._makes = makes
        self._make_probs = weights / weights.sum()

        body_weights = np.array(BODY_WEIGHTS)
        self._body_probs = body_weights / body_weights.sum()

    def _random_year(self) -> int:
        # Skewed towards recent years like the auction data
        low, high = YEAR_RANGE
        age = int(self.rng.gamma(shape=2.0, scale=2.5))
        return max(low, high - age)

    def _random_odometer(self, year: int) -> float:
        age = YEAR_RANGE[1] - year + 1
        miles = self.rng.normal(loc=12000 * age, scale=6000 * np.sqrt(age))
        return float(max(1.0, round(miles)))

    def _random_price(self, year: int, odometer: float) -> float:
        age = YEAR_RANGE[1] - year
        base = 32000 * (0.85 ** age) - odometer * 0.03
        noise = self.rng.normal(loc=0, scale=2500)
        return float(max(100, round((base + noise) / 25) * 25))

    def generate_record(self) -> RawRecord:
        """Generate one valid record."""
        year = self._random_year()
        make = str(self.rng.choice(self._makes, p=self._make_probs))
        body = str(self.rng.choice(BODY_TYPES, p=self._body_probs))
        odometer = self._random_odometer(year)
        price = self._random_price(year, odometer)
        return RawRecord(year=year, make=make, body=body, odometer=odometer, price=price)

    def generate_records(self, n_records: int, *, sort_by_year: bool = True) -> list[RawRecord]:
        """
        Generate a list of valid records.

        Args:
            n_records: Number of records
            sort_by_year: Sort like the loader does

        Returns:
            List of RawRecord
        """
        records = [self.generate_record() for _ in range(n_records)]
        if sort_by_year:
            records.sort(key=lambda r: r.year)
        return records

    def generate_raw_rows(
        self,
        n_rows: int,
        *,
        invalid_probability: float = 0.05,
    ) -> list[dict[str, Any]]:
        """
        Generate raw source rows as strings, as read from car_prices.csv.

        A share of rows is corrupted with one of the defects the loader must
        filter: blank cell, non-numeric number, or zero selling price.

        Args:
            n_rows: Number of rows
            invalid_probability: Probability that a row is corrupted

        Returns:
            List of dicts keyed by source column name
        """
        rows: list[dict[str, Any]] = []
        for _ in range(n_rows):
            record = self.generate_record()
            row = {
                "year": str(record.year),
                "make": record.make,
                "model": "",
                "body": record.body,
                "odometer": str(int(record.odometer)),
                "sellingprice": str(int(record.price)),
            }
            if self.rng.random() < invalid_probability:
                defect = int(self.rng.integers(0, 4))
                if defect == 0:
                    row["make"] = ""
                elif defect == 1:
                    row["body"] = ""
                elif defect == 2:
                    row["odometer"] = "n/a"
                else:
                    row["sellingprice"] = "0"
            rows.append(row)
        return rows


def generate_small_dataset(seed: int = 42, n_records: int = 500) -> list[RawRecord]:
    """Generate a small dataset (500 records) for quick testing."""
    return SyntheticDataGenerator(seed=seed).generate_records(n_records)
