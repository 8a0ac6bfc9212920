"""Normalizers for the mortality dataset and the demographic baseline.

- mortality: raw weekly records -> canonical records
- demographics: wide population counts -> long population shares
"""

from excess_deaths.normalize.demographics import normalize_demographics
from excess_deaths.normalize.mortality import CANONICAL_COLUMNS, normalize_mortality

__all__ = [
    "CANONICAL_COLUMNS",
    "normalize_demographics",
    "normalize_mortality",
]
