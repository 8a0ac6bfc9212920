"""Test fixtures for excess-deaths.

Provides fixtures for:
- Default pipeline configuration
- Raw mortality row factories using the source column names
- Small raw mortality and demographic tables
"""

from collections.abc import Callable
from typing import Any

import pandas as pd
import pytest

from excess_deaths.config import Config

RowFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def config() -> Config:
    """Default configuration."""
    return Config()


@pytest.fixture
def raw_row() -> RowFactory:
    """Factory for one raw mortality record keyed by source column names.

    Returns:
        Callable accepting canonical field names as keyword overrides.
    """

    def _make(
        code: str = "NY",
        name: str = "New York",
        date: Any = "04/04/2020",
        race: Any = "Non-Hispanic White",
        outcome: str = "All Cause",
        observed: Any = "1,000",
        difference: Any = "100",
        percent: Any = "11.1",
        time_period: str = "2020",
        estimate_type: str = "Predicted (weighted)",
    ) -> dict[str, Any]:
        return {
            "State Abbreviation": code,
            "Jurisdiction": name,
            "Week Ending Date": date,
            "Race/Ethnicity": race,
            "Outcome": outcome,
            "Time Period": time_period,
            "Type": estimate_type,
            "Number of Deaths": observed,
            "Difference from 2015-2019 to 2020": difference,
            "Percent Difference from 2015-2019 to 2020": percent,
        }

    return _make


@pytest.fixture
def ny_scenario(raw_row: RowFactory) -> pd.DataFrame:
    """Two weeks of all-cause White excess in NY plus one COVID-19 week."""
    return pd.DataFrame(
        [
            raw_row(date="04/04/2020", observed="1,100", difference="100", percent="10"),
            raw_row(date="04/11/2020", observed="1,150", difference="50", percent="5"),
            raw_row(
                date="04/04/2020",
                outcome="COVID-19",
                observed="30",
                difference="30",
                percent=None,
            ),
        ]
    )


@pytest.fixture
def demographics() -> pd.DataFrame:
    """Wide demographic baseline for two states."""
    return pd.DataFrame(
        {
            "STNAME": ["New York", "Texas"],
            "NHWA": [500, 400],
            "NHBA": [200, 100],
            "H": [150, 400],
            "NHAA": [80, 40],
            "NHNA": [20, 10],
            "NHIA": [10, 20],
            "NHTOM": [40, 30],
        }
    )
