"""Weekly excess time series.

Pivots canonical records into one wide row per geography, week and category
for faceted time series charts.

Schema (wide rows):
    - geography_code (string)
    - geography_name (string)
    - date (datetime64): Week ending date
    - category (string)
    - all_cause_difference (float, nullable)
    - all_cause_percent_difference (float, nullable)
    - covid_difference (float, nullable)
    - covid_percent_difference (float, nullable)

A missing outcome stays NaN: it means "no data", not "no change".
"""

import logging

import pandas as pd

from excess_deaths.config import Config
from excess_deaths.errors import SchemaError

logger = logging.getLogger(__name__)

KEY_COLUMNS = ["geography_code", "geography_name", "date", "category"]
VALUE_COLUMNS = ["difference", "percent_difference"]
OUTCOME_KEYS = ["all_cause", "covid"]

WIDE_COLUMNS = KEY_COLUMNS + [
    f"{outcome}_{value}" for outcome in OUTCOME_KEYS for value in VALUE_COLUMNS
]


def reshape_excess(canonical: pd.DataFrame, config: Config | None = None) -> pd.DataFrame:
    """Pivot canonical records into wide weekly rows.

    Args:
        canonical: Canonical records from normalize_mortality.
        config: Pipeline configuration. Defaults are used if omitted.

    Returns:
        DataFrame matching the wide row schema with exactly one row per
        (geography, date, category) present in the filtered input, sorted by
        geography code, category and date.

    Raises:
        SchemaError: If a (geography, date, category, outcome) key repeats.
    """
    config = config or Config()
    outcomes = config.filters.outcomes
    outcome_keys = {outcomes.all_cause: "all_cause", outcomes.covid: "covid"}

    subset = canonical[canonical["outcome"].isin(outcome_keys)]

    if subset.empty:
        logger.warning("No all-cause or COVID-19 records to reshape")
        return pd.DataFrame(columns=WIDE_COLUMNS)

    subset = subset.assign(outcome=subset["outcome"].map(outcome_keys))

    duplicated = subset.duplicated(subset=[*KEY_COLUMNS, "outcome"], keep=False)
    if duplicated.any():
        first = subset[duplicated].iloc[0]
        msg = (
            f"{int(duplicated.sum())} records share a geography/date/category/outcome key, "
            f"e.g. {first['geography_code']} {first['date'].date()} "
            f"{first['category']} {first['outcome']}"
        )
        raise SchemaError(msg)

    wide = subset.pivot(index=KEY_COLUMNS, columns="outcome", values=VALUE_COLUMNS)
    wide.columns = [f"{outcome}_{value}" for value, outcome in wide.columns]

    # Keep both outcome column pairs even when one outcome is absent entirely
    wide = (
        wide.reset_index()
        .reindex(columns=WIDE_COLUMNS)
        .sort_values(["geography_code", "category", "date"])
        .reset_index(drop=True)
    )

    logger.info(
        "Reshaped %d records into %d weekly rows (%d missing COVID-19 values)",
        len(subset),
        len(wide),
        wide["covid_difference"].isna().sum(),
    )

    return wide
