"""Mortality normalizer.

Converts the raw weekly deaths-by-race table to canonical records.

Schema:
    - geography_code: Jurisdiction abbreviation (string)
    - geography_name: Jurisdiction name (string)
    - date: Week ending date (datetime64)
    - category: One of the configured race/ethnicity categories (string)
    - outcome: Outcome label as published, e.g. "All Cause" (string)
    - time_period: Time period tag (string)
    - estimate_type: Estimation method tag (string)
    - observed: Observed deaths (float, nullable)
    - difference: Deaths above the expected baseline (float, nullable)
    - percent_difference: Percent above the expected baseline (float, nullable)
"""

import logging

import pandas as pd

from excess_deaths.config import Config
from excess_deaths.normalize.common import (
    normalize_category_column,
    normalize_text_column,
    parse_date_column,
    parse_number_column,
    require_columns,
)

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS = [
    "geography_code",
    "geography_name",
    "date",
    "category",
    "outcome",
    "time_period",
    "estimate_type",
    "observed",
    "difference",
    "percent_difference",
]

NUMERIC_COLUMNS = ["observed", "difference", "percent_difference"]
TEXT_COLUMNS = ["geography_code", "geography_name", "outcome", "time_period", "estimate_type"]


def normalize_mortality(raw: pd.DataFrame, config: Config | None = None) -> pd.DataFrame:
    """Normalize raw mortality records.

    Every row is parsed and category-checked before filtering, so a malformed
    record anywhere in the input fails the run. The kept records share a
    single time period and estimation method and fall strictly before the
    configured cutoff date.

    Args:
        raw: Raw mortality table with the configured source columns.
        config: Pipeline configuration. Defaults are used if omitted.

    Returns:
        DataFrame of canonical records, sorted by geography code, date,
        category and outcome.

    Raises:
        SchemaError: If a source column is missing, an identifying field is
            null or blank, or a category is unmapped.
        ParseError: If a date or numeric field cannot be parsed.
    """
    config = config or Config()
    source_columns = config.columns.source_columns()

    require_columns(raw, source_columns.values(), "Mortality dataset")

    logger.info("Normalizing %d raw mortality records", len(raw))

    df = raw[list(source_columns.values())].copy().rename(
        columns={source: canonical for canonical, source in source_columns.items()}
    )

    df["date"] = parse_date_column(df["date"], "date")
    for col in NUMERIC_COLUMNS:
        df[col] = parse_number_column(df[col], col)
    df["category"] = normalize_category_column(df["category"], config.categories)

    for col in TEXT_COLUMNS:
        df[col] = normalize_text_column(df[col], col)

    filters = config.filters
    in_period = df["time_period"] == filters.time_period
    in_method = df["estimate_type"] == filters.estimate_type
    in_window = df["date"] < pd.Timestamp(filters.cutoff)

    logger.debug(
        "Dropping %d records outside time period %r, %d outside method %r, "
        "%d on or after %s",
        (~in_period).sum(),
        filters.time_period,
        (~in_method).sum(),
        filters.estimate_type,
        (~in_window).sum(),
        filters.cutoff.isoformat(),
    )

    df = df[in_period & in_method & in_window]

    # Ensure deterministic ordering
    df = df.sort_values(["geography_code", "date", "category", "outcome"]).reset_index(drop=True)

    logger.info(
        "Normalized %d records across %d geographies",
        len(df),
        df["geography_code"].nunique(),
    )

    return df[CANONICAL_COLUMNS]
