"""Category rollups and geography totals.

Sums canonical records by geography and category, then derives excess rates
and rankings. Missing weekly values count as zero excess.

Schema (metrics_category_rollup):
    - geography_code (string)
    - geography_name (string)
    - category (string)
    - difference (float): Summed all-cause excess deaths
    - observed (float): Summed all-cause observed deaths
    - rate (float, nullable): difference / (observed - difference)
    - rank (float, nullable): Rank of rate within the geography, 1 = highest

Schema (metrics_geography_totals):
    - geography_code (string)
    - geography_name (string)
    - all_cause_difference (float)
    - covid_difference (float)
"""

import logging

import pandas as pd

from excess_deaths.config import Config
from excess_deaths.errors import safe_ratio

logger = logging.getLogger(__name__)

GEOGRAPHY_COLUMNS = ["geography_code", "geography_name"]
ROLLUP_COLUMNS = [*GEOGRAPHY_COLUMNS, "category", "difference", "observed", "rate", "rank"]
TOTALS_COLUMNS = [*GEOGRAPHY_COLUMNS, "all_cause_difference", "covid_difference"]


def excess_rate(difference: pd.Series, observed: pd.Series) -> pd.Series:
    """Excess deaths relative to the implied non-excess baseline.

    The baseline is reconstructed as observed minus excess, so the excess is
    not counted in its own denominator.

    Args:
        difference: Summed excess deaths.
        observed: Summed observed deaths.

    Returns:
        Rate series, NaN where observed equals difference.
    """
    return safe_ratio(difference, observed - difference)


def aggregate_categories(canonical: pd.DataFrame, config: Config | None = None) -> pd.DataFrame:
    """Roll up all-cause excess by geography and category.

    Args:
        canonical: Canonical records from normalize_mortality.
        config: Pipeline configuration. Defaults are used if omitted.

    Returns:
        DataFrame with metrics_category_rollup schema, sorted by geography
        code and category.
    """
    config = config or Config()

    all_cause = canonical[canonical["outcome"] == config.filters.outcomes.all_cause]
    if all_cause.empty:
        logger.warning("No all-cause records, returning empty rollups")
        return pd.DataFrame(columns=ROLLUP_COLUMNS)

    values = all_cause.assign(
        difference=all_cause["difference"].fillna(0.0),
        observed=all_cause["observed"].fillna(0.0),
    )

    rollups = values.groupby([*GEOGRAPHY_COLUMNS, "category"], as_index=False, sort=True)[
        ["difference", "observed"]
    ].sum()

    rollups["rate"] = excess_rate(rollups["difference"], rollups["observed"])
    rollups["rank"] = rollups.groupby("geography_code")["rate"].rank(
        method="min", ascending=False
    )

    undefined = rollups["rate"].isna().sum()
    if undefined:
        logger.info("%d category rollups have an undefined excess rate", undefined)

    logger.info(
        "Aggregated %d category rollups across %d geographies",
        len(rollups),
        rollups["geography_code"].nunique(),
    )

    return rollups[ROLLUP_COLUMNS]


def aggregate_totals(canonical: pd.DataFrame, config: Config | None = None) -> pd.DataFrame:
    """Total all-cause and COVID-19 excess per geography.

    Args:
        canonical: Canonical records from normalize_mortality.
        config: Pipeline configuration. Defaults are used if omitted.

    Returns:
        DataFrame with metrics_geography_totals schema, sorted by geography
        code. A geography missing one outcome gets zero for it.
    """
    config = config or Config()
    outcomes = config.filters.outcomes

    subset = canonical[canonical["outcome"].isin([outcomes.all_cause, outcomes.covid])]
    if subset.empty:
        logger.warning("No all-cause or COVID-19 records, returning empty totals")
        return pd.DataFrame(columns=TOTALS_COLUMNS)

    totals = (
        subset.assign(difference=subset["difference"].fillna(0.0))
        .groupby([*GEOGRAPHY_COLUMNS, "outcome"])["difference"]
        .sum()
        .unstack("outcome", fill_value=0.0)
        .reindex(columns=[outcomes.all_cause, outcomes.covid], fill_value=0.0)
        .rename(
            columns={
                outcomes.all_cause: "all_cause_difference",
                outcomes.covid: "covid_difference",
            }
        )
        .reset_index()
        .sort_values("geography_code")
        .reset_index(drop=True)
    )
    totals.columns.name = None

    logger.info("Aggregated totals for %d geographies", len(totals))

    return totals[TOTALS_COLUMNS]
