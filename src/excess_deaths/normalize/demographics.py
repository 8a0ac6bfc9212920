"""Demographic baseline normalizer.

Converts a wide population table (one row per geography, one column per
category-coded identifier) to long population shares.

Schema:
    - geography_name: Geography name (string)
    - category: One of the configured race/ethnicity categories (string)
    - population: Summed population count (float)
    - population_share: Share of the geography's population (float, NaN when
      the geography total is zero)

The whole-population geography is summed from raw counts before shares are
taken, so its shares are never an average of per-geography shares.
"""

import logging

import pandas as pd

from excess_deaths.config import Config
from excess_deaths.errors import safe_ratio
from excess_deaths.normalize.common import (
    normalize_text_column,
    parse_number_column,
    require_columns,
)

logger = logging.getLogger(__name__)

SCHEMA_COLUMNS = ["geography_name", "category", "population", "population_share"]


def normalize_demographics(raw: pd.DataFrame, config: Config | None = None) -> pd.DataFrame:
    """Normalize the demographic baseline into population shares.

    Args:
        raw: Wide demographic table with the configured geography column and
            identifier columns. Extra columns are ignored.
        config: Pipeline configuration. Defaults are used if omitted.

    Returns:
        DataFrame matching the population share schema, including a row per
        category for the synthetic whole-population geography.

    Raises:
        SchemaError: If the geography column or a mapped identifier is missing,
            or a geography name is null or blank.
        ParseError: If a population count cannot be parsed.
    """
    config = config or Config()
    demographics = config.demographics
    identifiers = demographics.identifiers

    require_columns(
        raw,
        [demographics.geography_column, *identifiers],
        "Demographic baseline",
    )

    logger.info("Normalizing demographic baseline with %d rows", len(raw))

    wide = pd.DataFrame(
        {
            "geography_name": normalize_text_column(
                raw[demographics.geography_column], demographics.geography_column
            )
        }
    )
    for identifier in identifiers:
        wide[identifier] = parse_number_column(raw[identifier], identifier).fillna(0.0)

    long = wide.melt(
        id_vars="geography_name",
        value_vars=list(identifiers),
        var_name="identifier",
        value_name="population",
    )
    long["category"] = long["identifier"].map(identifiers)

    # Identifiers sharing a category (and repeated geography rows) are summed
    counts = long.groupby(["geography_name", "category"], as_index=False)["population"].sum()

    whole_name = demographics.whole_population_name
    is_whole = counts["geography_name"] == whole_name
    if is_whole.any():
        logger.warning(
            "Demographic baseline already contains %r; replacing it with the sum of "
            "all other geographies",
            whole_name,
        )
        counts = counts[~is_whole]

    whole = counts.groupby("category", as_index=False)["population"].sum()
    whole.insert(0, "geography_name", whole_name)
    counts = pd.concat([counts, whole], ignore_index=True)

    totals = counts.groupby("geography_name")["population"].transform("sum")
    counts["population_share"] = safe_ratio(counts["population"], totals)

    empty = counts.loc[counts["population_share"].isna(), "geography_name"].unique()
    if len(empty):
        logger.warning("Zero population for geographies: %s", ", ".join(sorted(empty)))

    order = {name: i for i, name in enumerate(config.categories.names)}
    counts = (
        counts.assign(_order=counts["category"].map(order))
        .sort_values(["geography_name", "_order"])
        .drop(columns="_order")
        .reset_index(drop=True)
    )

    logger.info(
        "Computed population shares for %d geographies",
        counts["geography_name"].nunique(),
    )

    return counts[SCHEMA_COLUMNS]
