"""Per-geography summaries.

Joins category rollups and geography totals with the demographic baseline
and attaches the labels the renderer displays on maps and charts.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import pandas as pd

from excess_deaths.errors import is_undefined, safe_ratio
from excess_deaths.report.labels import (
    UNAVAILABLE,
    category_label,
    disparity_label,
    geography_label,
)

logger = logging.getLogger(__name__)

__all__ = ["CategoryShare", "GeographySummary", "annotate_geographies", "join_category_shares"]


@dataclass(frozen=True)
class CategoryShare:
    """Excess deaths of one category within a geography.

    Ratios are NaN when undefined; labels already carry the
    "Data Unavailable" fallback. Both labels fall back when the category has
    no population share.
    """

    category: str
    difference: float
    observed: float
    rate: float
    death_share: float
    population_share: float
    label: str
    disparity_label: str


@dataclass(frozen=True)
class GeographySummary:
    """Annotated excess death summary for one geography."""

    geography_code: str
    geography_name: str
    all_cause_difference: float
    covid_difference: float
    covid_share: float
    label: str
    categories: Mapping[str, CategoryShare] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def category_labels(self) -> dict[str, str]:
        """Map category name to its excess label."""
        return {name: share.label for name, share in self.categories.items()}


def join_category_shares(
    rollups: pd.DataFrame,
    totals: pd.DataFrame,
    population_shares: pd.DataFrame,
) -> pd.DataFrame:
    """Left join category death shares with population shares.

    Args:
        rollups: Category rollups from aggregate_categories.
        totals: Geography totals from aggregate_totals.
        population_shares: Output of normalize_demographics.

    Returns:
        Rollups with death_share and population_share columns. Categories
        missing from the baseline keep a NaN population share.
    """
    shares = rollups.merge(
        totals[["geography_code", "all_cause_difference"]],
        on="geography_code",
        how="left",
        validate="many_to_one",
    )
    shares["death_share"] = safe_ratio(shares["difference"], shares["all_cause_difference"])

    shares = shares.merge(
        population_shares[["geography_name", "category", "population_share"]],
        on=["geography_name", "category"],
        how="left",
        validate="many_to_one",
    )

    unmatched = shares["population_share"].isna().sum()
    if unmatched:
        logger.warning("%d geography/category pairs have no population share", unmatched)

    return shares.drop(columns="all_cause_difference")


def annotate_geographies(
    rollups: pd.DataFrame,
    totals: pd.DataFrame,
    population_shares: pd.DataFrame,
) -> list[GeographySummary]:
    """Build annotated summaries for every geography.

    Args:
        rollups: Category rollups from aggregate_categories.
        totals: Geography totals from aggregate_totals.
        population_shares: Output of normalize_demographics.

    Returns:
        One GeographySummary per geography in totals, sorted by geography
        code.
    """
    shares = join_category_shares(rollups, totals, population_shares)

    totals = totals.sort_values("geography_code").reset_index(drop=True)
    covid_shares = safe_ratio(totals["covid_difference"], totals["all_cause_difference"])

    categories_by_geography: dict[str, dict[str, CategoryShare]] = {}
    for row in shares.itertuples(index=False):
        categories_by_geography.setdefault(row.geography_code, {})[row.category] = CategoryShare(
            category=row.category,
            difference=float(row.difference),
            observed=float(row.observed),
            rate=float(row.rate),
            death_share=float(row.death_share),
            population_share=float(row.population_share),
            label=(
                UNAVAILABLE
                if is_undefined(row.population_share)
                else category_label(row.difference, row.rate)
            ),
            disparity_label=disparity_label(row.death_share, row.population_share),
        )

    summaries = []
    for row, covid_share in zip(totals.itertuples(index=False), covid_shares, strict=True):
        summaries.append(
            GeographySummary(
                geography_code=row.geography_code,
                geography_name=row.geography_name,
                all_cause_difference=float(row.all_cause_difference),
                covid_difference=float(row.covid_difference),
                covid_share=float(covid_share),
                label=geography_label(row.all_cause_difference, row.covid_difference, covid_share),
                categories=MappingProxyType(categories_by_geography.get(row.geography_code, {})),
            )
        )

    logger.info("Annotated %d geographies", len(summaries))

    return summaries
