"""Map and category table transformation functions."""

import logging
from collections.abc import Iterable
from typing import Any

from excess_deaths.report.summaries import GeographySummary

from .common import json_number

logger = logging.getLogger(__name__)

__all__ = ["transform_category_table", "transform_map_data"]


def transform_map_data(summaries: Iterable[GeographySummary]) -> list[dict[str, Any]]:
    """Flatten summaries into one record per geography for map coloring.

    Args:
        summaries: Annotated geography summaries.

    Returns:
        List of {geography_code, geography_name, all_cause_difference,
        covid_difference, covid_share, label} dicts sorted by geography code.
        An undefined covid_share is None.
    """
    records = [
        {
            "geography_code": summary.geography_code,
            "geography_name": summary.geography_name,
            "all_cause_difference": json_number(summary.all_cause_difference),
            "covid_difference": json_number(summary.covid_difference),
            "covid_share": json_number(summary.covid_share),
            "label": summary.label,
        }
        for summary in summaries
    ]
    records.sort(key=lambda r: r["geography_code"])
    return records


def transform_category_table(summaries: Iterable[GeographySummary]) -> list[dict[str, Any]]:
    """Flatten category shares into one record per geography and category.

    Args:
        summaries: Annotated geography summaries.

    Returns:
        List of dicts with counts, rate, death and population shares, and
        both labels, sorted by geography code then category.
    """
    records: list[dict[str, Any]] = []

    for summary in sorted(summaries, key=lambda s: s.geography_code):
        for share in summary.categories.values():
            records.append(
                {
                    "geography_code": summary.geography_code,
                    "geography_name": summary.geography_name,
                    "category": share.category,
                    "difference": json_number(share.difference),
                    "observed": json_number(share.observed),
                    "rate": json_number(share.rate),
                    "death_share": json_number(share.death_share),
                    "population_share": json_number(share.population_share),
                    "label": share.label,
                    "disparity_label": share.disparity_label,
                }
            )

    records.sort(key=lambda r: (r["geography_code"], r["category"]))
    logger.debug("Built %d category table records", len(records))
    return records
