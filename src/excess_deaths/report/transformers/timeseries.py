"""Time series facet transformation functions."""

import logging
from typing import Any

import pandas as pd

from excess_deaths.metrics.timeseries import WIDE_COLUMNS

from .common import json_number

logger = logging.getLogger(__name__)

__all__ = ["transform_timeseries_facets"]

VALUE_FIELDS = [col for col in WIDE_COLUMNS if col.endswith("difference")]


def transform_timeseries_facets(
    wide_rows: pd.DataFrame,
) -> dict[str, dict[str, list[dict[str, Any]]]]:
    """Group wide rows into per-geography, per-category chart series.

    Args:
        wide_rows: Output of reshape_excess.

    Returns:
        {geography_code: {category: [{date, <value fields>, has_covid_data}]}}
        with geographies in code order and points in date order. Missing
        values are None; has_covid_data is False when the week has no
        COVID-19 percent difference, so no annotation should be drawn.
    """
    facets: dict[str, dict[str, list[dict[str, Any]]]] = {}

    ordered = wide_rows.sort_values(["geography_code", "category", "date"])
    for row in ordered.to_dict("records"):
        point: dict[str, Any] = {"date": pd.Timestamp(row["date"]).strftime("%Y-%m-%d")}
        for name in VALUE_FIELDS:
            point[name] = json_number(row[name])
        point["has_covid_data"] = point["covid_percent_difference"] is not None

        facets.setdefault(row["geography_code"], {}).setdefault(row["category"], []).append(
            point
        )

    logger.info("Transformed %d weekly rows into %d geography facets", len(ordered), len(facets))

    return facets
