"""Summaries, labels, and renderer payloads."""

from excess_deaths.report.labels import UNAVAILABLE, category_label, geography_label
from excess_deaths.report.summaries import CategoryShare, GeographySummary, annotate_geographies

__all__ = [
    "UNAVAILABLE",
    "CategoryShare",
    "GeographySummary",
    "annotate_geographies",
    "category_label",
    "geography_label",
]
