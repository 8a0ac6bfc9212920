"""Data transformation functions for the rendering layer.

This package converts pipeline outputs into JSON-ready structures. Missing
values become None so the renderer can tell "no data" from zero.

Modules:
    timeseries: Weekly excess facets for time series charts
    maps: Per-geography map records and per-category tables
"""

from .maps import transform_category_table, transform_map_data
from .timeseries import transform_timeseries_facets

__all__ = [
    "transform_category_table",
    "transform_map_data",
    "transform_timeseries_facets",
]
