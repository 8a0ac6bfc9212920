"""Metrics calculators for weekly time series, category rollups, and totals."""

from excess_deaths.metrics.orchestrator import PipelineResult, run_pipeline
from excess_deaths.metrics.rollups import aggregate_categories, aggregate_totals, excess_rate
from excess_deaths.metrics.timeseries import reshape_excess

__all__ = [
    "PipelineResult",
    "aggregate_categories",
    "aggregate_totals",
    "excess_rate",
    "reshape_excess",
    "run_pipeline",
]
