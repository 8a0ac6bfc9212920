"""Orchestrator for the excess deaths pipeline.

Runs the normalizers, metrics calculators and annotator in dependency order
and returns everything the renderer needs in one immutable result.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pandas as pd

from excess_deaths.config import Config
from excess_deaths.errors import SchemaError
from excess_deaths.metrics.rollups import aggregate_categories, aggregate_totals
from excess_deaths.metrics.timeseries import reshape_excess
from excess_deaths.normalize.demographics import normalize_demographics
from excess_deaths.normalize.mortality import normalize_mortality
from excess_deaths.report.summaries import GeographySummary, annotate_geographies
from excess_deaths.validator import DataValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Outputs of one pipeline run, addressable by geography code."""

    wide_rows: pd.DataFrame
    summaries: tuple[GeographySummary, ...]
    stats: Mapping[str, Any] = field(default_factory=dict)

    def summary(self, geography_code: str) -> GeographySummary:
        """Look up the summary of one geography.

        Raises:
            KeyError: If the geography is unknown.
        """
        for summary in self.summaries:
            if summary.geography_code == geography_code:
                return summary
        raise KeyError(geography_code)

    def summary_labels(self) -> dict[str, str]:
        """Map geography code to its summary label."""
        return {s.geography_code: s.label for s in self.summaries}

    def category_labels(self, geography_code: str) -> dict[str, str]:
        """Map category to its label for one geography."""
        return self.summary(geography_code).category_labels()


def run_pipeline(
    raw_mortality: pd.DataFrame,
    raw_demographics: pd.DataFrame,
    config: Config | None = None,
    strict: bool = False,
) -> PipelineResult:
    """Run every pipeline stage and return the annotated result.

    Any parse, schema or consistency failure aborts the run; no partial
    result is returned.

    Args:
        raw_mortality: Raw weekly mortality table.
        raw_demographics: Wide demographic baseline table.
        config: Pipeline configuration. Defaults are used if omitted.
        strict: Treat population shares that do not sum to one as errors.

    Returns:
        PipelineResult with wide rows, summaries sorted by geography code,
        and run statistics:
        - start_time: ISO8601 start timestamp
        - end_time: ISO8601 end timestamp
        - duration_seconds: Total duration
        - canonical_rows, wide_rows, rollup_rows, geographies: Row counts
        - warnings: List of validation warnings

    Raises:
        ParseError: If a date or numeric field cannot be parsed.
        SchemaError: If input columns or categories are invalid, or if the
            outputs fail a consistency check.
    """
    config = config or Config()
    start_time = datetime.now(UTC)

    logger.info("Starting excess deaths pipeline (cutoff %s)", config.filters.cutoff.isoformat())

    canonical = normalize_mortality(raw_mortality, config)
    population_shares = normalize_demographics(raw_demographics, config)

    wide_rows = reshape_excess(canonical, config)
    rollups = aggregate_categories(canonical, config)
    totals = aggregate_totals(canonical, config)

    validator = DataValidator(strict=strict)
    validation = validator.validate_rollups(rollups, totals)
    validation.merge(validator.validate_population_shares(population_shares))

    for warning in validation.warnings:
        logger.warning("Validation warning: %s", warning)
    if not validation.valid:
        msg = "Pipeline outputs failed validation: " + "; ".join(
            str(error) for error in validation.errors
        )
        raise SchemaError(msg)

    summaries = tuple(annotate_geographies(rollups, totals, population_shares))

    end_time = datetime.now(UTC)
    stats: dict[str, Any] = {
        "start_time": start_time.isoformat(),
        "end_time": end_time.isoformat(),
        "duration_seconds": (end_time - start_time).total_seconds(),
        "canonical_rows": len(canonical),
        "wide_rows": len(wide_rows),
        "rollup_rows": len(rollups),
        "geographies": len(summaries),
        "warnings": list(validation.warnings),
    }

    logger.info(
        "Pipeline complete: %d weekly rows, %d geographies, %d warnings",
        len(wide_rows),
        len(summaries),
        len(validation.warnings),
    )

    return PipelineResult(wide_rows=wide_rows, summaries=summaries, stats=stats)
