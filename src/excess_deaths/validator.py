"""Consistency checks for pipeline outputs.

Validates that category rollups add up to the independently computed
geography totals and that population shares are complete, before any
summary is handed to the renderer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

TOLERANCE = 1e-6


@dataclass
class ValidationIssue:
    """Represents a single validation finding."""

    check: str
    subject: str
    message: str
    recoverable: bool = True

    def __str__(self) -> str:
        """Format issue for display."""
        return f"{self.check}: {self.subject}: {self.message}"


@dataclass
class ValidationResult:
    """Result of validating pipeline outputs."""

    valid: bool = True
    checked: int = 0
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, issue: ValidationIssue) -> None:
        """Add a validation error."""
        self.errors.append(issue)
        if not issue.recoverable:
            self.valid = False

    def add_warning(self, warning: str) -> None:
        """Add a validation warning."""
        self.warnings.append(warning)

    def merge(self, other: ValidationResult) -> None:
        """Merge another result into this one."""
        self.checked += other.checked
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.valid:
            self.valid = False


class DataValidator:
    """Validates rollup consistency and population share completeness."""

    def __init__(self, strict: bool = False, tolerance: float = TOLERANCE) -> None:
        """Initialize validator.

        Args:
            strict: If True, treat population share warnings as errors.
            tolerance: Absolute tolerance for floating point comparisons.
        """
        self.strict = strict
        self.tolerance = tolerance

    def validate_rollups(self, rollups: pd.DataFrame, totals: pd.DataFrame) -> ValidationResult:
        """Check that category differences sum to each geography's all-cause total.

        Args:
            rollups: Category rollups from aggregate_categories.
            totals: Geography totals from aggregate_totals.

        Returns:
            ValidationResult; a mismatch is a non-recoverable error.
        """
        result = ValidationResult()

        category_sums = rollups.groupby("geography_code")["difference"].sum()
        expected = totals.set_index("geography_code")["all_cause_difference"]
        category_sums = category_sums.reindex(expected.index, fill_value=0.0)

        for code, total in expected.items():
            result.checked += 1
            summed = float(category_sums[code])
            if not np.isclose(summed, float(total), rtol=0.0, atol=self.tolerance):
                result.add_error(
                    ValidationIssue(
                        check="rollup_consistency",
                        subject=str(code),
                        message=f"category sum {summed:g} != all-cause total {float(total):g}",
                        recoverable=False,
                    )
                )

        orphans = sorted(set(rollups["geography_code"]) - set(expected.index))
        for code in orphans:
            result.add_error(
                ValidationIssue(
                    check="rollup_consistency",
                    subject=str(code),
                    message="geography has category rollups but no totals",
                    recoverable=False,
                )
            )

        logger.debug("Checked rollup consistency for %d geographies", result.checked)
        return result

    def validate_population_shares(self, population_shares: pd.DataFrame) -> ValidationResult:
        """Check that each geography's population shares sum to one.

        Args:
            population_shares: Output of normalize_demographics.

        Returns:
            ValidationResult; mismatches are warnings unless strict.
        """
        result = ValidationResult()

        sums = population_shares.groupby("geography_name")["population_share"].sum(min_count=1)
        for name, total in sums.items():
            result.checked += 1
            if pd.isna(total) or not np.isclose(total, 1.0, rtol=0.0, atol=self.tolerance):
                message = f"population shares of {name} sum to {total:g}, expected 1"
                if self.strict:
                    result.add_error(
                        ValidationIssue(
                            check="population_shares",
                            subject=str(name),
                            message=message,
                            recoverable=False,
                        )
                    )
                else:
                    result.add_warning(message)

        logger.debug("Checked population shares for %d geographies", result.checked)
        return result
