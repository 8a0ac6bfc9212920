"""Pipeline errors and the undefined-ratio sentinel.

Parse and schema errors are fatal for the whole run. An undefined ratio is
not an error: it is carried as NaN and rendered as unavailable text.
"""

import math
from typing import Any

import numpy as np
import pandas as pd

UNDEFINED_RATIO = float("nan")


class PipelineError(Exception):
    """Base exception for excess deaths pipeline errors."""


class ParseError(PipelineError):
    """Raised when a date or numeric field cannot be parsed."""

    def __init__(self, field: str, value: Any, row: Any = None) -> None:
        self.field = field
        self.value = value
        self.row = row
        location = f" at row {row}" if row is not None else ""
        super().__init__(f"Cannot parse {field} value {value!r}{location}")


class SchemaError(PipelineError):
    """Raised when input does not match the expected columns or categories."""


def is_undefined(value: Any) -> bool:
    """Return True if value is the undefined-ratio sentinel (or missing)."""
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return bool(pd.isna(value))


def safe_ratio(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Divide two aligned series, yielding NaN where the denominator is zero.

    Args:
        numerator: Numerator values.
        denominator: Denominator values.

    Returns:
        Float series. Zero or missing denominators produce NaN rather than
        0 or infinity.
    """
    numerator = numerator.astype(float)
    denominator = denominator.astype(float)
    return numerator / denominator.where(denominator != 0, np.nan)
