"""Common utilities for data normalization.

Provides shared functions for parsing source dates and counts, checking
required columns, and mapping race/ethnicity labels onto the fixed category
set.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

import pandas as pd

from excess_deaths.config import CategoriesConfig
from excess_deaths.errors import ParseError, SchemaError

logger = logging.getLogger(__name__)

# Week ending dates are published as e.g. "09/19/2020"
DATE_FORMAT = "%m/%d/%Y"


def require_columns(df: pd.DataFrame, columns: Iterable[str], source: str) -> None:
    """Check that every expected column is present.

    Args:
        df: Input DataFrame.
        columns: Column names that must be present.
        source: Human-readable name of the input, used in the error message.

    Raises:
        SchemaError: If any column is missing.
    """
    missing = [col for col in columns if col not in df.columns]
    if missing:
        msg = f"{source} is missing expected columns: {', '.join(missing)}"
        raise SchemaError(msg)


def normalize_text_column(series: pd.Series, field: str) -> pd.Series:
    """Strip a required text column, failing on the first null or blank row.

    Args:
        series: Column of identifying values, e.g. geography codes.
        field: Field name for error reporting.

    Returns:
        Series of stripped strings.

    Raises:
        SchemaError: If any value is null or blank.
    """
    text = series.map(lambda value: value if pd.isna(value) else str(value).strip())
    missing = text.isna() | text.eq("")
    if missing.any():
        msg = f"Missing {field} value at row {missing.idxmax()}"
        raise SchemaError(msg)

    return text.astype(str)


def parse_date(value: Any, field: str = "date", row: Any = None) -> date:
    """Parse a month/day/year date string.

    Args:
        value: Raw date value.
        field: Field name for error reporting.
        row: Row label for error reporting.

    Returns:
        Parsed calendar date.

    Raises:
        ParseError: If the value is missing or not in month/day/year format.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ParseError(field, value, row)

    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise ParseError(field, value, row) from e


def parse_number(value: Any, field: str, row: Any = None) -> float:
    """Parse a count or percentage, tolerating thousands separators.

    Args:
        value: Raw numeric value (number, string, or missing).
        field: Field name for error reporting.
        row: Row label for error reporting.

    Returns:
        Parsed float, or NaN for missing/blank values.

    Raises:
        ParseError: If a non-blank value cannot be parsed as a number.
    """
    if isinstance(value, bool):
        raise ParseError(field, value, row)
    if isinstance(value, int | float):
        return float(value)
    if value is None or pd.isna(value):
        return float("nan")

    text = str(value).replace(",", "").strip()
    if not text:
        return float("nan")

    try:
        return float(text)
    except ValueError as e:
        raise ParseError(field, value, row) from e


def parse_date_column(series: pd.Series, field: str) -> pd.Series:
    """Parse every value of a date column, failing on the first bad row."""
    dates = [parse_date(value, field, row) for row, value in series.items()]
    return pd.Series(pd.to_datetime(dates), index=series.index, name=series.name)


def parse_number_column(series: pd.Series, field: str) -> pd.Series:
    """Parse every value of a numeric column, failing on the first bad row."""
    numbers = [parse_number(value, field, row) for row, value in series.items()]
    return pd.Series(numbers, index=series.index, name=series.name, dtype=float)


def normalize_category(label: Any, categories: CategoriesConfig) -> str:
    """Map a source race/ethnicity label onto the fixed category set.

    The configured prefix (e.g. "Non-Hispanic ") is stripped first, then
    aliases are applied.

    Args:
        label: Source category label.
        categories: Category configuration.

    Returns:
        One of the configured category names.

    Raises:
        SchemaError: If the label is missing or has no known mapping.
    """
    if not isinstance(label, str):
        msg = f"Missing or non-text category label: {label!r}"
        raise SchemaError(msg)

    name = label.strip()
    if categories.strip_prefix and name.startswith(categories.strip_prefix):
        name = name[len(categories.strip_prefix) :]
    name = categories.aliases.get(name, name)

    if name not in categories.names:
        msg = f"Unmapped category label {label!r} (normalized to {name!r})"
        raise SchemaError(msg)

    return name


def normalize_category_column(series: pd.Series, categories: CategoriesConfig) -> pd.Series:
    """Normalize a column of category labels.

    Each distinct label is resolved once; an unmapped label raises with the
    first row that carries it.

    Raises:
        SchemaError: If any label has no known mapping.
    """
    mapping: dict[Any, str] = {}
    for row, label in series.items():
        if label in mapping:
            continue
        try:
            mapping[label] = normalize_category(label, categories)
        except SchemaError as e:
            msg = f"{e} at row {row}"
            raise SchemaError(msg) from e

    logger.debug("Resolved %d distinct category labels", len(mapping))
    return series.map(mapping)
