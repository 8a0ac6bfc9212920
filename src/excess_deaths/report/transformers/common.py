"""Shared helpers for renderer payloads."""

from typing import Any

from excess_deaths.errors import is_undefined


def json_number(value: Any) -> float | None:
    """Convert a numeric value to a JSON-safe float, mapping NaN to None."""
    if is_undefined(value):
        return None
    return float(value)
