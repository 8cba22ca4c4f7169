"""Coercion of time-series entries into floats.

Datasets arrive from spreadsheets and JSON exports, so a series value may be
a number, a numeric string ("1,250.5"), an empty string or something else
entirely. Unusable entries become `None` and are treated as absent.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any

log = logging.getLogger(__name__)


def to_number(value: Any) -> float | None:
    """Return `value` as a finite float, or None when it is not usable.

    Args:
        value: Raw time-series entry.

    Returns:
        The parsed float, or None for missing, malformed or non-finite input.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            log.debug("Ignoring malformed series value %r", value)
            return None
    else:
        log.debug("Ignoring series value of type %s", type(value).__name__)
        return None

    if not math.isfinite(number):
        return None
    return number


def value_at(series: dict[int, Any], year: int) -> float | None:
    """Coerced value of `series` at `year` (None when absent or malformed)."""
    return to_number(series.get(year))


def positive_years(series: dict[int, Any]) -> list[int]:
    """Sorted years whose coerced value is strictly positive."""
    years = []
    for year, raw in series.items():
        number = to_number(raw)
        if number is not None and number > 0:
            years.append(year)
    return sorted(years)
