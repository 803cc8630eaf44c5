"""Shared utilities for analysis modules."""

from __future__ import annotations

import math

from ..models import ForecastPoint


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity (-2.5 -> -2).

    Matches JavaScript Math.round rather than Python's banker's round().
    """
    return int(math.floor(value + 0.5))


def pct_of(part: float, total: float, digits: int = 1) -> float | None:
    """part / total expressed in percent, or None when total is zero."""
    if total == 0:
        return None
    return round(part / total * 100, digits)


def last_historical(series: list[ForecastPoint]) -> ForecastPoint | None:
    """Last point carrying an actual value (the junction point in a full series)."""
    for point in reversed(series):
        if point.historical is not None:
            return point
    return None


def last_projected(series: list[ForecastPoint]) -> ForecastPoint | None:
    for point in reversed(series):
        if point.forecast is not None:
            return point
    return None
