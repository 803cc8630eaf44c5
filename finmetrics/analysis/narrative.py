"""Templated growth commentary for a completed forecast series."""

from __future__ import annotations

from ..models import ForecastPoint, GrowthPhase
from ._utils import last_historical, last_projected

INSUFFICIENT = "Insufficient data for analysis."


def classify_strength(cagr_pct: float) -> str:
    magnitude = abs(cagr_pct)
    if magnitude > 10:
        return "aggressive"
    if magnitude > 5:
        return "moderate"
    return "stable"


def describe_growth(series: list[ForecastPoint], horizon: int) -> GrowthPhase | None:
    """CAGR from the last actual to the last projected value.

    Returns None when either end is missing, the horizon is not positive, the
    start value is not positive, or the ratio of end to start is not positive.
    """
    if len(series) < 2 or horizon <= 0:
        return None
    start = last_historical(series)
    end = last_projected(series)
    if start is None or end is None:
        return None

    start_val = start.historical
    end_val = end.forecast
    if start_val <= 0 or end_val / start_val <= 0:
        return None

    cagr_pct = ((end_val / start_val) ** (1 / horizon) - 1) * 100
    return GrowthPhase(
        cagr_pct=cagr_pct,
        direction="expansion" if cagr_pct > 0 else "contraction",
        strength=classify_strength(cagr_pct),
        start_value=start_val,
        end_value=end_val,
        horizon=horizon,
    )


def summarize(series: list[ForecastPoint], horizon: int, metric: str = "Revenue") -> str:
    phase = describe_growth(series, horizon)
    if phase is None:
        return INSUFFICIENT
    return (
        f"Based on the linear projection model, {metric} is signaling a "
        f"{phase.strength} {phase.direction} phase, with an implied Compound Annual "
        f"Growth Rate (CAGR) of {phase.cagr_pct:.2f}% over the next {horizon} years. "
        f"The projected terminal value of ${phase.end_value:,.0f} assumes current market "
        "conditions persist without significant regulatory or macroeconomic disruption."
    )
