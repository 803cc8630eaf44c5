"""Linear trend projection with a widening scenario band (cone of uncertainty)."""

from __future__ import annotations

import logging
import math

from ..errors import InsufficientDataError, InvalidInputError
from ..models import ForecastPoint, RecordSet, TrendModel
from ..numeric import NumericBackend, fit_trend
from ._utils import round_half_up

logger = logging.getLogger(__name__)


def check_forecast_inputs(horizon: int, sensitivity: float) -> None:
    if isinstance(horizon, bool) or not isinstance(horizon, int) or horizon <= 0:
        raise InvalidInputError(f"horizon must be a positive integer, got {horizon!r}")
    if not 0 <= sensitivity <= 1:
        raise InvalidInputError(f"sensitivity must be within [0, 1], got {sensitivity!r}")


def _actual(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


def fit_metric_trend(
    records: RecordSet,
    metric: str,
    backend: NumericBackend | None = None,
) -> TrendModel:
    """Fit the OLS trend of one metric over every record where it is present."""
    pairs = records.pairs(metric)
    if len(pairs) < 2:
        raise InsufficientDataError(
            f"{metric}: need at least 2 values to forecast, found {len(pairs)}"
        )
    return fit_trend(pairs, backend=backend)


def project(
    trend: TrendModel,
    last_year: int,
    horizon: int,
    sensitivity: float,
) -> list[ForecastPoint]:
    """Projected points for last_year+1 .. last_year+horizon.

    The band half-width grows linearly from sensitivity/horizon at the first
    year to the full sensitivity at the horizon.
    """
    points: list[ForecastPoint] = []
    for i in range(1, horizon + 1):
        year = last_year + i
        value = trend.predict(year)
        spread_pct = sensitivity * (i / horizon)
        high = round_half_up(value * (1 + spread_pct))
        low = round_half_up(value * (1 - spread_pct))
        points.append(
            ForecastPoint(
                year=year,
                forecast=round_half_up(value),
                high=high,
                low=low,
                confidence_band=(low, high),
            )
        )
    return points


def build_series(
    records: RecordSet,
    metric: str,
    trend: TrendModel,
    horizon: int,
    sensitivity: float,
) -> list[ForecastPoint]:
    """Merge actuals, the junction point and projections into one ordered series."""
    last = records.last
    last_value = last.get(metric)
    if last_value is None or not math.isfinite(last_value):
        last_value = trend.predict(last.year)
        logger.warning(
            "%s missing for %d; anchoring forecast at fitted value %.2f",
            metric,
            last.year,
            last_value,
        )

    series = [
        ForecastPoint(year=r.year, historical=_actual(r.get(metric))) for r in records.records
    ]
    series.append(
        ForecastPoint(
            year=last.year,
            historical=last_value,
            forecast=last_value,
            high=last_value,
            low=last_value,
            confidence_band=(last_value, last_value),
        )
    )
    series.extend(project(trend, last.year, horizon, sensitivity))
    return series


def forecast(
    records: RecordSet,
    metric: str = "Revenue",
    horizon: int = 5,
    sensitivity: float = 0.10,
    backend: NumericBackend | None = None,
) -> list[ForecastPoint]:
    """Project a metric horizon years forward with optimistic/pessimistic bands.

    Returns len(records) + 1 + horizon points: one per actual, a zero-width
    junction at the last actual year, then one per projected year.
    Raises InsufficientDataError when the metric has fewer than 2 values.
    """
    check_forecast_inputs(horizon, sensitivity)
    trend = fit_metric_trend(records, metric, backend=backend)
    return build_series(records, metric, trend, horizon, sensitivity)
