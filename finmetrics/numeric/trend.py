"""Ordinary least-squares linear trend of a metric against year."""

from __future__ import annotations

from collections.abc import Sequence

from ..errors import InsufficientDataError, InvalidInputError
from ..models import TrendModel
from .backends import NumericBackend, get_backend


def fit_trend(
    points: Sequence[tuple[float, float]],
    backend: NumericBackend | None = None,
) -> TrendModel:
    """Fit value = slope * x + intercept minimising squared vertical error.

    slope = (n*Sxy - Sx*Sy) / (n*Sxx - Sx^2), intercept = (Sy - slope*Sx) / n
    """
    n = len(points)
    if n < 2:
        raise InsufficientDataError(f"Trend fit needs at least 2 points, got {n}")

    if backend is None:
        backend = get_backend()

    xs = [float(x) for x, _ in points]
    ys = [float(y) for _, y in points]
    sum_x, sum_y, sum_xy, sum_xx = backend.moments(xs, ys)

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        raise InvalidInputError("Trend fit needs at least two distinct x values")

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return TrendModel(slope=slope, intercept=intercept, n_points=n)
