"""Interchangeable numeric backends.

A backend only computes aggregates (sums, discounted sums). The formulas
that consume them live in trend.py and the analysis modules, so every
backend yields the same numbers for the same inputs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from ..config import get_settings
from ..errors import InvalidInputError


class NumericBackend(ABC):
    """Aggregate computations used by the trend fit and the DCF."""

    name: str

    @abstractmethod
    def moments(
        self, xs: Sequence[float], ys: Sequence[float]
    ) -> tuple[float, float, float, float]:
        """Return (sum x, sum y, sum x*y, sum x^2)."""

    @abstractmethod
    def present_value(self, values: Sequence[float], rate: float) -> float:
        """Return sum of values[i-1] / (1 + rate)^i for i = 1..len(values)."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class NativeBackend(NumericBackend):
    """Pure-Python backend. Always available."""

    name = "native"

    def moments(self, xs, ys):
        sum_x = sum(xs)
        sum_y = sum(ys)
        sum_xy = sum(x * y for x, y in zip(xs, ys))
        sum_xx = sum(x * x for x in xs)
        return float(sum_x), float(sum_y), float(sum_xy), float(sum_xx)

    def present_value(self, values, rate):
        total = 0.0
        for i, value in enumerate(values, start=1):
            total += value / (1 + rate) ** i
        return total


class NumpyBackend(NumericBackend):
    """Vectorised backend on numpy arrays."""

    name = "numpy"

    def moments(self, xs, ys):
        x = np.asarray(xs, dtype=float)
        y = np.asarray(ys, dtype=float)
        return (
            float(x.sum()),
            float(y.sum()),
            float(np.dot(x, y)),
            float(np.dot(x, x)),
        )

    def present_value(self, values, rate):
        v = np.asarray(values, dtype=float)
        periods = np.arange(1, len(v) + 1, dtype=float)
        return float(np.sum(v / (1 + rate) ** periods))


_BACKENDS: dict[str, type[NumericBackend]] = {
    NativeBackend.name: NativeBackend,
    NumpyBackend.name: NumpyBackend,
}


def get_backend(name: str | None = None) -> NumericBackend:
    """Return a backend by name; None selects the configured default."""
    if name is None:
        name = get_settings().numeric_backend
    backend_cls = _BACKENDS.get(name.lower())
    if backend_cls is None:
        raise InvalidInputError(
            f"Unknown numeric backend {name!r}; expected one of {sorted(_BACKENDS)}"
        )
    return backend_cls()
