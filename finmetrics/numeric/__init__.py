"""Numeric core: backends that compute aggregates, and the OLS trend fit."""

from .backends import NativeBackend, NumericBackend, NumpyBackend, get_backend
from .trend import fit_trend

__all__ = ["NativeBackend", "NumericBackend", "NumpyBackend", "fit_trend", "get_backend"]
