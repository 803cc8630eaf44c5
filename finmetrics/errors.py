"""Engine error types. All are pure-computation failures, never I/O."""

from __future__ import annotations


class FinMetricsError(Exception):
    """Base class for every error raised by the modeling engine."""


class InsufficientDataError(FinMetricsError):
    """Fewer than two usable data points for a requested fit."""


class InvalidInputError(FinMetricsError, ValueError):
    """Malformed record or parameter (missing Year, bad horizon, unknown backend...)."""
