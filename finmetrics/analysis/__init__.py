"""Analysis modules: forecast, valuation, integrity scan, narrative, dashboard metrics."""

from .forecast import forecast
from .integrity import scan_integrity
from .narrative import summarize
from .operating import budget_variance, compute_market_metrics, profit_sensitivity
from .valuation import valuate

__all__ = [
    "budget_variance",
    "compute_market_metrics",
    "forecast",
    "profit_sensitivity",
    "scan_integrity",
    "summarize",
    "valuate",
]
