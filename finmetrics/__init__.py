"""finmetrics: trend forecasts, DCF valuation and integrity scoring for yearly financials."""

from .analysis import forecast, scan_integrity, summarize, valuate
from .engine import analyze, run_analysis
from .errors import FinMetricsError, InsufficientDataError, InvalidInputError
from .models import (
    Analysis,
    FinancialRecord,
    ForecastParams,
    ForecastPoint,
    IntegrityReport,
    RecordSet,
    TrendModel,
    ValuationParams,
    ValuationResult,
)
from .numeric import fit_trend

__all__ = [
    "analyze",
    "run_analysis",
    "fit_trend",
    "forecast",
    "valuate",
    "scan_integrity",
    "summarize",
    "Analysis",
    "FinancialRecord",
    "FinMetricsError",
    "ForecastParams",
    "ForecastPoint",
    "InsufficientDataError",
    "IntegrityReport",
    "InvalidInputError",
    "RecordSet",
    "TrendModel",
    "ValuationParams",
    "ValuationResult",
]
