"""Orchestrator: integrity scan, forecast, narrative and valuation into one Analysis."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from .analysis.forecast import build_series, check_forecast_inputs, fit_metric_trend
from .analysis.integrity import DEFAULT_REQUIRED_FIELDS, scan_integrity
from .analysis.narrative import summarize
from .analysis.operating import compute_market_metrics
from .analysis.valuation import valuate
from .config import get_settings
from .errors import FinMetricsError, InsufficientDataError
from .models import Analysis, ForecastParams, RecordSet, ValuationParams
from .numeric import NumericBackend, get_backend

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _with_fallback(
    label: str,
    step: Callable[[NumericBackend], T],
    primary: NumericBackend,
    fallback: NumericBackend,
    warnings: list[str],
) -> tuple[T, str]:
    """Run step on the primary backend; on an unexpected failure rerun it on the fallback.

    Engine errors (bad input, insufficient data) are not backend problems and
    propagate unchanged.
    """
    try:
        return step(primary), primary.name
    except FinMetricsError:
        raise
    except Exception as e:
        if fallback.name == primary.name:
            raise
        msg = f"{label}: {primary.name} backend failed ({e}); switched to {fallback.name}"
        logger.warning(msg)
        warnings.append(msg)
        return step(fallback), fallback.name


def run_analysis(
    records: RecordSet,
    forecast_params: ForecastParams | None = None,
    valuation_params: ValuationParams | None = None,
    required_fields: Sequence[str] = DEFAULT_REQUIRED_FIELDS,
    backend: NumericBackend | None = None,
) -> Analysis:
    """Run every engine step over one record set. Never raises for engine errors.

    Each step is isolated: a failure is recorded in errors and leaves that
    step's field None, so callers never see partially computed results.
    A misconfigured backend name still raises InvalidInputError.
    """
    fp = forecast_params or ForecastParams()
    vp = valuation_params or ValuationParams()
    settings = get_settings()
    primary = backend or get_backend()
    fallback = get_backend(settings.fallback_backend)

    analysis = Analysis(record_count=len(records), forecast_params=fp, valuation_params=vp)
    errors = analysis.errors
    warnings = analysis.warnings

    # Advisory only; never blocks the computations below
    try:
        analysis.integrity = scan_integrity(records, required_fields)
    except Exception as e:
        errors.append(f"Integrity scan failed: {e}")

    logger.info(
        "Starting forecast for %s (sensitivity: +/-%g%%)", fp.metric, fp.sensitivity * 100
    )
    try:
        check_forecast_inputs(fp.horizon, fp.sensitivity)
        trend, analysis.forecast_backend = _with_fallback(
            "Forecast",
            lambda b: fit_metric_trend(records, fp.metric, backend=b),
            primary,
            fallback,
            warnings,
        )
        analysis.trend = trend
        analysis.forecast = build_series(records, fp.metric, trend, fp.horizon, fp.sensitivity)
        analysis.narrative = summarize(analysis.forecast, fp.horizon, fp.metric)
        logger.info("Forecast completed via %s backend", analysis.forecast_backend)
    except InsufficientDataError as e:
        errors.append(f"Forecast unavailable: {e}")
    except FinMetricsError as e:
        errors.append(f"Forecast rejected: {e}")
    except Exception as e:
        errors.append(f"Forecast computation failed: {e}")
    if analysis.forecast is None:
        analysis.trend = None
        analysis.forecast_backend = None

    logger.info("Starting DCF valuation")
    try:
        analysis.valuation, analysis.valuation_backend = _with_fallback(
            "Valuation",
            lambda b: valuate(
                records,
                wacc=vp.wacc,
                terminal_growth=vp.terminal_growth,
                net_debt=vp.net_debt,
                shares_outstanding=vp.shares_outstanding,
                backend=b,
            ),
            primary,
            fallback,
            warnings,
        )
        logger.info("DCF valuation completed via %s backend", analysis.valuation_backend)
    except InsufficientDataError as e:
        errors.append(f"Valuation unavailable: {e}")
    except FinMetricsError as e:
        errors.append(f"Valuation rejected: {e}")
    except Exception as e:
        errors.append(f"Valuation computation failed: {e}")

    try:
        analysis.market_metrics = compute_market_metrics(records)
    except Exception as e:
        errors.append(f"Market metrics computation failed: {e}")

    return analysis


async def analyze(
    records: RecordSet,
    forecast_params: ForecastParams | None = None,
    valuation_params: ValuationParams | None = None,
    required_fields: Sequence[str] = DEFAULT_REQUIRED_FIELDS,
    backend: NumericBackend | None = None,
    timeout: float | None = None,
) -> Analysis:
    """Run run_analysis off the event loop with a timeout.

    On timeout the returned Analysis carries only the error, never stale or
    partial results.
    """
    if timeout is None:
        timeout = get_settings().compute_timeout_seconds

    try:
        return await asyncio.wait_for(
            asyncio.to_thread(
                run_analysis,
                records,
                forecast_params,
                valuation_params,
                required_fields,
                backend,
            ),
            timeout=timeout,
        )
    except TimeoutError:
        logger.warning("Analysis timed out after %gs", timeout)
        return Analysis(
            record_count=len(records),
            forecast_params=forecast_params or ForecastParams(),
            valuation_params=valuation_params or ValuationParams(),
            errors=[f"Computation timed out after {timeout:g}s"],
        )
