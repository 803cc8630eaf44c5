"""Dashboard metrics: implied ROE, rate base, budget variance, profit sensitivity."""

from __future__ import annotations

import math
from collections.abc import Sequence

from ..config import get_settings
from ..models import ComputedValue, RecordSet, VariancePoint

SENSITIVITY_STEPS = (0.9, 0.95, 1.0, 1.05, 1.1)


def _mean(values: list[float | None]) -> float:
    """Mean over all records with absent values counted as zero."""
    if not values:
        return 0.0
    return sum(_or_zero(v) for v in values) / len(values)


def _or_zero(value: float | None) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return value


def compute_market_metrics(records: RecordSet) -> dict[str, ComputedValue]:
    """Headline metrics for the market overview.

    The equity proxy (mean FCF times a multiple) and the rate base multiple
    are configurable heuristics carried over from the dashboard.
    """
    settings = get_settings()
    result: dict[str, ComputedValue] = {}

    mean_fcf = _mean(records.values("FreeCashFlow"))
    mean_ni = _mean(records.values("NetIncome"))
    equity_proxy = mean_fcf * settings.roe_equity_multiple
    heuristic = "Heuristic estimate: equity approximated from average free cash flow"

    result["implied_roe"] = ComputedValue(
        metric="implied_roe",
        value=mean_ni / equity_proxy * 100 if equity_proxy else 0.0,
        unit="percent",
        formula=f"mean(NetIncome) / (mean(FreeCashFlow) * {settings.roe_equity_multiple:g})",
        components={"mean_net_income": mean_ni, "equity_proxy": equity_proxy},
        warnings=[heuristic] + ([] if equity_proxy else ["Equity proxy is zero; ROE set to 0"]),
    )
    result["rate_base"] = ComputedValue(
        metric="rate_base",
        value=equity_proxy * settings.rate_base_multiple,
        unit="USD",
        formula=(
            f"mean(FreeCashFlow) * {settings.roe_equity_multiple:g}"
            f" * {settings.rate_base_multiple:g}"
        ),
        components={"equity_proxy": equity_proxy},
        warnings=[heuristic],
    )

    revenues = records.values("Revenue")
    result["avg_revenue"] = ComputedValue(
        metric="avg_revenue",
        value=_mean(revenues),
        unit="USD",
        formula="mean(Revenue)",
    )
    result["peak_revenue"] = ComputedValue(
        metric="peak_revenue",
        value=max(_or_zero(v) for v in revenues),
        unit="USD",
        formula="max(Revenue)",
    )
    return result


def budget_variance(records: RecordSet) -> list[VariancePoint]:
    """Revenue minus Budget per year; absent values count as zero."""
    return [
        VariancePoint(
            year=r.year,
            variance=_or_zero(r.get("Revenue")) - _or_zero(r.get("Budget")),
        )
        for r in records.records
    ]


def profit_sensitivity(
    base_revenue: float,
    base_cost: float,
    revenue_multipliers: Sequence[float] = SENSITIVITY_STEPS,
    cost_multipliers: Sequence[float] = SENSITIVITY_STEPS,
) -> list[list[float]]:
    """Profit grid: rows vary revenue, columns vary cost."""
    return [
        [base_revenue * r - base_cost * c for c in cost_multipliers]
        for r in revenue_multipliers
    ]
