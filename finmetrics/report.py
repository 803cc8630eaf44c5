"""Tabular report payload for spreadsheet export.

Produces sheet name -> rows of cells. Writing an actual workbook is left to
the caller; values stay raw numbers (percentages as percent numbers).
"""

from __future__ import annotations

from datetime import date
from typing import Any

from .analysis._utils import round_half_up
from .models import ComputedValue, ForecastPoint, RecordSet, ValuationParams, ValuationResult

Row = list[Any]


def _summary_sheet(
    valuation: ValuationResult | None,
    market_metrics: dict[str, ComputedValue],
    as_of: date,
) -> list[Row]:
    rows: list[Row] = [
        ["FINANCIAL INTELLIGENCE REPORT"],
        ["Generated by finmetrics"],
        ["Date", as_of.isoformat()],
        [],
        ["KEY METRICS"],
    ]
    for key, label in [
        ("implied_roe", "Implied ROE (%)"),
        ("rate_base", "Estimated Rate Base"),
        ("peak_revenue", "Peak Revenue"),
    ]:
        cv = market_metrics.get(key)
        rows.append([label, cv.value if cv is not None else None])
    rows.append(["Fair Value per Share", valuation.share_price if valuation else None])
    return rows


def _historical_sheet(records: RecordSet) -> list[Row]:
    columns: list[str] = []
    for r in records.records:
        for name in r.metrics:
            if name not in columns:
                columns.append(name)
    rows: list[Row] = [["Year", *columns]]
    for r in records.records:
        rows.append([r.year, *(r.get(c) for c in columns)])
    return rows


def _forecast_sheet(series: list[ForecastPoint]) -> list[Row]:
    rows: list[Row] = [["Year", "Historical", "Forecast", "Optimistic_High", "Pessimistic_Low"]]
    for p in series:
        rows.append([p.year, p.historical, p.forecast, p.high, p.low])
    return rows


def _valuation_sheet(valuation: ValuationResult, params: ValuationParams) -> list[Row]:
    sum_fcf, tv, ev = (item.value for item in valuation.bridge)
    return [
        ["DCF VALUATION MODEL"],
        [],
        ["ASSUMPTIONS"],
        ["WACC (%)", params.wacc * 100],
        ["Terminal Growth (%)", params.terminal_growth * 100],
        ["Net Debt", params.net_debt],
        ["Shares Outstanding", params.shares_outstanding],
        [],
        ["OUTPUTS"],
        ["Sum of FCFs (PV)", round_half_up(sum_fcf)],
        ["Terminal Value (PV)", round_half_up(tv)],
        ["Enterprise Value", round_half_up(ev)],
        ["Equity Value", round_half_up(valuation.equity_value)],
        ["Implied Share Price", round(valuation.share_price, 2)],
        ["Terminal Method", valuation.terminal_method],
    ]


def build_report(
    records: RecordSet,
    series: list[ForecastPoint] | None = None,
    valuation: ValuationResult | None = None,
    valuation_params: ValuationParams | None = None,
    market_metrics: dict[str, ComputedValue] | None = None,
    as_of: date | None = None,
) -> dict[str, list[Row]]:
    """Assemble the report sheets in display order. Missing inputs omit their sheet."""
    if valuation_params is None:
        valuation_params = ValuationParams()
    sheets: dict[str, list[Row]] = {
        "Executive Summary": _summary_sheet(
            valuation, market_metrics or {}, as_of or date.today()
        ),
        "Historical Data": _historical_sheet(records),
    }
    if series:
        sheets["Forecast"] = _forecast_sheet(series)
    if valuation is not None:
        sheets["Valuation Detail"] = _valuation_sheet(valuation, valuation_params)
    return sheets
