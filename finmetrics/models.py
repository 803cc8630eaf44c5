"""Core data models for records, projections and valuations.

Every derived number is either a plain field on a result model or a
ComputedValue carrying the formula and the components it came from.
Percentages are plain percent numbers (12.5 means 12.5%); rates passed in
as parameters (WACC, growth, sensitivity) are fractions.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import InvalidInputError


class ComputedValue(BaseModel):
    """A derived calculation with formula and component provenance."""

    metric: str
    value: float | int | None
    unit: str  # "USD", "pure", "percent"
    formula: str  # e.g. "mean(NetIncome) / (mean(FreeCashFlow) * 5)"
    components: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class FinancialRecord(BaseModel):
    """One fiscal year's observation."""

    year: int
    metrics: dict[str, float | None] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def get(self, field: str) -> float | None:
        return self.metrics.get(field)


def _is_number(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


class RecordSet(BaseModel):
    """Records ordered ascending by year; years are unique, at least one record."""

    records: list[FinancialRecord] = Field(min_length=1)

    model_config = {"frozen": True}

    @field_validator("records")
    @classmethod
    def _sort_unique_years(cls, records: list[FinancialRecord]) -> list[FinancialRecord]:
        ordered = sorted(records, key=lambda r: r.year)
        seen: set[int] = set()
        dupes: set[int] = set()
        for r in ordered:
            if r.year in seen:
                dupes.add(r.year)
            seen.add(r.year)
        if dupes:
            raise ValueError(f"duplicate years in record set: {sorted(dupes)}")
        return ordered

    @classmethod
    def build(cls, records: Sequence[FinancialRecord]) -> RecordSet:
        """Construct a RecordSet, raising InvalidInputError instead of ValidationError."""
        try:
            return cls(records=list(records))
        except ValidationError as e:
            raise InvalidInputError(f"invalid record set: {e}") from e

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[dict[str, Any]],
        budget_ratio: float | None = None,
    ) -> RecordSet:
        """Ingest raw rows (e.g. parsed CSV) into a validated RecordSet."""
        from .records import records_from_rows

        return records_from_rows(rows, budget_ratio=budget_ratio)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def years(self) -> list[int]:
        return [r.year for r in self.records]

    @property
    def last(self) -> FinancialRecord:
        return self.records[-1]

    def values(self, metric: str) -> list[float | None]:
        return [r.get(metric) for r in self.records]

    def pairs(self, metric: str) -> list[tuple[float, float]]:
        """(year, value) pairs for records where the metric is a usable number."""
        pairs: list[tuple[float, float]] = []
        for r in self.records:
            value = r.get(metric)
            if _is_number(value):
                pairs.append((float(r.year), float(value)))
        return pairs


class TrendModel(BaseModel):
    """Least-squares line: value ~= slope * year + intercept."""

    slope: float
    intercept: float
    n_points: int

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


class ForecastParams(BaseModel):
    """Forecast inputs. Sensitivity is the full band half-width at the horizon."""

    metric: str = "Revenue"
    horizon: int = 5
    sensitivity: float = 0.10


class ForecastPoint(BaseModel):
    """One charting row of the merged historical + projected series."""

    year: int
    historical: float | None = None
    forecast: float | None = None
    high: float | None = None
    low: float | None = None
    confidence_band: tuple[float, float] | None = None

    @property
    def spread(self) -> float | None:
        if self.high is None or self.low is None:
            return None
        return self.high - self.low


class ValuationParams(BaseModel):
    """DCF inputs. Net debt is in currency units; shares in the same scale."""

    wacc: float = 0.10
    terminal_growth: float = 0.025
    net_debt: float = 150.0
    shares_outstanding: float = 50.0


class BridgeItem(BaseModel):
    """One bar of the value bridge (waterfall)."""

    name: str
    value: float
    is_total: bool = False
    contribution_pct: float


class ValuationResult(BaseModel):
    """Two-stage DCF output with its value bridge."""

    share_price: float
    bridge: list[BridgeItem]
    projected_fcf: list[float] = Field(default_factory=list)
    discounted_fcf_sum: float
    terminal_value: float
    discounted_terminal_value: float
    terminal_method: str  # "gordon" or "exit_multiple"
    enterprise_value: float
    equity_value: float
    flagged: bool = False
    warnings: list[str] = Field(default_factory=list)


class IntegrityReport(BaseModel):
    """Advisory data-quality score with findings in scan order."""

    score: int = Field(ge=0, le=100)
    findings: list[str] = Field(default_factory=list)
    record_count: int = 0
    null_count: int = 0

    @property
    def quality(self) -> str:
        return "EXCELLENT" if self.score == 100 else "WARNING"


class GrowthPhase(BaseModel):
    """Rule-based classification of a projected growth path."""

    cagr_pct: float
    direction: str  # "expansion" or "contraction"
    strength: str  # "aggressive", "moderate" or "stable"
    start_value: float
    end_value: float
    horizon: int


class VariancePoint(BaseModel):
    """Actual revenue minus budget for one year."""

    year: int
    variance: float

    @property
    def favorable(self) -> bool:
        return self.variance >= 0


class Analysis(BaseModel):
    """Full engine output for one record set. Failed steps leave their field None."""

    record_count: int
    forecast_params: ForecastParams
    valuation_params: ValuationParams
    integrity: IntegrityReport | None = None
    trend: TrendModel | None = None
    forecast: list[ForecastPoint] | None = None
    narrative: str | None = None
    valuation: ValuationResult | None = None
    market_metrics: dict[str, ComputedValue] = Field(default_factory=dict)
    forecast_backend: str | None = None
    valuation_backend: str | None = None
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
