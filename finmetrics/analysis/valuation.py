"""Two-stage discounted cash flow valuation and its value bridge."""

from __future__ import annotations

from ..config import get_settings
from ..errors import InsufficientDataError, InvalidInputError
from ..models import BridgeItem, RecordSet, TrendModel, ValuationResult
from ..numeric import NumericBackend, fit_trend, get_backend
from ._utils import pct_of

PROJECTION_YEARS = 5
FCF_FIELD = "FreeCashFlow"


def project_fcf(trend: TrendModel, last_year: int, years: int = PROJECTION_YEARS) -> list[float]:
    return [trend.predict(last_year + i) for i in range(1, years + 1)]


def terminal_value(
    final_fcf: float,
    wacc: float,
    terminal_growth: float,
    exit_multiple: float,
) -> tuple[float, str]:
    """Gordon growth perpetuity, or final_fcf * exit_multiple when wacc <= growth.

    The multiple is a guard against a zero or negative denominator, not a
    valuation method in its own right.
    """
    if wacc > terminal_growth:
        return final_fcf * (1 + terminal_growth) / (wacc - terminal_growth), "gordon"
    return final_fcf * exit_multiple, "exit_multiple"


def build_bridge(
    discounted_sum: float,
    discounted_tv: float,
    enterprise_value: float,
) -> tuple[list[BridgeItem], list[str]]:
    """Three-row waterfall: explicit-period PV, terminal PV, enterprise value total."""
    warnings: list[str] = []
    fcf_pct = pct_of(discounted_sum, enterprise_value)
    tv_pct = pct_of(discounted_tv, enterprise_value)
    if fcf_pct is None or tv_pct is None:
        warnings.append("Enterprise value is zero; contributions reported as 0.0")
        fcf_pct, tv_pct = 0.0, 0.0

    bridge = [
        BridgeItem(name="Sum of FCFs", value=discounted_sum, contribution_pct=fcf_pct),
        BridgeItem(name="Terminal Value", value=discounted_tv, contribution_pct=tv_pct),
        BridgeItem(
            name="Enterprise Value",
            value=enterprise_value,
            is_total=True,
            contribution_pct=100.0,
        ),
    ]
    return bridge, warnings


def valuate(
    records: RecordSet,
    wacc: float = 0.10,
    terminal_growth: float = 0.025,
    net_debt: float = 150.0,
    shares_outstanding: float = 50.0,
    backend: NumericBackend | None = None,
    exit_multiple: float | None = None,
) -> ValuationResult:
    """Intrinsic value per share from a trend-projected five-year FCF path.

    EV = sum PV(FCF_1..5) + PV(TV); equity = EV - net_debt;
    share_price = equity / shares_outstanding.

    Non-positive shares_outstanding does not raise: share_price is 0.0 and
    the result is flagged.
    """
    if wacc <= -1:
        raise InvalidInputError(f"wacc must be greater than -100%, got {wacc!r}")
    pairs = records.pairs(FCF_FIELD)
    if len(pairs) < 2:
        raise InsufficientDataError(
            f"{FCF_FIELD}: need at least 2 values to value, found {len(pairs)}"
        )
    if backend is None:
        backend = get_backend()
    if exit_multiple is None:
        exit_multiple = get_settings().exit_multiple

    trend = fit_trend(pairs, backend=backend)
    fcfs = project_fcf(trend, records.last.year)
    discounted_sum = backend.present_value(fcfs, wacc)

    tv, method = terminal_value(fcfs[-1], wacc, terminal_growth, exit_multiple)
    discounted_tv = tv / (1 + wacc) ** PROJECTION_YEARS

    enterprise_value = discounted_sum + discounted_tv
    equity_value = enterprise_value - net_debt

    warnings: list[str] = []
    flagged = False
    if method == "exit_multiple":
        warnings.append(
            f"WACC ({wacc:.2%}) <= terminal growth ({terminal_growth:.2%}); "
            f"terminal value uses {exit_multiple:g}x final-year FCF"
        )
    if shares_outstanding > 0:
        share_price = equity_value / shares_outstanding
    else:
        share_price = 0.0
        flagged = True
        warnings.append(
            f"Shares outstanding is {shares_outstanding}; share price reported as 0.0"
        )

    bridge, bridge_warnings = build_bridge(discounted_sum, discounted_tv, enterprise_value)
    warnings.extend(bridge_warnings)

    return ValuationResult(
        share_price=share_price,
        bridge=bridge,
        projected_fcf=fcfs,
        discounted_fcf_sum=discounted_sum,
        terminal_value=tv,
        discounted_terminal_value=discounted_tv,
        terminal_method=method,
        enterprise_value=enterprise_value,
        equity_value=equity_value,
        flagged=flagged,
        warnings=warnings,
    )
