"""Tests for the two-stage DCF valuation and value bridge."""

import pytest

from finmetrics.analysis.valuation import build_bridge, terminal_value, valuate
from finmetrics.errors import InsufficientDataError, InvalidInputError
from finmetrics.models import FinancialRecord, RecordSet
from finmetrics.numeric import NativeBackend, NumpyBackend

# FCF trend in the shared fixture: 2023..2027 -> 15..19
PROJECTED = [15.0, 16.0, 17.0, 18.0, 19.0]


def _pv(values, rate):
    return sum(v / (1 + rate) ** i for i, v in enumerate(values, start=1))


class TestGordonGrowth:
    def test_projected_fcf(self, three_year_records):
        result = valuate(three_year_records, backend=NativeBackend())
        assert result.projected_fcf == pytest.approx(PROJECTED)

    def test_full_valuation(self, three_year_records):
        result = valuate(
            three_year_records,
            wacc=0.10,
            terminal_growth=0.025,
            net_debt=150,
            shares_outstanding=50,
            backend=NativeBackend(),
        )
        tv = 19 * 1.025 / (0.10 - 0.025)
        discounted_tv = tv / 1.1**5
        ev = _pv(PROJECTED, 0.10) + discounted_tv

        assert result.terminal_method == "gordon"
        assert result.terminal_value == pytest.approx(tv)
        assert result.discounted_terminal_value == pytest.approx(discounted_tv)
        assert result.enterprise_value == pytest.approx(ev)
        assert result.equity_value == pytest.approx(ev - 150)
        assert result.share_price == pytest.approx((ev - 150) / 50)
        assert result.flagged is False
        assert result.warnings == []

    def test_backends_agree(self, three_year_records):
        a = valuate(three_year_records, backend=NativeBackend())
        b = valuate(three_year_records, backend=NumpyBackend())
        assert a.share_price == pytest.approx(b.share_price, rel=1e-12)
        assert a.enterprise_value == pytest.approx(b.enterprise_value, rel=1e-12)


class TestTerminalFallback:
    def test_wacc_below_growth_uses_exit_multiple(self, three_year_records):
        result = valuate(
            three_year_records, wacc=0.05, terminal_growth=0.08, backend=NativeBackend()
        )
        assert result.terminal_method == "exit_multiple"
        assert result.terminal_value == pytest.approx(19 * 15)
        assert result.discounted_terminal_value == pytest.approx(19 * 15 / 1.05**5)
        assert any("terminal value uses 15x" in w for w in result.warnings)

    def test_wacc_equal_growth_uses_exit_multiple(self):
        tv, method = terminal_value(100.0, 0.05, 0.05, 15.0)
        assert method == "exit_multiple"
        assert tv == 1500.0

    def test_custom_exit_multiple(self, three_year_records):
        result = valuate(
            three_year_records,
            wacc=0.03,
            terminal_growth=0.04,
            exit_multiple=10,
            backend=NativeBackend(),
        )
        assert result.terminal_value == pytest.approx(190)


class TestBridge:
    def test_bridge_rows_and_totals(self, three_year_records):
        result = valuate(three_year_records, backend=NativeBackend())
        names = [item.name for item in result.bridge]
        assert names == ["Sum of FCFs", "Terminal Value", "Enterprise Value"]
        assert [item.is_total for item in result.bridge] == [False, False, True]

        first, second, total = result.bridge
        assert first.value + second.value == pytest.approx(total.value)
        assert total.contribution_pct == 100.0
        assert abs(first.contribution_pct + second.contribution_pct - 100.0) <= 0.1

    def test_contribution_rounded_to_one_decimal(self):
        bridge, warnings = build_bridge(1.0, 2.0, 3.0)
        assert bridge[0].contribution_pct == 33.3
        assert bridge[1].contribution_pct == 66.7
        assert warnings == []

    def test_zero_enterprise_value(self):
        bridge, warnings = build_bridge(5.0, -5.0, 0.0)
        assert bridge[0].contribution_pct == 0.0
        assert bridge[1].contribution_pct == 0.0
        assert bridge[2].contribution_pct == 100.0
        assert warnings


class TestSharesPolicy:
    @pytest.mark.parametrize("shares", [0, -10])
    def test_non_positive_shares_flagged(self, three_year_records, shares):
        result = valuate(three_year_records, shares_outstanding=shares, backend=NativeBackend())
        assert result.share_price == 0.0
        assert result.flagged is True
        assert any("Shares outstanding" in w for w in result.warnings)
        # Enterprise value is still reported
        assert result.enterprise_value > 0


class TestInsufficientData:
    def test_single_fcf_point(self):
        rs = RecordSet.build([FinancialRecord(year=2022, metrics={"FreeCashFlow": 10.0})])
        with pytest.raises(InsufficientDataError, match="FreeCashFlow"):
            valuate(rs)

    def test_missing_fcf_field(self):
        rs = RecordSet.build(
            [
                FinancialRecord(year=2021, metrics={"Revenue": 10.0}),
                FinancialRecord(year=2022, metrics={"Revenue": 12.0}),
            ]
        )
        with pytest.raises(InsufficientDataError):
            valuate(rs)

    def test_wacc_at_minus_one_rejected(self, three_year_records):
        with pytest.raises(InvalidInputError, match="wacc"):
            valuate(three_year_records, wacc=-1.0, backend=NativeBackend())
