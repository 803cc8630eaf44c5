"""Shared fixtures."""

import pytest

from finmetrics.models import FinancialRecord, RecordSet


@pytest.fixture
def three_year_records():
    """Revenue on y = 10x - 20100, FCF on y = x - 2008."""
    return RecordSet.build(
        [
            FinancialRecord(
                year=2020,
                metrics={"Revenue": 100.0, "NetIncome": 15.0, "FreeCashFlow": 12.0, "Budget": 95.0},
            ),
            FinancialRecord(
                year=2021,
                metrics={"Revenue": 110.0, "NetIncome": 16.0, "FreeCashFlow": 13.0, "Budget": 115.0},
            ),
            FinancialRecord(
                year=2022,
                metrics={"Revenue": 120.0, "NetIncome": 18.0, "FreeCashFlow": 14.0, "Budget": 114.0},
            ),
        ]
    )
