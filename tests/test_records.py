"""Tests for record ingestion from rows, CSV and the sample generator."""

import pytest

from finmetrics.errors import InvalidInputError
from finmetrics.models import RecordSet
from finmetrics.records import generate_sample_records, read_csv, records_from_rows


class TestFromRows:
    def test_numeric_strings_and_aliases(self):
        rs = RecordSet.from_rows(
            [{"Year": "2021", "Revenue": "100", "Net Income": "15", "Free Cash Flow": "12"}]
        )
        r = rs.last
        assert r.year == 2021
        assert r.get("Revenue") == 100.0
        assert r.get("NetIncome") == 15.0
        assert r.get("FreeCashFlow") == 12.0

    def test_budget_defaults_from_revenue(self):
        rs = records_from_rows([{"Year": 2021, "Revenue": 1000}], budget_ratio=0.95)
        assert rs.last.get("Budget") == 950.0

    def test_budget_default_rounds_half_up(self):
        rs = records_from_rows([{"Year": 2021, "Revenue": 5}], budget_ratio=0.5)
        assert rs.last.get("Budget") == 3.0

    def test_existing_budget_kept(self):
        rs = records_from_rows([{"Year": 2021, "Revenue": 1000, "Budget": 1100}])
        assert rs.last.get("Budget") == 1100.0

    def test_zero_budget_kept(self):
        rs = records_from_rows([{"Year": 2021, "Revenue": 1000, "Budget": 0}])
        assert rs.last.get("Budget") == 0.0

    def test_non_numeric_metric_becomes_absent(self):
        rs = records_from_rows([{"Year": 2021, "Revenue": "n/a", "NetIncome": ""}])
        r = rs.last
        assert r.get("Revenue") is None
        assert r.get("NetIncome") is None
        assert r.get("Budget") is None

    def test_non_finite_metric_becomes_absent(self):
        rs = records_from_rows(
            [{"Year": 2021, "Revenue": "inf", "NetIncome": "1e400", "FreeCashFlow": float("-inf")}]
        )
        r = rs.last
        assert r.get("Revenue") is None
        assert r.get("NetIncome") is None
        assert r.get("FreeCashFlow") is None
        assert r.get("Budget") is None

    def test_infinite_year_rejected(self):
        with pytest.raises(InvalidInputError):
            records_from_rows([{"Year": "inf", "Revenue": 1}])

    def test_missing_year_rejected(self):
        with pytest.raises(InvalidInputError, match="Row 2"):
            records_from_rows([{"Year": 2020, "Revenue": 1}, {"Revenue": 2}])

    def test_fractional_year_rejected(self):
        with pytest.raises(InvalidInputError):
            records_from_rows([{"Year": "2020.5", "Revenue": 1}])

    def test_duplicate_year_rejected(self):
        with pytest.raises(InvalidInputError):
            records_from_rows([{"Year": 2020}, {"Year": 2020}])

    def test_rows_sorted(self):
        rs = records_from_rows([{"Year": 2022}, {"Year": 2020}])
        assert rs.years == [2020, 2022]


class TestReadCsv:
    def test_reads_quoted_headers_and_skips_blank_lines(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text(
            '"Year","Revenue","Net Income"\n2020,100,15\n\n2021,110,16\n',
            encoding="utf-8",
        )
        rs = read_csv(path, budget_ratio=0.95)
        assert rs.years == [2020, 2021]
        assert rs.last.get("NetIncome") == 16.0
        assert rs.records[0].get("Budget") == 95.0

    def test_header_only_rejected(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("Year,Revenue\n", encoding="utf-8")
        with pytest.raises(InvalidInputError, match="no data rows"):
            read_csv(path)

    def test_empty_file_rejected(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(InvalidInputError, match="empty file"):
            read_csv(path)


class TestSampleRecords:
    def test_seeded_generation_is_reproducible(self):
        a = generate_sample_records(seed=42)
        b = generate_sample_records(seed=42)
        assert a == b

    def test_shape_and_ratios(self):
        rs = generate_sample_records(seed=1, years=4, start_year=2018)
        assert rs.years == [2018, 2019, 2020, 2021]
        for r in rs.records:
            revenue = r.get("Revenue")
            assert abs(r.get("NetIncome") - revenue * 0.15) <= 0.5
            assert abs(r.get("FreeCashFlow") - revenue * 0.12) <= 0.5
            ratio = r.get("Budget") / revenue
            assert 0.94 < ratio < 0.96 or 1.04 < ratio < 1.06
