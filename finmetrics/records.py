"""Record ingestion: raw rows, CSV files and sample data into a RecordSet."""

from __future__ import annotations

import csv
import logging
import math
import random
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .analysis._utils import round_half_up
from .config import get_settings
from .errors import InvalidInputError
from .models import FinancialRecord, RecordSet

logger = logging.getLogger(__name__)

# Spreadsheet headers -> canonical metric names
COLUMN_ALIASES = {
    "Net Income": "NetIncome",
    "Free Cash Flow": "FreeCashFlow",
}


def _coerce_number(raw: Any) -> float | None:
    """Parse a cell into a float, or None when empty, non-numeric or not finite."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def parse_row(row: Mapping[str, Any], index: int, budget_ratio: float) -> FinancialRecord:
    """Convert one raw row into a FinancialRecord. Year is mandatory."""
    year_val = _coerce_number(row.get("Year"))
    if year_val is None or not math.isfinite(year_val) or year_val != int(year_val):
        raise InvalidInputError(f"Row {index}: missing or non-integer Year ({row.get('Year')!r})")

    metrics: dict[str, float | None] = {}
    for key, raw in row.items():
        if key is None or key == "Year":
            continue
        name = COLUMN_ALIASES.get(key.strip(), key.strip())
        metrics[name] = _coerce_number(raw)

    revenue = metrics.get("Revenue")
    if metrics.get("Budget") is None and revenue is not None and math.isfinite(revenue):
        metrics["Budget"] = float(round_half_up(revenue * budget_ratio))

    return FinancialRecord(year=int(year_val), metrics=metrics)


def records_from_rows(
    rows: Sequence[Mapping[str, Any]],
    budget_ratio: float | None = None,
) -> RecordSet:
    """Build a RecordSet from raw rows.

    Non-numeric or non-finite metric cells become absent rather than failing
    ingestion; the integrity scan is what reports them. Budget defaults to
    round(Revenue * budget_ratio) only when the Budget cell is absent; an
    explicit Budget of 0 is kept as an actual zero budget.
    """
    if budget_ratio is None:
        budget_ratio = get_settings().budget_default_ratio
    records = [parse_row(row, i + 1, budget_ratio) for i, row in enumerate(rows)]
    return RecordSet.build(records)


def read_csv(path: str | Path, budget_ratio: float | None = None) -> RecordSet:
    """Read a header + rows CSV file. Quotes around header names are stripped."""
    with open(path, newline="", encoding="utf-8") as fh:
        reader = csv.reader(line for line in fh if line.strip())
        try:
            header = next(reader)
        except StopIteration:
            raise InvalidInputError(f"{path}: empty file") from None
        columns = [h.strip().strip("'\"") for h in header]
        rows = [dict(zip(columns, values)) for values in reader]

    if not rows:
        raise InvalidInputError(f"{path}: no data rows")
    record_set = records_from_rows(rows, budget_ratio=budget_ratio)
    logger.info("%d records indexed from %s", len(record_set), path)
    return record_set


def generate_sample_records(
    seed: int | None = None,
    years: int = 6,
    start_year: int = 2020,
    base_revenue: float = 100_000,
) -> RecordSet:
    """Demo data: roughly 10% yearly revenue growth with noise and a random budget miss."""
    rng = random.Random(seed)
    records: list[FinancialRecord] = []
    for i in range(years):
        growth = 1 + i * 0.1 + rng.random() * 0.05
        revenue = round_half_up(base_revenue * growth)
        budget_factor = 0.95 if rng.random() > 0.5 else 1.05
        records.append(
            FinancialRecord(
                year=start_year + i,
                metrics={
                    "Revenue": float(revenue),
                    "NetIncome": float(round_half_up(revenue * 0.15)),
                    "FreeCashFlow": float(round_half_up(revenue * 0.12)),
                    "Budget": float(round_half_up(revenue * budget_factor)),
                },
            )
        )
    return RecordSet.build(records)
