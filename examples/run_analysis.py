"""Example: forecast, value and score a sample (or CSV) record set."""

import asyncio
import logging
import sys

from finmetrics import ForecastParams, ValuationParams, analyze
from finmetrics.records import generate_sample_records, read_csv


def _dollar(val):
    if val is None:
        return "n/a"
    return f"${val:,.0f}"


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-8s | %(message)s")

    records = read_csv(sys.argv[1]) if len(sys.argv) > 1 else generate_sample_records(seed=7)
    r = await analyze(
        records,
        forecast_params=ForecastParams(metric="Revenue", horizon=5, sensitivity=0.10),
        valuation_params=ValuationParams(wacc=0.10, terminal_growth=0.025),
    )

    print(f"\n{'=' * 60}")
    print(f"{r.record_count} records | integrity score: {r.integrity.score if r.integrity else 'n/a'}")
    print(f"{'=' * 60}")

    if r.errors:
        print(f"  Errors: {r.errors}")
    if r.integrity and r.integrity.findings:
        for finding in r.integrity.findings:
            print(f"  Integrity: {finding}")

    if r.forecast:
        print(f"\n  Forecast ({r.forecast_backend}):")
        for p in r.forecast:
            if p.historical is not None and p.forecast is None:
                print(f"    {p.year}  actual    {_dollar(p.historical)}")
            elif p.historical is None:
                print(f"    {p.year}  forecast  {_dollar(p.forecast)}  [{_dollar(p.low)} .. {_dollar(p.high)}]")
        print(f"\n  {r.narrative}")

    if r.valuation:
        v = r.valuation
        print(f"\n  DCF ({r.valuation_backend}, terminal: {v.terminal_method}):")
        for item in v.bridge:
            print(f"    {item.name:<18} {_dollar(item.value):>14}  {item.contribution_pct:5.1f}%")
        print(f"    Share price: ${v.share_price:,.2f}")
        for w in v.warnings:
            print(f"    Warning: {w}")


if __name__ == "__main__":
    asyncio.run(main())
