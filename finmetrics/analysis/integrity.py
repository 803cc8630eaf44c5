"""Advisory data-integrity scan over ingested records."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from ..config import get_settings
from ..models import IntegrityReport, RecordSet

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_FIELDS = ("Revenue", "NetIncome")


def _is_invalid(value: object) -> bool:
    if value is None or isinstance(value, bool):
        return True
    if not isinstance(value, (int, float)):
        return True
    return not math.isfinite(value)


def scan_integrity(
    records: RecordSet,
    required_fields: Sequence[str] = DEFAULT_REQUIRED_FIELDS,
    penalty: int | None = None,
) -> IntegrityReport:
    """Score records 0-100 and list findings.

    Each absent, null or non-finite required field costs `penalty` points (clamped at
    the configured floor). Implausible fiscal years are noted without penalty.
    The scan never blocks downstream computation.
    """
    settings = get_settings()
    if penalty is None:
        penalty = settings.integrity_penalty

    score = 100
    null_count = 0
    findings: list[str] = []

    for index, record in enumerate(records.records, start=1):
        for field in required_fields:
            if _is_invalid(record.get(field)):
                null_count += 1
                score -= penalty
                findings.append(f"Null value in row {index}, col {field}")
        if not settings.min_plausible_year <= record.year <= settings.max_plausible_year:
            findings.append(f"Unusual fiscal year detected: {record.year}")

    score = max(score, settings.integrity_score_floor)
    report = IntegrityReport(
        score=score,
        findings=findings,
        record_count=len(records),
        null_count=null_count,
    )

    if report.score == 100:
        logger.info("Data quality: EXCELLENT (no anomalies across %d records)", len(records))
    else:
        logger.warning("Data quality: WARNING (score %d, %d null values)", score, null_count)
    return report
