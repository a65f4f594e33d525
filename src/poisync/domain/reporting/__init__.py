"""Per-region statistical reports."""

from __future__ import annotations

from .aggregator import ReportAggregator, ReportRunResult
from .statistics import (
    COUNTER_TAGS,
    TIMESTAMP_FORMAT,
    average_verification_date,
    compute_report_tags,
    count_changes,
    diff_tags,
)
from .writers import (
    CumulativeReportWriter,
    ReportWrite,
    ReportWriteOutcome,
    ReportWriter,
    SnapshotReportWriter,
    writer_for,
)

__all__ = [
    "COUNTER_TAGS",
    "TIMESTAMP_FORMAT",
    "CumulativeReportWriter",
    "ReportAggregator",
    "ReportRunResult",
    "ReportWrite",
    "ReportWriteOutcome",
    "ReportWriter",
    "SnapshotReportWriter",
    "average_verification_date",
    "compute_report_tags",
    "count_changes",
    "diff_tags",
    "writer_for",
]
