"""Summaries and reports of comparison results."""

from neat_comparer.reporting.summary import ComparisonStatus, ComparisonSummary, summarize
from neat_comparer.reporting.diff_reporter import REPORT_SCHEMA, DiffReporter

__all__ = [
    "ComparisonStatus",
    "ComparisonSummary",
    "summarize",
    "REPORT_SCHEMA",
    "DiffReporter",
]
