"""
Comparison Summary

Aggregates the results of one comparer run into a summary with difference
counts, a match percentage and an overall status.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from neat_comparer.comparison.result import PropertyComparisonResult, qualified_name


def _get_iso_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ComparisonStatus(Enum):
    """Comparison status codes."""

    MATCH = "match"
    MISMATCH = "mismatch"


@dataclass
class ComparisonSummary:
    """Overall result of comparing one instance pair."""

    comparison_id: str
    first_type: str
    second_type: str
    results: List[PropertyComparisonResult] = field(default_factory=list)
    timestamp: str = field(default_factory=_get_iso_timestamp)

    @property
    def total_comparisons(self) -> int:
        return len(self.results)

    @property
    def differences(self) -> List[PropertyComparisonResult]:
        return [result for result in self.results if result.has_difference]

    @property
    def difference_count(self) -> int:
        return len(self.differences)

    @property
    def status(self) -> ComparisonStatus:
        return ComparisonStatus.MISMATCH if self.difference_count else ComparisonStatus.MATCH

    def calculate_match_percentage(self) -> float:
        """Calculate the share of equal properties, 100.0 when nothing was compared."""
        if self.total_comparisons == 0:
            return 100.0

        matched = self.total_comparisons - self.difference_count
        return (matched / self.total_comparisons) * 100.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "comparison_id": self.comparison_id,
            "first_type": self.first_type,
            "second_type": self.second_type,
            "timestamp": self.timestamp,
            "total_comparisons": self.total_comparisons,
            "difference_count": self.difference_count,
            "match_percentage": self.calculate_match_percentage(),
            "status": self.status.value,
            "results": [result.to_dict() for result in self.results],
        }


def summarize(
    results: Iterable[PropertyComparisonResult], comparison_id: Optional[str] = None
) -> ComparisonSummary:
    """
    Build a ComparisonSummary from comparer results.

    Args:
        results: Results of ObjectComparer.compare (or get_differences)
        comparison_id: Identifier of the run, a random hex id when omitted

    Returns:
        ComparisonSummary keeping the results in their original order
    """
    results = list(results)
    first_type = qualified_name(results[0].first_type) if results else ""
    second_type = qualified_name(results[0].second_type) if results else ""

    return ComparisonSummary(
        comparison_id=comparison_id or uuid.uuid4().hex,
        first_type=first_type,
        second_type=second_type,
        results=results,
    )
