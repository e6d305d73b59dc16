"""Diff Reporter - Generate structured comparison reports and markdown summaries."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Tuple

import jsonschema

from neat_comparer.comparison.result import PropertyComparisonResult
from neat_comparer.config.settings import Settings, get_settings
from neat_comparer.reporting.summary import ComparisonSummary
from neat_comparer.utils.logger import get_logger, log_operation, preview_value

logger = get_logger(__name__)

REDACTED = "***REDACTED***"

_RESULT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": [
        "first_property_name",
        "second_property_name",
        "first_type",
        "second_type",
        "is_equal",
        "has_difference",
    ],
    "properties": {
        "first_property_name": {"type": "string"},
        "second_property_name": {"type": "string"},
        "first_type": {"type": "string"},
        "second_type": {"type": "string"},
        "is_equal": {"type": "boolean"},
        "has_difference": {"type": "boolean"},
    },
}

REPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["metadata", "statistics", "differences", "results"],
    "properties": {
        "metadata": {
            "type": "object",
            "required": ["comparison_id", "first_type", "second_type", "generated_at"],
        },
        "statistics": {
            "type": "object",
            "required": [
                "total_comparisons",
                "difference_count",
                "match_percentage",
                "status",
            ],
            "properties": {
                "total_comparisons": {"type": "integer", "minimum": 0},
                "difference_count": {"type": "integer", "minimum": 0},
                "match_percentage": {"type": "number", "minimum": 0, "maximum": 100},
                "status": {"enum": ["match", "mismatch"]},
            },
        },
        "differences": {"type": "array", "items": _RESULT_SCHEMA},
        "results": {"type": "array", "items": _RESULT_SCHEMA},
    },
}


class DiffReporter:
    """Generate structured comparison artifacts (JSON + Markdown)."""

    def __init__(self, output_dir: Path | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.output_dir = Path(output_dir) if output_dir is not None else Path(self.settings.report_dir)

    def _redact(self, result: PropertyComparisonResult) -> Dict[str, Any]:
        data = result.to_dict()
        if self.settings.is_redacted(result.first_property_name):
            data["first_value"] = REDACTED
        if self.settings.is_redacted(result.second_property_name):
            data["second_value"] = REDACTED
        return data

    def build_report(self, summary: ComparisonSummary) -> Dict[str, Any]:
        """
        Build the report dictionary and validate it against REPORT_SCHEMA.

        Raises:
            jsonschema.ValidationError: If the report does not match the schema
        """
        report = {
            "metadata": {
                "comparison_id": summary.comparison_id,
                "first_type": summary.first_type,
                "second_type": summary.second_type,
                "compared_at": summary.timestamp,
                "generated_at": datetime.now().isoformat(),
            },
            "statistics": {
                "total_comparisons": summary.total_comparisons,
                "difference_count": summary.difference_count,
                "match_percentage": summary.calculate_match_percentage(),
                "status": summary.status.value,
            },
            "differences": [self._redact(result) for result in summary.differences],
            "results": [self._redact(result) for result in summary.results],
        }

        jsonschema.validate(instance=report, schema=REPORT_SCHEMA)
        return report

    def generate_json_report(self, summary: ComparisonSummary) -> str:
        return json.dumps(self.build_report(summary), indent=2, default=str)

    def _render_value(self, property_name: str, value: Any) -> str:
        if self.settings.is_redacted(property_name):
            return REDACTED
        text = preview_value(value, self.settings.value_preview_length)
        return text.replace("|", "\\|")

    def generate_markdown_summary(self, summary: ComparisonSummary) -> str:
        md_lines = [
            f"# Comparison Report: {summary.comparison_id}",
            f"**Compared:** `{summary.first_type}` vs `{summary.second_type}`",
            f"**Generated:** {datetime.now().isoformat()}",
            "",
            "## Summary",
            f"- **Properties Compared:** {summary.total_comparisons}",
            f"- **Differences:** {summary.difference_count}",
            f"- **Match Percentage:** {summary.calculate_match_percentage():.1f}%",
            f"- **Status:** {summary.status.value.upper()}",
            "",
        ]

        differences = summary.differences
        if differences:
            md_lines.extend(
                [
                    "## Differences",
                    "",
                    "| First Property | First Value | Second Property | Second Value |",
                    "| --- | --- | --- | --- |",
                ]
            )
            for difference in differences:
                md_lines.append(
                    f"| {difference.first_property_name} "
                    f"| {self._render_value(difference.first_property_name, difference.first_value)} "
                    f"| {difference.second_property_name} "
                    f"| {self._render_value(difference.second_property_name, difference.second_value)} |"
                )
        else:
            md_lines.append("No differences")

        return "\n".join(md_lines)

    @log_operation("write_reports")
    def write_reports(self, summary: ComparisonSummary) -> Tuple[Path, Path]:
        json_report = self.generate_json_report(summary)
        markdown_report = self.generate_markdown_summary(summary)

        self.output_dir.mkdir(parents=True, exist_ok=True)

        safe_comparison_id = summary.comparison_id.replace("/", "_")
        json_path = self.output_dir / f"{safe_comparison_id}.json"
        md_path = self.output_dir / f"{safe_comparison_id}.md"

        json_path.write_text(json_report, encoding="utf-8")
        md_path.write_text(markdown_report, encoding="utf-8")

        logger.info(
            f"Wrote comparison reports for {summary.comparison_id}",
            operation="write_reports",
            context={"json_path": str(json_path), "md_path": str(md_path)},
        )

        return json_path, md_path
