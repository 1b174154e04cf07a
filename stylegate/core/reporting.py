"""
Report presentations — Structured JSON and a human-readable summary.

Both are pure functions of a Report.
"""

from __future__ import annotations

import json
from collections import Counter

from stylegate.models.report_models import Report, ReportSummary
from stylegate.models.rule_models import Severity


def to_records(report: Report) -> list[dict]:
    return [
        {
            "file": v.file,
            "line_start": v.line_start,
            "line_end": v.line_end,
            "rule_id": v.rule_id,
            "severity": v.severity.value,
            "message": v.message,
        }
        for v in report.violations
    ]


def to_json(report: Report) -> str:
    """Machine-readable form: the ordered records plus the run status."""
    payload = {
        "status": report.status.value,
        "files_checked": report.files_checked,
        "violations": to_records(report),
    }
    return json.dumps(payload, indent=2)


def summarize(report: Report) -> ReportSummary:
    by_severity = Counter(v.severity.value for v in report.violations)
    by_category = Counter(v.category.value for v in report.violations)
    return ReportSummary(
        status=report.status,
        files_checked=report.files_checked,
        total=len(report.violations),
        by_severity={s.value: by_severity.get(s.value, 0) for s in Severity},
        by_category=dict(sorted(by_category.items())),
    )


def render_summary(report: Report) -> str:
    summary = summarize(report)
    lines = [
        f"{v.file}:{v.line_start}: {v.severity.value} [{v.rule_id}] {v.message}"
        for v in report.violations
    ]
    if lines:
        lines.append("")
    lines.append(
        f"Status: {summary.status.value} ({summary.files_checked} files, "
        f"{summary.total} violations)"
    )
    lines.append(
        "By severity: "
        + ", ".join(f"{name}={count}" for name, count in summary.by_severity.items())
    )
    if summary.by_category:
        lines.append(
            "By category: "
            + ", ".join(f"{name}={count}" for name, count in summary.by_category.items())
        )
    return "\n".join(lines)
