"""
Aggregator — Merge per-file violation batches into one Report.

The sort on (file, line_start, rule_id) is the sole source of ordering, so
the Report is independent of the order files were processed in.
"""

from __future__ import annotations

from collections.abc import Iterable

from stylegate.models.report_models import Report, RunStatus
from stylegate.models.rule_models import Severity, Violation


def run_status(violations: Iterable[Violation]) -> RunStatus:
    status = RunStatus.PASS
    for violation in violations:
        if violation.severity == Severity.ERROR:
            return RunStatus.FAIL
        status = RunStatus.WARN
    return status


def aggregate(
    batches: Iterable[Iterable[Violation]],
    files_checked: int,
    *,
    cancelled: bool = False,
) -> Report:
    """
    Build the Report for a run.

    Exact duplicates (same file, line range, rule id and message) are
    coalesced; distinct rules on the same range are all kept. A cancelled
    run keeps the violations collected so far under status `cancelled`.
    """
    unique: dict[tuple, Violation] = {}
    for batch in batches:
        for violation in batch:
            unique.setdefault(violation.identity, violation)

    ordered = tuple(sorted(unique.values(), key=lambda v: v.sort_key))
    status = RunStatus.CANCELLED if cancelled else run_status(ordered)
    return Report(violations=ordered, status=status, files_checked=files_checked)
