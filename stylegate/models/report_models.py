"""
Report Data Models — The single output value of a run.

Both presentations (structured records and the human summary) are derived
from a Report; nothing re-derives violations for either.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from stylegate.models.rule_models import Violation


class RunStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    CANCELLED = "cancelled"


class Report(BaseModel):
    """Ordered, de-duplicated violations plus the aggregate verdict."""

    model_config = ConfigDict(frozen=True)

    violations: tuple[Violation, ...] = ()
    status: RunStatus = RunStatus.PASS
    files_checked: int = Field(default=0, ge=0)


class ReportSummary(BaseModel):
    """Counts derived from a Report."""

    status: RunStatus
    files_checked: int = 0
    total: int = 0
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_category: dict[str, int] = Field(default_factory=dict)
