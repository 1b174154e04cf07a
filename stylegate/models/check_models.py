"""
Check Request/Response Models — API contract schemas.

These are the public-facing Pydantic models used by the FastAPI endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from stylegate.models.report_models import Report, ReportSummary


class FileInput(BaseModel):
    """A single file submitted for checking."""

    path: str = Field(..., min_length=1, description="File path (used for classification)")
    content: str = Field(..., description="File content")


class CheckRequest(BaseModel):
    """Request body for /check."""

    files: list[FileInput] = Field(default_factory=list)


class CheckResponse(BaseModel):
    """Top-level response for /check."""

    message: str = "check_complete"
    report: Report | None = None
    summary: ReportSummary | None = None
