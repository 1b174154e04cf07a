"""
StyleGate — POST /check endpoint.

Accepts {"files": [{"path", "content"}]}, checks every file against the
process ruleset and returns the report plus its summary.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from stylegate.api.dependencies import get_check_worker
from stylegate.core.reporting import summarize
from stylegate.models.check_models import CheckRequest, CheckResponse
from stylegate.workers.check_worker import CheckWorker

logger = logging.getLogger("stylegate.api")
router = APIRouter()

# Max files per request
MAX_FILES = 500


@router.post("/check", response_model=CheckResponse)
async def check_files(req: CheckRequest, worker: CheckWorker = Depends(get_check_worker)):
    """Check inline file contents."""
    if not req.files:
        return CheckResponse(message="error")
    if len(req.files) > MAX_FILES:
        raise HTTPException(
            status_code=400,
            detail=f"Request exceeds maximum of {MAX_FILES} files",
        )

    report = await worker.check_sources(req.files)
    logger.info(f"Checked {report.files_checked} files: {report.status.value}")
    return CheckResponse(report=report, summary=summarize(report))
