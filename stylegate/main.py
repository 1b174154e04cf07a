"""
StyleGate FastAPI Application.

  POST /check  → check inline files against the configured ruleset
  GET  /health → {"status": "ok"}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stylegate.api.routes.check import router as check_router
from stylegate.api.routes.health import router as health_router
from stylegate.config import settings
from stylegate.core.exceptions import ConfigError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("stylegate")

app = FastAPI(
    title="StyleGate",
    description="Deterministic style-compliance checks",
    version="0.1.0",
)

app.include_router(health_router)
app.include_router(check_router)


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError):
    logger.error(f"Ruleset configuration error: {exc}")
    return JSONResponse(status_code=500, content={"detail": f"Configuration error: {exc}"})
