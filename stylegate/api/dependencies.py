"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from stylegate.core.ruleset_loader import load_configured_ruleset
from stylegate.models.rule_models import Ruleset
from stylegate.workers.check_worker import CheckWorker


@lru_cache
def get_ruleset() -> Ruleset:
    """Ruleset loaded once per process and never mutated."""
    return load_configured_ruleset()


@lru_cache
def get_check_worker() -> CheckWorker:
    """Shared check worker singleton."""
    return CheckWorker(get_ruleset())
