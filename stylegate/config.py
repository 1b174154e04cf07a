"""
StyleGate Configuration — pydantic-settings based.

All settings are read from environment variables (prefix STYLEGATE_) or a
.env file. STYLEGATE_CONFIG names the ruleset document; when it is unset
the default path `stylegate.yml` in the working directory is used, and if
that file does not exist either, the bundled default ruleset applies.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_PATH = "stylegate.yml"
BUNDLED_RULESET_PATH = Path(__file__).parent / "rulesets" / "default.yml"


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Ruleset ──
    config: str | None = Field(
        default=None,
        description="Path to the ruleset document (STYLEGATE_CONFIG)",
    )

    # ── Scheduling ──
    max_workers: int = Field(default=8, ge=1, description="Concurrent file tasks")
    run_timeout_seconds: float | None = Field(
        default=None, gt=0, description="Cancel the run after this many seconds"
    )

    # ── Input ──
    max_file_size_bytes: int = Field(
        default=1_000_000, ge=1, description="Larger files are reported as io-error"
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Root log level for entry points")

    model_config = {
        "env_prefix": "STYLEGATE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance — imported by other modules
settings = Settings()


def resolve_config_path(override: str | None = None) -> tuple[Path, bool]:
    """
    Decide which ruleset document to load.

    Returns (path, explicit). `explicit` is True when the path was named by
    the caller or the environment, in which case a missing file is an error.
    """
    if override:
        return Path(override), True
    env_value = Settings().config
    if env_value:
        return Path(env_value), True
    default = Path(DEFAULT_CONFIG_PATH)
    if default.is_file():
        return default, False
    return BUNDLED_RULESET_PATH, False
