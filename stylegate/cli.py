"""
StyleGate command surface.

`check(paths, config_path)` is the single operation: it loads the
ruleset, checks every file under the roots, prints the report and returns
the exit code (0 pass, 1 warn/fail, 2 configuration error, fatal error
or cancelled run). The typer app is a thin wrapper around it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import typer

from stylegate.config import settings
from stylegate.core.exceptions import ConfigError
from stylegate.core.reporting import render_summary, to_json
from stylegate.core.ruleset_loader import load_configured_ruleset
from stylegate.models.report_models import RunStatus
from stylegate.workers.check_worker import CheckWorker

logger = logging.getLogger("stylegate.cli")

EXIT_PASS = 0
EXIT_VIOLATIONS = 1
EXIT_FATAL = 2

OUTPUT_FORMATS = ("summary", "json")

app = typer.Typer(add_completion=False, help="Deterministic style-compliance checks.")


def exit_code_for(status: RunStatus) -> int:
    if status == RunStatus.PASS:
        return EXIT_PASS
    if status == RunStatus.CANCELLED:
        return EXIT_FATAL
    return EXIT_VIOLATIONS


def check(
    paths: list[str],
    config_path: str | None = None,
    *,
    output_format: str = "summary",
) -> int:
    """Check every file under `paths` and return the process exit code."""
    try:
        ruleset = load_configured_ruleset(config_path)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        typer.echo(f"Configuration error: {e}", err=True)
        return EXIT_FATAL

    worker = CheckWorker(ruleset)
    try:
        report = asyncio.run(worker.run_check(list(paths)))
    except KeyboardInterrupt:
        # A first interrupt cancels the run task and yields a cancelled report;
        # only a second one lands here
        typer.echo("Check aborted", err=True)
        return EXIT_FATAL
    except Exception as e:
        logger.exception("Fatal error during check")
        typer.echo(f"Fatal error: {e}", err=True)
        return EXIT_FATAL

    typer.echo(to_json(report) if output_format == "json" else render_summary(report))
    return exit_code_for(report.status)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@app.callback()
def main() -> None:
    """StyleGate: check files against a style ruleset."""


@app.command("check")
def check_command(
    paths: List[str] = typer.Argument(..., help="Files or directories to check"),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Ruleset document (overrides STYLEGATE_CONFIG)"
    ),
    output_format: str = typer.Option("summary", "--format", "-f", help="summary or json"),
) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"format must be one of: {', '.join(OUTPUT_FORMATS)}", param_hint="--format"
        )
    configure_logging()
    raise typer.Exit(code=check(paths, config, output_format=output_format))


if __name__ == "__main__":
    app()
