"""
Check Worker — Async orchestrator running one task per file.

Pipeline per run:
1. Discover files under the roots (include/exclude patterns)
2. Schedule one task per file, at most `max_workers` at a time
3. Each task reads, classifies, models and evaluates its file in a thread
4. Results are appended to a lock-guarded collector
5. Once every task has settled, aggregate into the Report

A timeout, an explicit cancel() or cancellation of the run task (a user
interrupt under asyncio.run) stops scheduling, abandons in-flight tasks
and yields a Report with status `cancelled` holding the violations
collected so far. Tasks that finish after that point are discarded.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from collections.abc import Callable, Iterable

from stylegate.config import settings
from stylegate.core.aggregator import aggregate
from stylegate.core.discovery import discover
from stylegate.core.rule_engine import RuleEngine, parse_error_violation
from stylegate.models.check_models import FileInput
from stylegate.models.report_models import Report
from stylegate.models.rule_models import (
    IO_ERROR_RULE_ID,
    RuleCategory,
    Ruleset,
    Severity,
    Violation,
)

logger = logging.getLogger("stylegate.worker")

FileJob = Callable[[], list[Violation]]


def io_error_violation(file: str, message: str) -> Violation:
    return Violation(
        file=file,
        line_start=1,
        line_end=1,
        rule_id=IO_ERROR_RULE_ID,
        category=RuleCategory.INTERNAL,
        severity=Severity.ERROR,
        message=message,
    )


class ViolationCollector:
    """Append-only, thread-safe store of per-file violation batches."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._batches: list[list[Violation]] = []
        self._files = 0
        self._closed = False

    def add(self, batch: Iterable[Violation], *, counts_file: bool = True) -> bool:
        """Append a batch. Returns False if the collector was already closed."""
        batch = list(batch)
        with self._lock:
            if self._closed:
                return False
            self._batches.append(batch)
            if counts_file:
                self._files += 1
            return True

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def snapshot(self) -> tuple[list[list[Violation]], int]:
        with self._lock:
            return list(self._batches), self._files


class CheckWorker:
    """Runs the engine over many files concurrently."""

    def __init__(
        self,
        ruleset: Ruleset,
        *,
        max_workers: int | None = None,
        timeout: float | None = None,
        max_file_size: int | None = None,
    ) -> None:
        self.ruleset = ruleset
        self.engine = RuleEngine(ruleset)
        self.max_workers = max_workers or settings.max_workers
        self.timeout = timeout if timeout is not None else settings.run_timeout_seconds
        self.max_file_size = max_file_size or settings.max_file_size_bytes
        self._stops: dict[str, asyncio.Event] = {}

    def cancel(self) -> None:
        """Stop every run in progress; each finishes with status `cancelled`."""
        for stop in list(self._stops.values()):
            stop.set()

    # ── Entry points ──

    async def run_check(self, roots: list[str]) -> Report:
        """Discover files under `roots` and check them."""
        found = discover(roots, self.ruleset.include, self.ruleset.exclude)
        prelude = [
            io_error_violation(root, f"Path '{root}' does not exist") for root in found.missing
        ]
        jobs = [(path, self._path_job(path)) for path in found.files]
        return await self._run(jobs, prelude)

    async def run_files(self, paths: list[str]) -> Report:
        """Check exactly these files, without include/exclude filtering."""
        return await self._run([(path, self._path_job(path)) for path in paths])

    async def check_sources(self, files: list[FileInput]) -> Report:
        """Check in-memory file contents (used by the HTTP service)."""
        return await self._run([(f.path, self._source_job(f)) for f in files])

    # ── Jobs ──

    def _path_job(self, path: str) -> FileJob:
        def job() -> list[Violation]:
            try:
                with open(path, "rb") as fh:
                    raw = fh.read(self.max_file_size + 1)
            except OSError as e:
                return [io_error_violation(path, f"Cannot read file: {e.strerror or e}")]
            if len(raw) > self.max_file_size:
                return [
                    io_error_violation(
                        path, f"File exceeds the size limit of {self.max_file_size} bytes"
                    )
                ]
            try:
                content = raw.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                return [
                    io_error_violation(
                        path, f"File is not valid UTF-8 ({e.reason} at byte {e.start})"
                    )
                ]
            return self.engine.check_file(path, content)

        return job

    def _source_job(self, source: FileInput) -> FileJob:
        def job() -> list[Violation]:
            size = len(source.content.encode("utf-8"))
            if size > self.max_file_size:
                return [
                    io_error_violation(
                        source.path, f"File exceeds the size limit of {self.max_file_size} bytes"
                    )
                ]
            return self.engine.check_file(source.path, source.content)

        return job

    # ── Scheduling ──

    async def _run(
        self,
        jobs: list[tuple[str, FileJob]],
        prelude: list[Violation] | None = None,
    ) -> Report:
        run_id = str(uuid.uuid4())[:8]
        start_time = time.monotonic()
        logger.info(f"[{run_id}] Starting check of {len(jobs)} files")

        collector = ViolationCollector()
        if prelude:
            collector.add(prelude, counts_file=False)
        semaphore = asyncio.Semaphore(self.max_workers)
        stop = self._stops[run_id] = asyncio.Event()

        async def run_one(path: str, job: FileJob) -> None:
            async with semaphore:
                try:
                    batch = await asyncio.to_thread(job)
                except Exception as e:
                    logger.exception(f"[{run_id}] Task for {path} failed")
                    batch = [parse_error_violation(path, f"Internal failure: {type(e).__name__}: {e}", 1)]
            if not collector.add(batch):
                logger.debug(f"[{run_id}] Discarded late result for {path}")

        tasks = {asyncio.create_task(run_one(path, job)) for path, job in jobs}
        try:
            cancelled = await self._settle(tasks, stop)
        except asyncio.CancelledError:
            # Interrupts end the run the same way a timeout does
            logger.warning(f"[{run_id}] Run interrupted")
            current = asyncio.current_task()
            if current is not None:
                current.uncancel()
            cancelled = True
        finally:
            del self._stops[run_id]

        if cancelled:
            collector.close()
            await _abandon(tasks)

        batches, files_checked = collector.snapshot()
        report = aggregate(batches, files_checked, cancelled=cancelled)
        elapsed_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            f"[{run_id}] Check {report.status.value}: {files_checked}/{len(jobs)} files, "
            f"{len(report.violations)} violations ({elapsed_ms:.1f}ms)"
        )
        return report

    async def _settle(self, tasks: set[asyncio.Task], stop: asyncio.Event) -> bool:
        """Wait for every task. Returns True if the run was cut short."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout if self.timeout else None
        stop_waiter = asyncio.create_task(stop.wait())
        pending = set(tasks)
        try:
            while pending:
                remaining = None if deadline is None else max(0.0, deadline - loop.time())
                done, _ = await asyncio.wait(
                    pending | {stop_waiter},
                    timeout=remaining,
                    return_when=asyncio.FIRST_COMPLETED,
                )
                pending -= done
                if stop_waiter in done:
                    return bool(pending)
                if deadline is not None and loop.time() >= deadline and pending:
                    logger.warning(f"Run timed out after {self.timeout}s, {len(pending)} files pending")
                    return True
            return False
        finally:
            stop_waiter.cancel()


async def _abandon(tasks: set[asyncio.Task]) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)
