"""
Tests for the CheckWorker — discovery, concurrent checks, I/O errors, cancellation.
"""

import asyncio
import time

from stylegate.core.discovery import discover
from stylegate.core.reporting import to_json
from stylegate.core.ruleset_loader import DEFAULT_EXCLUDE, DEFAULT_INCLUDE
from stylegate.models.check_models import FileInput
from stylegate.models.report_models import RunStatus
from stylegate.workers.check_worker import CheckWorker, ViolationCollector


def _tree(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.py").write_text("x = 1 \n", encoding="utf-8")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text("# Guide\n", encoding="utf-8")
    (tmp_path / "node_modules" / "lib").mkdir(parents=True)
    (tmp_path / "node_modules" / "lib" / "index.js").write_text("var a = 1; \n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("notes \n", encoding="utf-8")
    return tmp_path


# ── Discovery ──


def test_discover_applies_patterns(tmp_path):
    root = _tree(tmp_path)
    found = discover([str(root)], DEFAULT_INCLUDE, DEFAULT_EXCLUDE)
    assert found.files == [
        (root / "docs" / "guide.md").as_posix(),
        (root / "src" / "app.py").as_posix(),
    ]
    assert found.missing == []


def test_discover_file_root_and_missing_root(tmp_path):
    root = _tree(tmp_path)
    app = str(root / "src" / "app.py")
    found = discover([app, str(root / "absent")], DEFAULT_INCLUDE, DEFAULT_EXCLUDE)
    assert found.files == [(root / "src" / "app.py").as_posix()]
    assert found.missing == [str(root / "absent")]


def test_discover_deduplicates_overlapping_roots(tmp_path):
    root = _tree(tmp_path)
    found = discover([str(root), str(root / "src")], DEFAULT_INCLUDE, DEFAULT_EXCLUDE)
    assert len(found.files) == 2


# ── Runs ──


def test_run_check_over_tree(make_ruleset, tmp_path):
    root = _tree(tmp_path)
    worker = CheckWorker(make_ruleset("trailing-whitespace"))
    report = asyncio.run(worker.run_check([str(root)]))
    assert report.files_checked == 2
    assert report.status == RunStatus.WARN
    assert [v.file for v in report.violations] == [(root / "src" / "app.py").as_posix()]


def test_file_order_does_not_change_report(make_ruleset, tmp_path):
    paths = []
    for name in ("a.py", "b.py", "c.py"):
        path = tmp_path / name
        path.write_text("value = 1 \n\n\n\ndef f() -> None:\n    pass\n", encoding="utf-8")
        paths.append(str(path))
    worker = CheckWorker(make_ruleset("trailing-whitespace", "blank-lines-between-blocks"),
                         max_workers=2)
    forward = asyncio.run(worker.run_files(paths))
    backward = asyncio.run(worker.run_files(list(reversed(paths))))
    assert forward == backward
    assert to_json(forward) == to_json(backward)


def test_missing_root_is_io_error(make_ruleset, tmp_path):
    worker = CheckWorker(make_ruleset("trailing-whitespace"))
    missing = str(tmp_path / "nowhere")
    report = asyncio.run(worker.run_check([missing]))
    assert report.files_checked == 0
    assert report.status == RunStatus.FAIL
    assert [(v.rule_id, v.file) for v in report.violations] == [("io-error", missing)]


def test_invalid_utf8_is_io_error(make_ruleset, tmp_path):
    bad = tmp_path / "bad.py"
    bad.write_bytes(b"x = '\xff\xfe'\n")
    good = tmp_path / "good.py"
    good.write_text("x = 1 \n", encoding="utf-8")
    worker = CheckWorker(make_ruleset("trailing-whitespace"))
    report = asyncio.run(worker.run_files([str(bad), str(good)]))
    assert report.files_checked == 2
    by_file = {v.file: v for v in report.violations}
    assert by_file[str(bad)].rule_id == "io-error"
    assert "UTF-8" in by_file[str(bad)].message
    assert by_file[str(good)].rule_id == "trailing-whitespace"


def test_oversized_file_is_io_error(make_ruleset, tmp_path):
    big = tmp_path / "big.py"
    big.write_text("x = 1\n" * 10, encoding="utf-8")
    worker = CheckWorker(make_ruleset("trailing-whitespace"), max_file_size=20)
    report = asyncio.run(worker.run_files([str(big)]))
    assert [v.rule_id for v in report.violations] == ["io-error"]
    assert "size limit" in report.violations[0].message


def test_unreadable_path_is_io_error(make_ruleset, tmp_path):
    worker = CheckWorker(make_ruleset("trailing-whitespace"))
    report = asyncio.run(worker.run_files([str(tmp_path / "gone.py")]))
    assert [v.rule_id for v in report.violations] == ["io-error"]
    assert report.files_checked == 1


def test_check_sources(make_ruleset):
    worker = CheckWorker(make_ruleset("trailing-whitespace"))
    files = [FileInput(path="a.py", content="x = 1 \n"), FileInput(path="b.md", content="# B\n")]
    report = asyncio.run(worker.check_sources(files))
    assert report.files_checked == 2
    assert [(v.file, v.line_start) for v in report.violations] == [("a.py", 1)]


def _slow_engine(worker, delay):
    original = worker.engine.check_file

    def check_file(path, content):
        if "slow" in path:
            time.sleep(delay)
        return original(path, content)

    worker.engine.check_file = check_file


def test_timeout_cancels_run(make_ruleset, tmp_path):
    fast = tmp_path / "fast.py"
    fast.write_text("x = 1 \n", encoding="utf-8")
    slow = tmp_path / "slow.py"
    slow.write_text("y = 2 \n", encoding="utf-8")
    worker = CheckWorker(make_ruleset("trailing-whitespace"), max_workers=2, timeout=0.3)
    _slow_engine(worker, 1.0)

    report = asyncio.run(worker.run_files([str(fast), str(slow)]))
    assert report.status == RunStatus.CANCELLED
    assert report.files_checked == 1
    assert [v.file for v in report.violations] == [str(fast)]


def test_explicit_cancel(make_ruleset, tmp_path):
    slow = tmp_path / "slow.py"
    slow.write_text("y = 2\n", encoding="utf-8")
    worker = CheckWorker(make_ruleset("trailing-whitespace"))
    _slow_engine(worker, 0.5)

    async def scenario():
        task = asyncio.create_task(worker.run_files([str(slow)]))
        await asyncio.sleep(0.1)
        worker.cancel()
        return await task

    report = asyncio.run(scenario())
    assert report.status == RunStatus.CANCELLED
    assert report.files_checked == 0
    assert report.violations == ()


def test_cancelling_run_task_keeps_collected_violations(make_ruleset, tmp_path):
    fast = tmp_path / "fast.py"
    fast.write_text("x = 1 \n", encoding="utf-8")
    slow = tmp_path / "slow.py"
    slow.write_text("y = 2 \n", encoding="utf-8")
    worker = CheckWorker(make_ruleset("trailing-whitespace"), max_workers=2)
    _slow_engine(worker, 1.0)

    async def scenario():
        task = asyncio.create_task(worker.run_files([str(fast), str(slow)]))
        await asyncio.sleep(0.2)
        task.cancel()
        return await task

    report = asyncio.run(scenario())
    assert report.status == RunStatus.CANCELLED
    assert report.files_checked == 1
    assert [(v.file, v.rule_id) for v in report.violations] == [
        (str(fast), "trailing-whitespace")
    ]


def test_cancel_reaches_every_concurrent_run(make_ruleset, tmp_path):
    fast = tmp_path / "fast.py"
    fast.write_text("x = 1\n", encoding="utf-8")
    slow = tmp_path / "slow.py"
    slow.write_text("y = 2\n", encoding="utf-8")
    worker = CheckWorker(make_ruleset("trailing-whitespace"))
    _slow_engine(worker, 0.5)

    async def scenario():
        slow_run = asyncio.create_task(worker.run_files([str(slow)]))
        fast_report = await worker.run_files([str(fast)])
        worker.cancel()
        return fast_report, await slow_run

    fast_report, slow_report = asyncio.run(scenario())
    assert fast_report.status == RunStatus.PASS
    assert slow_report.status == RunStatus.CANCELLED
    assert slow_report.files_checked == 0


def test_collector_rejects_after_close():
    collector = ViolationCollector()
    assert collector.add([])
    collector.close()
    assert not collector.add([])
    batches, files = collector.snapshot()
    assert (len(batches), files) == (1, 1)
