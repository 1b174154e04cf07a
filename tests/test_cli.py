"""
Tests for the command surface — exit codes, output formats and the typer app.
"""

import json
import time

import pytest
from typer.testing import CliRunner

from stylegate.cli import EXIT_FATAL, EXIT_PASS, EXIT_VIOLATIONS, app, check, exit_code_for
from stylegate.models.report_models import RunStatus

WHITESPACE_ONLY = "rules:\n  - {id: trailing-whitespace, category: whitespace}\n"
STRICT_NAMING = "rules:\n  - {id: naming-case, category: naming, severity: error}\n"

runner = CliRunner()


@pytest.mark.parametrize(
    "status,code",
    [
        (RunStatus.PASS, EXIT_PASS),
        (RunStatus.WARN, EXIT_VIOLATIONS),
        (RunStatus.FAIL, EXIT_VIOLATIONS),
        (RunStatus.CANCELLED, EXIT_FATAL),
    ],
)
def test_exit_code_for_status(status, code):
    assert exit_code_for(status) == code


def test_clean_file_exits_zero(tmp_path, ruleset_file, clean_python_code):
    source = tmp_path / "geometry.py"
    source.write_text(clean_python_code, encoding="utf-8")
    assert check([str(source)], str(ruleset_file(WHITESPACE_ONLY))) == EXIT_PASS


def test_warnings_exit_one(tmp_path, ruleset_file):
    source = tmp_path / "a.py"
    source.write_text("x = 1 \n", encoding="utf-8")
    assert check([str(source)], str(ruleset_file(WHITESPACE_ONLY))) == EXIT_VIOLATIONS


def test_errors_exit_one(tmp_path, ruleset_file):
    source = tmp_path / "a.py"
    source.write_text("def getValue() -> int:\n    return 1\n", encoding="utf-8")
    assert check([str(source)], str(ruleset_file(STRICT_NAMING))) == EXIT_VIOLATIONS


def test_invalid_config_exits_two(tmp_path, ruleset_file, capsys):
    source = tmp_path / "a.py"
    source.write_text("x = 1\n", encoding="utf-8")
    config = ruleset_file("rules:\n  - {id: line-length, category: naming, params: {target: 80}}\n")
    assert check([str(source)], str(config)) == EXIT_FATAL
    assert "Configuration error" in capsys.readouterr().err


def test_missing_config_exits_two(tmp_path):
    assert check([str(tmp_path)], str(tmp_path / "nope.yml")) == EXIT_FATAL


def test_config_from_environment(monkeypatch, tmp_path, ruleset_file):
    source = tmp_path / "a.py"
    source.write_text("x = 1 \n", encoding="utf-8")
    monkeypatch.setenv("STYLEGATE_CONFIG", str(ruleset_file(WHITESPACE_ONLY)))
    assert check([str(source)]) == EXIT_VIOLATIONS


def test_json_output(tmp_path, ruleset_file, capsys):
    source = tmp_path / "a.py"
    source.write_text("x = 1 \n", encoding="utf-8")
    check([str(source)], str(ruleset_file(WHITESPACE_ONLY)), output_format="json")
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "warn"
    assert [(v["rule_id"], v["line_start"]) for v in payload["violations"]] == [
        ("trailing-whitespace", 1)
    ]


def test_summary_output(tmp_path, ruleset_file, capsys):
    source = tmp_path / "a.py"
    source.write_text("x = 1 \n", encoding="utf-8")
    check([str(source)], str(ruleset_file(WHITESPACE_ONLY)))
    out = capsys.readouterr().out
    assert f"{source.as_posix()}:1: warning [trailing-whitespace] Trailing whitespace" in out
    assert "Status: warn (1 files, 1 violations)" in out


def test_command_line_exit_codes(tmp_path, ruleset_file):
    config = str(ruleset_file(WHITESPACE_ONLY))
    clean = tmp_path / "clean.py"
    clean.write_text("x = 1\n", encoding="utf-8")
    dirty = tmp_path / "dirty.py"
    dirty.write_text("x = 1 \n", encoding="utf-8")

    result = runner.invoke(app, ["check", str(clean), "--config", config])
    assert result.exit_code == EXIT_PASS

    result = runner.invoke(app, ["check", str(dirty), "-c", config])
    assert result.exit_code == EXIT_VIOLATIONS


def test_command_line_rejects_unknown_format(tmp_path, ruleset_file):
    result = runner.invoke(
        app, ["check", str(tmp_path), "--config", str(ruleset_file(WHITESPACE_ONLY)),
              "--format", "xml"]
    )
    assert result.exit_code == 2


def test_cancelled_run_prints_partial_report(monkeypatch, tmp_path, ruleset_file, capsys):
    from stylegate.config import settings
    from stylegate.core.rule_engine import RuleEngine

    original = RuleEngine.check_file

    def check_file(self, path, content):
        if path.endswith("slow.py"):
            time.sleep(1.0)
        return original(self, path, content)

    monkeypatch.setattr(RuleEngine, "check_file", check_file)
    monkeypatch.setattr(settings, "run_timeout_seconds", 0.3)
    (tmp_path / "fast.py").write_text("x = 1 \n", encoding="utf-8")
    (tmp_path / "slow.py").write_text("y = 2 \n", encoding="utf-8")

    assert check([str(tmp_path)], str(ruleset_file(WHITESPACE_ONLY))) == EXIT_FATAL
    out = capsys.readouterr().out
    assert "fast.py:1: warning [trailing-whitespace]" in out
    assert "Status: cancelled (1 files, 1 violations)" in out
