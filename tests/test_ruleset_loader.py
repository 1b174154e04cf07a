"""
Tests for the ruleset loader — YAML parsing, validation and path resolution.
"""

import pytest

from stylegate.config import BUNDLED_RULESET_PATH
from stylegate.core.exceptions import ConfigError
from stylegate.core.ruleset_loader import (
    DEFAULT_INCLUDE,
    load_configured_ruleset,
    load_ruleset,
    load_ruleset_text,
    parse_ruleset,
)
from stylegate.models.rule_models import RuleCategory, Severity
from stylegate.models.rule_params import CHECK_CATALOG, ThresholdParams


def test_bundled_ruleset_loads_every_check():
    ruleset = load_ruleset(BUNDLED_RULESET_PATH)
    assert {rule.id for rule in ruleset.rules} == set(CHECK_CATALOG)
    assert ruleset.recovery_budget == 2


def test_bundled_ruleset_params_are_typed():
    ruleset = load_ruleset(BUNDLED_RULESET_PATH)
    file_length = ruleset.get("file-length")
    assert isinstance(file_length.params, ThresholdParams)
    assert (file_length.params.target, file_length.params.hard) == (200, 300)
    assert ruleset.get("naming-case").severity == Severity.ERROR


def test_enabled_rules_sorted_by_id():
    ruleset = load_ruleset_text(
        """
rules:
  - {id: trailing-whitespace, category: whitespace}
  - {id: line-length, category: length, params: {target: 80}}
  - {id: file-length, category: length, enabled: false, params: {hard: 10}}
"""
    )
    assert [rule.id for rule in ruleset.enabled_rules()] == ["line-length", "trailing-whitespace"]


def test_custom_id_with_explicit_check():
    ruleset = parse_ruleset(
        {"rules": [{"id": "wide-lines", "check": "line-length", "category": "length",
                    "params": {"target": 80}}]}
    )
    rule = ruleset.get("wide-lines")
    assert rule.check == "line-length"
    assert rule.category == RuleCategory.LENGTH


def test_empty_document_uses_default_file_patterns():
    ruleset = load_ruleset_text("")
    assert ruleset.rules == ()
    assert ruleset.include == DEFAULT_INCLUDE


def test_duplicate_rule_id_rejected():
    with pytest.raises(ConfigError, match="Duplicate rule id 'line-length'"):
        parse_ruleset({"rules": [
            {"id": "line-length", "category": "length", "params": {"target": 80}},
            {"id": "line-length", "category": "length", "params": {"target": 90}},
        ]})


def test_unknown_category_rejected():
    with pytest.raises(ConfigError, match="unknown category 'layout'"):
        parse_ruleset({"rules": [{"id": "trailing-whitespace", "category": "layout"}]})


def test_unknown_check_rejected():
    with pytest.raises(ConfigError, match="unknown check 'max-nesting'"):
        parse_ruleset({"rules": [{"id": "max-nesting", "category": "structural"}]})


def test_category_must_match_check():
    with pytest.raises(ConfigError, match="belongs to category 'length'"):
        parse_ruleset({"rules": [{"id": "line-length", "category": "naming",
                                  "params": {"target": 80}}]})


@pytest.mark.parametrize("rule_id", ["parse-error", "io-error"])
def test_reserved_ids_rejected(rule_id):
    with pytest.raises(ConfigError, match="reserved"):
        parse_ruleset({"rules": [{"id": rule_id, "check": "trailing-whitespace",
                                  "category": "whitespace"}]})


def test_internal_category_rejected():
    with pytest.raises(ConfigError, match="reserved"):
        parse_ruleset({"rules": [{"id": "trailing-whitespace", "category": "internal"}]})


@pytest.mark.parametrize(
    "params",
    [
        {"target": 300, "hard": 200},
        {"target": -1},
        {},
        {"target": 80, "width": 100},
    ],
)
def test_invalid_threshold_params_rejected(params):
    with pytest.raises(ConfigError, match="Rule 'line-length' params"):
        parse_ruleset({"rules": [{"id": "line-length", "category": "length", "params": params}]})


def test_invalid_severity_rejected():
    with pytest.raises(ConfigError, match="Invalid ruleset"):
        parse_ruleset({"rules": [{"id": "trailing-whitespace", "category": "whitespace",
                                  "severity": "fatal"}]})


def test_unknown_top_level_key_rejected():
    with pytest.raises(ConfigError, match="Invalid ruleset"):
        parse_ruleset({"ruels": []})


def test_negative_recovery_budget_rejected():
    with pytest.raises(ConfigError):
        parse_ruleset({"parser": {"recovery_budget": -1}})


def test_invalid_yaml_rejected():
    with pytest.raises(ConfigError, match="not valid YAML"):
        load_ruleset_text("rules: [")


def test_non_mapping_document_rejected():
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_ruleset_text("- a\n- b\n")


def test_missing_explicit_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError, match="does not exist"):
        load_configured_ruleset(str(tmp_path / "missing.yml"))


def test_environment_variable_names_ruleset(monkeypatch, ruleset_file):
    path = ruleset_file("rules:\n  - {id: trailing-whitespace, category: whitespace}\n")
    monkeypatch.setenv("STYLEGATE_CONFIG", str(path))
    ruleset = load_configured_ruleset()
    assert [rule.id for rule in ruleset.rules] == ["trailing-whitespace"]


def test_override_wins_over_environment(monkeypatch, ruleset_file):
    env_path = ruleset_file("rules:\n  - {id: trailing-whitespace, category: whitespace}\n",
                            name="env.yml")
    override = ruleset_file("rules:\n  - {id: fence-language, category: structural}\n",
                            name="override.yml")
    monkeypatch.setenv("STYLEGATE_CONFIG", str(env_path))
    ruleset = load_configured_ruleset(str(override))
    assert [rule.id for rule in ruleset.rules] == ["fence-language"]


def test_falls_back_to_bundled_ruleset(monkeypatch, tmp_path):
    monkeypatch.delenv("STYLEGATE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    ruleset = load_configured_ruleset()
    assert len(ruleset) == len(CHECK_CATALOG)


def test_working_directory_default_file(monkeypatch, tmp_path):
    monkeypatch.delenv("STYLEGATE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "stylegate.yml").write_text(
        "rules:\n  - {id: list-indent, category: structural}\n", encoding="utf-8"
    )
    ruleset = load_configured_ruleset()
    assert [rule.id for rule in ruleset.rules] == ["list-indent"]
