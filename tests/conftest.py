"""
Test fixtures shared across all StyleGate tests.
"""

import pytest

from stylegate.config import BUNDLED_RULESET_PATH
from stylegate.core.rule_engine import RuleEngine
from stylegate.core.ruleset_loader import load_ruleset, parse_ruleset
from stylegate.models.rule_params import CHECK_CATALOG


def build_ruleset(*entries, recovery_budget=2):
    """Ruleset from rule ids or rule dicts; categories filled from the catalog."""
    rules = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {"id": entry}
        entry = dict(entry)
        check = entry.get("check", entry["id"])
        entry.setdefault("category", CHECK_CATALOG[check].category.value)
        rules.append(entry)
    return parse_ruleset({"parser": {"recovery_budget": recovery_budget}, "rules": rules})


@pytest.fixture
def make_ruleset():
    return build_ruleset


@pytest.fixture
def run_rules():
    """Check one file's content against the given rules."""
    def _run(path, content, *entries, recovery_budget=2):
        ruleset = build_ruleset(*entries, recovery_budget=recovery_budget)
        return RuleEngine(ruleset).check_file(path, content)
    return _run


@pytest.fixture
def default_ruleset():
    return load_ruleset(BUNDLED_RULESET_PATH)


@pytest.fixture
def clean_python_code():
    """Python source with no violations under the bundled ruleset."""
    return '''"""Geometry helpers."""

import math

def area(radius: float) -> float:
    """Area of a circle."""
    return math.pi * radius ** 2

def is_unit(radius: float) -> bool:
    return radius == 1
'''


@pytest.fixture
def messy_python_code():
    """Python source breaking spacing, comment, naming and type rules."""
    return '''import os
def getValue(path):
    # read the value
    value = os.path.basename(path)

    return value


def valid(x: int) -> bool:
    return x > 0
'''


@pytest.fixture
def clean_component_code():
    """TSX source with no violations under the bundled ruleset."""
    return '''import React from "react";

export const Badge = ({ label }: { label: string }): JSX.Element => {
  return <span className="badge">{label}</span>;
};

export function useToggle(initial: boolean): [boolean, () => void] {
  return [initial, () => {}];
}
'''


@pytest.fixture
def prose_document():
    """Markdown with a tagged python fence and an untagged fence."""
    return '''# Doc

Some introduction.

```python
def Bad() -> None:
    pass
```

```
plain text
```
'''


@pytest.fixture
def ruleset_file(tmp_path):
    """Write a YAML ruleset and return its path."""
    def _write(text, name="stylegate.yml"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
