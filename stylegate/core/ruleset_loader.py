"""
Ruleset Loader — Parse a YAML ruleset document into a frozen Ruleset.

Validation is all-or-nothing: any problem raises ConfigError and no partial
ruleset is ever returned.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from stylegate.config import resolve_config_path
from stylegate.core.exceptions import ConfigError
from stylegate.models.rule_models import RESERVED_RULE_IDS, Rule, RuleCategory, Ruleset, Severity
from stylegate.models.rule_params import CHECK_CATALOG

logger = logging.getLogger("stylegate.loader")

DEFAULT_INCLUDE = (
    "**/*.py",
    "**/*.pyi",
    "**/*.js",
    "**/*.jsx",
    "**/*.ts",
    "**/*.tsx",
    "**/*.md",
)
DEFAULT_EXCLUDE = (
    "**/.git/**",
    "**/node_modules/**",
    "**/__pycache__/**",
    "**/.venv/**",
    "**/dist/**",
    "**/build/**",
)


class _FilesSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    include: list[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE))


class _ParserSection(BaseModel):
    model_config = ConfigDict(extra="forbid")

    recovery_budget: int = Field(default=2, ge=0)


class _RuleEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    category: str
    check: str | None = None
    severity: Severity = Severity.WARNING
    enabled: bool = True
    params: dict[str, Any] = Field(default_factory=dict)


class _RulesetDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = 1
    files: _FilesSection = Field(default_factory=_FilesSection)
    parser: _ParserSection = Field(default_factory=_ParserSection)
    rules: list[_RuleEntry] = Field(default_factory=list)


def _format_validation_error(prefix: str, exc: ValidationError) -> str:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
        for err in exc.errors()
    )
    return f"{prefix}: {details}"


def _build_rule(entry: _RuleEntry) -> Rule:
    if entry.id in RESERVED_RULE_IDS:
        raise ConfigError(f"Rule id '{entry.id}' is reserved for engine diagnostics")

    try:
        category = RuleCategory(entry.category)
    except ValueError:
        raise ConfigError(f"Rule '{entry.id}': unknown category '{entry.category}'") from None
    if category == RuleCategory.INTERNAL:
        raise ConfigError(f"Rule '{entry.id}': category 'internal' is reserved")

    check = entry.check or entry.id
    spec = CHECK_CATALOG.get(check)
    if spec is None:
        raise ConfigError(f"Rule '{entry.id}': unknown check '{check}'")
    if spec.category != category:
        raise ConfigError(
            f"Rule '{entry.id}': check '{check}' belongs to category "
            f"'{spec.category.value}', not '{category.value}'"
        )

    try:
        params = spec.params_model.model_validate(entry.params)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(f"Rule '{entry.id}' params", e)) from None

    return Rule(
        id=entry.id,
        check=check,
        category=category,
        severity=entry.severity,
        enabled=entry.enabled,
        params=params,
    )


def parse_ruleset(document: Any) -> Ruleset:
    """
    Validate an already-decoded ruleset document.

    Raises:
        ConfigError: on any structural or semantic problem.
    """
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigError("Ruleset document must be a mapping")

    try:
        parsed = _RulesetDocument.model_validate(document)
    except ValidationError as e:
        raise ConfigError(_format_validation_error("Invalid ruleset", e)) from None

    seen: set[str] = set()
    rules: list[Rule] = []
    for entry in parsed.rules:
        if entry.id in seen:
            raise ConfigError(f"Duplicate rule id '{entry.id}'")
        seen.add(entry.id)
        rules.append(_build_rule(entry))

    return Ruleset(
        rules=tuple(rules),
        include=tuple(parsed.files.include),
        exclude=tuple(parsed.files.exclude),
        recovery_budget=parsed.parser.recovery_budget,
    )


def load_ruleset_text(text: str) -> Ruleset:
    """Parse a YAML ruleset from a string."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Ruleset is not valid YAML: {e}") from None
    return parse_ruleset(document)


def load_ruleset(path: str | Path) -> Ruleset:
    """Load and validate the ruleset at `path`."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read ruleset '{path}': {e}") from None

    ruleset = load_ruleset_text(text)
    logger.info(
        f"Loaded ruleset {path} ({len(ruleset)} rules, "
        f"{len(ruleset.enabled_rules())} enabled)"
    )
    return ruleset


def load_configured_ruleset(override: str | None = None) -> Ruleset:
    """Resolve the configuration path (override → env → default) and load it."""
    path, explicit = resolve_config_path(override)
    if explicit and not path.is_file():
        raise ConfigError(f"Ruleset file '{path}' does not exist")
    return load_ruleset(path)
