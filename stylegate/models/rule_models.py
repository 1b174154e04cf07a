"""
Rule Data Models — Rules, rulesets and violations.

A Ruleset is loaded once per run and never mutated. Violations are
immutable once emitted so they can be sorted, hashed and coalesced.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, model_validator


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class RuleCategory(str, Enum):
    LENGTH = "length"
    WHITESPACE = "whitespace"
    SPACING = "spacing"
    COMMENT = "comment"
    NAMING = "naming"
    TYPE = "type"
    STRUCTURAL = "structural"
    # Reserved for engine-generated diagnostics, never configurable
    INTERNAL = "internal"


# Rule ids the engine emits on its own behalf
PARSE_ERROR_RULE_ID = "parse-error"
IO_ERROR_RULE_ID = "io-error"
RESERVED_RULE_IDS = frozenset({PARSE_ERROR_RULE_ID, IO_ERROR_RULE_ID})


class RuleParams(BaseModel):
    """Base for per-check parameter models. Unknown keys are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Rule(BaseModel):
    """A single configured rule."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique RuleId, e.g. 'line-length'")
    check: str = Field(..., description="Evaluator that implements this rule")
    category: RuleCategory
    severity: Severity = Severity.WARNING
    enabled: bool = True
    params: SerializeAsAny[RuleParams] = Field(default_factory=RuleParams)


class Ruleset(BaseModel):
    """The frozen, validated collection of rules for a run."""

    model_config = ConfigDict(frozen=True)

    rules: tuple[Rule, ...] = ()
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    recovery_budget: int = Field(default=2, ge=0)

    @model_validator(mode="after")
    def _unique_ids(self) -> Ruleset:
        seen: set[str] = set()
        for rule in self.rules:
            if rule.id in seen:
                raise ValueError(f"Duplicate rule id '{rule.id}'")
            seen.add(rule.id)
        return self

    def get(self, rule_id: str) -> Rule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def enabled_rules(self) -> list[Rule]:
        """Enabled rules in RuleId order."""
        return sorted((r for r in self.rules if r.enabled), key=lambda r: r.id)

    def __len__(self) -> int:
        return len(self.rules)


class Violation(BaseModel):
    """One reported instance of a rule being broken."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., description="File path the violation belongs to")
    line_start: int = Field(..., ge=1)
    line_end: int = Field(..., ge=1)
    rule_id: str
    category: RuleCategory
    severity: Severity
    message: str

    @model_validator(mode="after")
    def _ordered_range(self) -> Violation:
        if self.line_end < self.line_start:
            raise ValueError(
                f"line_end ({self.line_end}) precedes line_start ({self.line_start})"
            )
        return self

    @property
    def identity(self) -> tuple[str, int, int, str, str]:
        """Key under which exact duplicates are coalesced."""
        return (self.file, self.line_start, self.line_end, self.rule_id, self.message)

    @property
    def sort_key(self) -> tuple[str, int, str, int, str]:
        return (self.file, self.line_start, self.rule_id, self.line_end, self.message)

    def shifted(self, offset: int) -> Violation:
        """Copy of this violation moved by `offset` lines."""
        return self.model_copy(
            update={
                "line_start": self.line_start + offset,
                "line_end": self.line_end + offset,
            }
        )
