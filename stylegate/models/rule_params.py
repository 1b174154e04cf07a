"""
Rule Parameter Models — Per-check parameter schemas and the check catalog.

The catalog is what the ruleset loader validates a configuration against:
every check name maps to its category and the pydantic model its
`params` mapping must satisfy. Out-of-domain values fail validation.
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic import Field, model_validator

from stylegate.models.rule_models import RuleCategory, RuleParams
from stylegate.models.structure_models import CasePattern, IdentifierRole, LanguageKind


class ThresholdParams(RuleParams):
    """Target (warning) and hard (error) limits; exactly-at-limit is compliant."""

    target: int | None = Field(default=None, ge=0)
    hard: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _consistent(self) -> ThresholdParams:
        if self.target is None and self.hard is None:
            raise ValueError("at least one of 'target' or 'hard' is required")
        if self.target is not None and self.hard is not None and self.target > self.hard:
            raise ValueError(f"target ({self.target}) exceeds hard ({self.hard})")
        return self


class BetweenBlocksParams(RuleParams):
    exact: int = Field(default=1, ge=0, description="Blank lines between top-level blocks")
    nested_exact: int | None = Field(
        default=None, ge=0, description="Blank lines between nested sibling blocks"
    )

    def expected_for(self, depth: int) -> int:
        if depth > 0 and self.nested_exact is not None:
            return self.nested_exact
        return self.exact


class InsideBlockParams(RuleParams):
    """Blank lines inside a function body.

    A return statement is complex when it spans at least
    `complex_return_min_lines` lines or, with `complex_return_conditional`,
    contains a conditional expression or boolean operator.
    """

    complex_return_min_lines: int = Field(default=2, ge=2)
    complex_return_conditional: bool = True
    max_before_complex_return: int = Field(default=1, ge=0)


class AfterImportsParams(RuleParams):
    exact: int = Field(default=1, ge=0)


class BehaviorCommentParams(RuleParams):
    allowed_markers: tuple[str, ...] = (
        "TODO",
        "FIXME",
        "!",
        "noqa",
        "type:",
        "pragma",
        "eslint-",
        "@ts-",
        "prettier-ignore",
        "-*-",
    )


DEFAULT_CASE_PATTERNS: dict[LanguageKind, dict[IdentifierRole, CasePattern]] = {
    LanguageKind.INDENT_BLOCK: {
        IdentifierRole.FUNCTION: CasePattern.SNAKE_CASE,
        IdentifierRole.VARIABLE: CasePattern.SNAKE_CASE,
        IdentifierRole.CONSTANT: CasePattern.SCREAMING_SNAKE_CASE,
        IdentifierRole.TYPE_ALIAS: CasePattern.PASCAL_CASE,
    },
    LanguageKind.COMPONENT_MARKUP: {
        IdentifierRole.FUNCTION: CasePattern.CAMEL_CASE,
        IdentifierRole.VARIABLE: CasePattern.CAMEL_CASE,
        IdentifierRole.CONSTANT: CasePattern.SCREAMING_SNAKE_CASE,
        IdentifierRole.TYPE_ALIAS: CasePattern.PASCAL_CASE,
        IdentifierRole.COMPONENT: CasePattern.PASCAL_CASE,
        IdentifierRole.HOOK: CasePattern.CAMEL_CASE,
    },
}


class NamingCaseParams(RuleParams):
    patterns: dict[LanguageKind, dict[IdentifierRole, CasePattern]] = Field(
        default_factory=lambda: {k: dict(v) for k, v in DEFAULT_CASE_PATTERNS.items()}
    )


class BooleanPrefixParams(RuleParams):
    prefixes: tuple[str, ...] = Field(
        default=("is", "has", "can", "should", "will", "was", "does"), min_length=1
    )
    boolean_types: tuple[str, ...] = ("bool", "boolean")


class TypeAnnotationParams(RuleParams):
    exempt_dialects: tuple[str, ...] = ("js", "jsx", "mjs", "cjs", "javascript")
    exempt_returns: tuple[str, ...] = ("__init__", "constructor")


class HeadingDepthParams(RuleParams):
    max_depth: int = Field(default=3, ge=1, le=6)


class SectionSeparatorParams(RuleParams):
    max_depth: int = Field(
        default=2, ge=1, le=6, description="Headings at or above this depth need a separator"
    )


class ListIndentParams(RuleParams):
    max_increment: int = Field(default=4, ge=1)


class CheckSpec(NamedTuple):
    category: RuleCategory
    params_model: type[RuleParams]


CHECK_CATALOG: dict[str, CheckSpec] = {
    "file-length": CheckSpec(RuleCategory.LENGTH, ThresholdParams),
    "line-length": CheckSpec(RuleCategory.LENGTH, ThresholdParams),
    "trailing-whitespace": CheckSpec(RuleCategory.WHITESPACE, RuleParams),
    "blank-lines-between-blocks": CheckSpec(RuleCategory.SPACING, BetweenBlocksParams),
    "blank-lines-inside-block": CheckSpec(RuleCategory.SPACING, InsideBlockParams),
    "blank-lines-after-imports": CheckSpec(RuleCategory.SPACING, AfterImportsParams),
    "behavior-comments": CheckSpec(RuleCategory.COMMENT, BehaviorCommentParams),
    "naming-case": CheckSpec(RuleCategory.NAMING, NamingCaseParams),
    "boolean-prefix": CheckSpec(RuleCategory.NAMING, BooleanPrefixParams),
    "type-annotations": CheckSpec(RuleCategory.TYPE, TypeAnnotationParams),
    "heading-single-h1": CheckSpec(RuleCategory.STRUCTURAL, RuleParams),
    "heading-max-depth": CheckSpec(RuleCategory.STRUCTURAL, HeadingDepthParams),
    "section-separator": CheckSpec(RuleCategory.STRUCTURAL, SectionSeparatorParams),
    "fence-language": CheckSpec(RuleCategory.STRUCTURAL, RuleParams),
    "list-indent": CheckSpec(RuleCategory.STRUCTURAL, ListIndentParams),
}
