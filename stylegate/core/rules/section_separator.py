"""
Section Separator Rule — Major sections are preceded by a horizontal rule.

Every heading at or above `max_depth`, except the document's first
heading, needs a thematic break as the nearest non-blank line above it.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import SectionSeparatorParams
from stylegate.models.structure_models import LanguageKind, LineKind, StructuralModel

CHECK_ID = "section-separator"
CATEGORY = RuleCategory.STRUCTURAL
LANGUAGES = frozenset({LanguageKind.PROSE_MARKUP})
FILE_SCOPE = False


def _previous_content_line(model: StructuralModel, line: int) -> int | None:
    for index in range(line - 1, 0, -1):
        if model.line(index).kind != LineKind.BLANK:
            return index
    return None


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: SectionSeparatorParams = rule.params
    breaks = set(model.thematic_breaks)
    violations: list[Violation] = []
    for heading in model.headings[1:]:
        if heading.depth > params.max_depth:
            continue
        if _previous_content_line(model, heading.line) in breaks:
            continue
        violations.append(
            make_violation(
                model, rule, heading.line,
                f"Section '{heading.text}' is not preceded by a horizontal rule",
            )
        )
    return violations
