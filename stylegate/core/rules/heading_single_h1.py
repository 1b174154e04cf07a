"""
Single H1 Rule — A document opens with its only level-1 heading.
"""

from __future__ import annotations

from stylegate.core.rules.common import content_start, make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "heading-single-h1"
CATEGORY = RuleCategory.STRUCTURAL
LANGUAGES = frozenset({LanguageKind.PROSE_MARKUP})
FILE_SCOPE = True


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    first = content_start(model)
    if first is None:
        return []

    h1s = [h for h in model.headings if h.depth == 1]
    violations: list[Violation] = []
    if not h1s:
        violations.append(make_violation(model, rule, first, "Document has no level-1 heading"))
        return violations
    if h1s[0].line != first:
        violations.append(
            make_violation(model, rule, first, "Document must start with a level-1 heading")
        )
    for extra in h1s[1:]:
        violations.append(
            make_violation(
                model, rule, extra.line,
                f"Additional level-1 heading '{extra.text}' (first at line {h1s[0].line})",
            )
        )
    return violations
