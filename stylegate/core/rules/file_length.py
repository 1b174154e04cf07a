"""
File Length Rule — Line count against target (warning) and hard (error) limits.

A file of exactly the limit is compliant; the violation covers the lines
past the limit.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Severity, Violation
from stylegate.models.rule_params import ThresholdParams
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "file-length"
CATEGORY = RuleCategory.LENGTH
LANGUAGES = frozenset(
    {LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP, LanguageKind.PROSE_MARKUP}
)
FILE_SCOPE = True


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: ThresholdParams = rule.params
    total = model.total_lines
    violations: list[Violation] = []

    for limit, severity, label in (
        (params.target, Severity.WARNING, "target"),
        (params.hard, Severity.ERROR, "hard limit"),
    ):
        if limit is None or total <= limit:
            continue
        violations.append(
            make_violation(
                model,
                rule,
                limit + 1,
                f"File has {total} lines, exceeding the {label} of {limit}",
                line_end=total,
                severity=severity,
            )
        )
    return violations
