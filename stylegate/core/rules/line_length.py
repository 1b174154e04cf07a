"""
Line Length Rule — Per-line character count against target and hard widths.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation, own_lines
from stylegate.models.rule_models import Rule, RuleCategory, Severity, Violation
from stylegate.models.rule_params import ThresholdParams
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "line-length"
CATEGORY = RuleCategory.LENGTH
LANGUAGES = frozenset(LanguageKind)
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: ThresholdParams = rule.params
    violations: list[Violation] = []
    for line in own_lines(model):
        if params.target is not None and line.raw_length > params.target:
            violations.append(
                make_violation(
                    model, rule, line.index,
                    f"Line is {line.raw_length} characters, exceeding the target of {params.target}",
                    severity=Severity.WARNING,
                )
            )
        if params.hard is not None and line.raw_length > params.hard:
            violations.append(
                make_violation(
                    model, rule, line.index,
                    f"Line is {line.raw_length} characters, exceeding the hard limit of {params.hard}",
                    severity=Severity.ERROR,
                )
            )
    return violations
