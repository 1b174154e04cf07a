"""
Heading Depth Rule — No heading deeper than `max_depth`.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import HeadingDepthParams
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "heading-max-depth"
CATEGORY = RuleCategory.STRUCTURAL
LANGUAGES = frozenset({LanguageKind.PROSE_MARKUP})
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: HeadingDepthParams = rule.params
    return [
        make_violation(
            model, rule, heading.line,
            f"Heading depth {heading.depth} exceeds the maximum of {params.max_depth}",
        )
        for heading in model.headings
        if heading.depth > params.max_depth
    ]
