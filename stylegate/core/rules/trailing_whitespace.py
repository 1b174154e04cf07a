"""
Trailing Whitespace Rule — Spaces or tabs at the end of a line.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation, own_lines
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "trailing-whitespace"
CATEGORY = RuleCategory.WHITESPACE
LANGUAGES = frozenset(LanguageKind)
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    return [
        make_violation(model, rule, line.index, "Trailing whitespace")
        for line in own_lines(model)
        if line.text != line.text.rstrip(" \t")
    ]
