"""
Fence Language Rule — Every fenced block declares its language.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "fence-language"
CATEGORY = RuleCategory.STRUCTURAL
LANGUAGES = frozenset({LanguageKind.PROSE_MARKUP})
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    return [
        make_violation(model, rule, fragment.start_line, "Fenced block has no language tag")
        for fragment in model.fragments
        if not fragment.tag.strip()
    ]
