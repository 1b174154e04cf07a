"""
Behavior Comments Rule — Flags comments that narrate what code does.

Comments documenting a block header (directly above it) are exempt, as
are comments whose text starts with one of the allowed markers: to-do
notes, shebangs, linter and type-checker pragmas.
"""

from __future__ import annotations

import re

from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import BehaviorCommentParams
from stylegate.models.structure_models import LanguageKind, LineKind, StructuralModel

CHECK_ID = "behavior-comments"
CATEGORY = RuleCategory.COMMENT
LANGUAGES = frozenset({LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP})
FILE_SCOPE = False

_COMMENT_LEAD = re.compile(r"^\s*(?:#|//+|/\*+|\*+/?)\s*")


def comment_body(text: str) -> str:
    body = _COMMENT_LEAD.sub("", text, count=1)
    if body.endswith("*/"):
        body = body[:-2]
    return body.strip()


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: BehaviorCommentParams = rule.params
    violations: list[Violation] = []
    for line in model.lines:
        if line.kind != LineKind.COMMENT or line.doc_adjacent:
            continue
        body = comment_body(line.text)
        # Bare comment markers (a lone "#" or "*/") carry no text
        if not body or body.startswith(tuple(params.allowed_markers)):
            continue
        violations.append(
            make_violation(model, rule, line.index, f"Comment explains behavior: '{body[:60]}'")
        )
    return violations
