"""
Type Annotations Rule — Every parameter and return position must be typed.

Each untyped position is its own violation, anchored at that position's
line. Receivers (self/cls/this) are implicit; signatures typed as a whole
through their binding (`const Button: FC<Props> = ...`) are exempt, as are
dialects without type syntax.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import TypeAnnotationParams
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "type-annotations"
CATEGORY = RuleCategory.TYPE
LANGUAGES = frozenset({LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP})
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: TypeAnnotationParams = rule.params
    if model.dialect in params.exempt_dialects:
        return []

    violations: list[Violation] = []
    for sig in model.signatures:
        if sig.contextually_typed:
            continue
        for param in sig.parameters:
            if param.implicit or param.annotation is not None:
                continue
            violations.append(
                make_violation(
                    model,
                    rule,
                    param.line,
                    f"Parameter '{param.name}' of '{sig.name}' has no type annotation",
                )
            )
        if sig.return_annotation is None and sig.name not in params.exempt_returns:
            violations.append(
                make_violation(
                    model, rule, sig.return_line, f"Return type of '{sig.name}' is not annotated"
                )
            )
    return violations
