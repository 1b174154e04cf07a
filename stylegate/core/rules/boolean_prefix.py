"""
Boolean Prefix Rule — Boolean-returning functions need an interrogative name.

The return domain comes from the declared return type only. A function
without one is left to the type-annotations rule, which reports the
missing return position.
"""

from __future__ import annotations

from stylegate.core.naming import has_prefix
from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import BooleanPrefixParams
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "boolean-prefix"
CATEGORY = RuleCategory.NAMING
LANGUAGES = frozenset({LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP})
FILE_SCOPE = False


def returns_boolean(annotation: str | None, boolean_types: tuple[str, ...]) -> bool:
    if annotation is None:
        return False
    return annotation.strip() in boolean_types


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: BooleanPrefixParams = rule.params
    violations: list[Violation] = []
    for sig in model.signatures:
        if sig.name.startswith("__") and sig.name.endswith("__"):
            continue
        if not returns_boolean(sig.return_annotation, params.boolean_types):
            continue
        if has_prefix(sig.name, params.prefixes):
            continue
        violations.append(
            make_violation(
                model,
                rule,
                sig.line,
                f"'{sig.name}' returns {sig.return_annotation.strip()} but does not start with "
                f"one of: {', '.join(params.prefixes)}",
            )
        )
    return violations
