"""
Naming Case Rule — Each identifier's case must match the pattern for its role.
"""

from __future__ import annotations

from stylegate.core.naming import conforms
from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import NamingCaseParams
from stylegate.models.structure_models import LanguageKind, StructuralModel

CHECK_ID = "naming-case"
CATEGORY = RuleCategory.NAMING
LANGUAGES = frozenset({LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP})
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: NamingCaseParams = rule.params
    required_by_role = params.patterns.get(model.language, {})
    violations: list[Violation] = []
    for ident in model.identifiers:
        required = required_by_role.get(ident.role)
        if required is None or conforms(ident.name, required):
            continue
        violations.append(
            make_violation(
                model,
                rule,
                ident.declared_at_line,
                f"{ident.role.value.replace('_', ' ').capitalize()} '{ident.name}' should be "
                f"{required.value}, found {ident.case_pattern.value}",
            )
        )
    return violations
