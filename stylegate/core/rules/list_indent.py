"""
List Indent Rule — Nested list items step in by at most `max_increment` columns.

Items are compared with the previous item of the same list; a heading,
fence or unindented paragraph line ends the list.
"""

from __future__ import annotations

from stylegate.core.rules.common import make_violation
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import ListIndentParams
from stylegate.models.structure_models import LanguageKind, LineKind, StructuralModel

CHECK_ID = "list-indent"
CATEGORY = RuleCategory.STRUCTURAL
LANGUAGES = frozenset({LanguageKind.PROSE_MARKUP})
FILE_SCOPE = False


def _breaks_list(model: StructuralModel, after: int, before: int, items: set[int]) -> bool:
    for index in range(after + 1, before):
        line = model.line(index)
        if line.kind in (LineKind.HEADING, LineKind.FENCE_BOUNDARY):
            return True
        if line.kind == LineKind.CODE and line.indent_depth == 0 and index not in items:
            return True
    return False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: ListIndentParams = rule.params
    item_lines = {item.line for item in model.list_items}
    violations: list[Violation] = []
    previous = None
    for item in model.list_items:
        if previous is not None and _breaks_list(model, previous.line, item.line, item_lines):
            previous = None
        base = previous.indent if previous is not None else 0
        step = item.indent - base
        if step > params.max_increment:
            violations.append(
                make_violation(
                    model, rule, item.line,
                    f"List item indented {step} columns past the previous item "
                    f"(maximum {params.max_increment})",
                )
            )
        previous = item
    return violations
