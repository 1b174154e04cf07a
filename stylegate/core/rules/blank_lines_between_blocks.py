"""
Blank Lines Between Blocks Rule — Exact spacing between sibling blocks.

Two blocks are siblings when they share the same innermost enclosing block
(or none). Only the run that separates them directly is measured; blocks
with other code in between are not compared.
"""

from __future__ import annotations

from stylegate.core.rules.common import code_blocks, make_violation, parent_of, plural
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import BetweenBlocksParams
from stylegate.models.structure_models import LanguageKind, LineKind, StructuralModel

CHECK_ID = "blank-lines-between-blocks"
CATEGORY = RuleCategory.SPACING
LANGUAGES = frozenset({LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP})
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: BetweenBlocksParams = rule.params
    blocks = code_blocks(model)
    siblings: dict[int | None, list] = {}
    for block in blocks:
        parent = parent_of(block, blocks)
        key = parent.start_line if parent else None
        siblings.setdefault(key, []).append(block)

    violations: list[Violation] = []
    for group in siblings.values():
        group.sort(key=lambda b: b.start_line)
        for previous, current in zip(group, group[1:]):
            if current.first_line <= previous.end_line:
                continue
            gap = range(previous.end_line + 1, current.first_line)
            if any(model.line(i).kind != LineKind.BLANK for i in gap):
                continue
            expected = params.expected_for(current.depth)
            found = len(gap)
            if found == expected:
                continue
            if found:
                start, end = gap.start, gap.stop - 1
            else:
                start = end = current.first_line
            violations.append(
                make_violation(
                    model,
                    rule,
                    start,
                    f"Expected {plural(expected, 'blank line')} between "
                    f"'{previous.declared_name}' and '{current.declared_name}', found {found}",
                    line_end=end,
                )
            )
    return violations
