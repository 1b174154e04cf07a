"""
Blank Lines Inside Block Rule — No blank runs inside function bodies.

The one exception is the run directly before a complex return statement:
one spanning at least `complex_return_min_lines` lines, or (when
`complex_return_conditional` is set) one containing a conditional
expression or boolean operator. That run may hold up to
`max_before_complex_return` blank lines.

A run that separates two sibling blocks is left to the between-blocks rule;
runs between a nested block and ordinary statements are checked here.
"""

from __future__ import annotations

from stylegate.core.rules.common import code_blocks, make_violation, parent_of, plural
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import InsideBlockParams
from stylegate.models.structure_models import (
    BlockKind,
    BlockSpan,
    LanguageKind,
    StructuralModel,
    TerminalStatement,
)

CHECK_ID = "blank-lines-inside-block"
CATEGORY = RuleCategory.SPACING
LANGUAGES = frozenset({LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP})
FILE_SCOPE = False

_BODY_KINDS = (BlockKind.FUNCTION, BlockKind.COMPONENT)


def _innermost(blocks: list[BlockSpan], first: int, last: int) -> BlockSpan | None:
    enclosing = [b for b in blocks if b.start_line < first and last < b.end_line]
    if not enclosing:
        return None
    return max(enclosing, key=lambda b: b.start_line)


def _sibling_gaps(blocks: list[BlockSpan]) -> set[tuple[int, int]]:
    """(last line, next first line) of every pair of consecutive sibling blocks."""
    siblings: dict[int | None, list[BlockSpan]] = {}
    for block in blocks:
        parent = parent_of(block, blocks)
        siblings.setdefault(parent.start_line if parent else None, []).append(block)
    gaps: set[tuple[int, int]] = set()
    for group in siblings.values():
        group.sort(key=lambda b: b.start_line)
        gaps.update((prev.end_line, cur.first_line) for prev, cur in zip(group, group[1:]))
    return gaps


def is_complex(terminal: TerminalStatement, params: InsideBlockParams) -> bool:
    if terminal.line_count >= params.complex_return_min_lines:
        return True
    return params.complex_return_conditional and terminal.has_conditional


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: InsideBlockParams = rule.params
    blocks = code_blocks(model)
    between_siblings = _sibling_gaps(blocks)
    terminals = {t.line: t for t in model.terminals}

    violations: list[Violation] = []
    for first, last in model.blank_runs():
        owner = _innermost(blocks, first, last)
        if owner is None or owner.kind not in _BODY_KINDS:
            continue
        if (first - 1, last + 1) in between_siblings:
            continue
        found = last - first + 1
        terminal = terminals.get(last + 1)
        if terminal is not None and is_complex(terminal, params):
            if found <= params.max_before_complex_return:
                continue
            message = (
                f"{plural(found, 'blank line')} before the return in '{owner.declared_name}', "
                f"at most {params.max_before_complex_return} allowed"
            )
        else:
            message = f"{plural(found, 'blank line')} inside '{owner.declared_name}'"
        violations.append(make_violation(model, rule, first, message, line_end=last))
    return violations
