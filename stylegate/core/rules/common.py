"""
Helpers shared by the rule evaluators.
"""

from __future__ import annotations

from collections.abc import Iterator

from stylegate.models.rule_models import Rule, Severity, Violation
from stylegate.models.structure_models import (
    BlockKind,
    BlockSpan,
    LineKind,
    LogicalLine,
    StructuralModel,
)


def make_violation(
    model: StructuralModel,
    rule: Rule,
    line_start: int,
    message: str,
    *,
    line_end: int | None = None,
    severity: Severity | None = None,
) -> Violation:
    return Violation(
        file=model.file_path,
        line_start=line_start,
        line_end=line_end if line_end is not None else line_start,
        rule_id=rule.id,
        category=rule.category,
        severity=severity or rule.severity,
        message=message,
    )


def fenced_interior(model: StructuralModel) -> set[int]:
    """Lines inside fences; their embedded fragment is checked on its own."""
    lines: set[int] = set()
    for fragment in model.fragments:
        lines.update(range(fragment.start_line + 1, fragment.end_line))
    return lines


def own_lines(model: StructuralModel) -> Iterator[LogicalLine]:
    """Lines the model is responsible for, excluding fence interiors."""
    skip = fenced_interior(model)
    for line in model.lines:
        if line.index not in skip:
            yield line


def code_blocks(model: StructuralModel) -> list[BlockSpan]:
    code_kinds = (BlockKind.FUNCTION, BlockKind.CLASS, BlockKind.COMPONENT)
    return [block for block in model.blocks if block.kind in code_kinds]


def parent_of(block: BlockSpan, blocks: list[BlockSpan]) -> BlockSpan | None:
    """Innermost block strictly enclosing `block`."""
    enclosing = [
        other for other in blocks
        if other is not block
        and other.start_line < block.start_line
        and block.end_line <= other.end_line
    ]
    if not enclosing:
        return None
    return max(enclosing, key=lambda other: other.start_line)


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def content_start(model: StructuralModel) -> int | None:
    """First line of document content, past front matter, blanks and comments."""
    start = 1
    if model.lines and model.line(1).text.strip() == "---":
        for line in model.lines[1:]:
            if line.text.strip() in ("---", "..."):
                start = line.index + 1
                break
    for line in model.lines[start - 1:]:
        if line.kind not in (LineKind.BLANK, LineKind.COMMENT):
            return line.index
    return None
