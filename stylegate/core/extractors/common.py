"""
Line-level helpers shared by every extraction strategy.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from stylegate.models.structure_models import BlockSpan, LineKind, LogicalLine

TAB_WIDTH = 4

# Comment-like lines that may document the block header right below them
_LEADING_KINDS = (LineKind.COMMENT, LineKind.DOCSTRING)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(content: str) -> list[str]:
    """Split on real line breaks only (form feeds stay inside their line)."""
    if not content:
        return []
    parts = _LINE_BREAK.split(content)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def indent_of(text: str) -> int:
    expanded = text.expandtabs(TAB_WIDTH)
    stripped = expanded.lstrip()
    if not stripped:
        return 0
    return len(expanded) - len(stripped)


def leading_comment_run(kinds: Sequence[LineKind], start_line: int) -> int | None:
    """First line of the comment run that ends right above `start_line`, if any."""
    first: int | None = None
    line = start_line - 1
    while line >= 1 and kinds[line - 1] in _LEADING_KINDS:
        first = line
        line -= 1
    return first


def nesting_depths(spans: Sequence[tuple[int, int]]) -> list[int]:
    """For each (start, end) span, how many other spans enclose it.

    Spans never share a start line, so containment is strict.
    """
    return [
        sum(
            1
            for other_start, other_end in spans
            if other_start < start and end <= other_end
        )
        for start, end in spans
    ]


def build_lines(
    raw_lines: Sequence[str],
    kinds: Sequence[LineKind],
    doc_adjacent: Iterable[int] = (),
) -> tuple[LogicalLine, ...]:
    adjacent = set(doc_adjacent)
    return tuple(
        LogicalLine(
            index=i,
            raw_length=len(text),
            indent_depth=indent_of(text),
            kind=kinds[i - 1],
            text=text,
            doc_adjacent=i in adjacent,
        )
        for i, text in enumerate(raw_lines, start=1)
    )


def attach_leading_comments(
    blocks: list[BlockSpan], kinds: Sequence[LineKind]
) -> tuple[list[BlockSpan], set[int]]:
    """Mark comment runs directly above block headers as doc-adjacent."""
    adjacent: set[int] = set()
    result: list[BlockSpan] = []
    for block in blocks:
        first = leading_comment_run(kinds, block.start_line)
        if first is not None:
            adjacent.update(
                line for line in range(first, block.start_line)
                if kinds[line - 1] == LineKind.COMMENT
            )
            block = block.model_copy(update={"leading_line": first})
        result.append(block)
    return result, adjacent
