"""
Prose-Markup Extractor — Headings, fences, lists and embedded fragments.

Heading depth is the count of leading `#` markers. A heading section runs
from its heading to the line before the next heading of equal or shallower
depth. Fences open and close with the same character at the same column;
each fence interior is classified by its info-string tag and extracted as
a nested model whose line numbers are shifted by the opening fence line.
"""

from __future__ import annotations

import logging
import re

from stylegate.core.classifier import classify_tag
from stylegate.core.exceptions import ParseError
from stylegate.core.extractors.common import (
    TAB_WIDTH,
    build_lines,
    indent_of,
    nesting_depths,
    split_lines,
)
from stylegate.models.structure_models import (
    BlockKind,
    BlockSpan,
    Fragment,
    HeadingDecl,
    LanguageKind,
    LineKind,
    ListItemDecl,
    StructuralModel,
)

logger = logging.getLogger("stylegate.extractor")

_FENCE_OPEN = re.compile(r"^(?P<indent>\s*)(?P<marker>`{3,}|~{3,})(?P<info>.*)$")
_FENCE_CLOSE = re.compile(r"^(?P<indent>\s*)(?P<marker>`{3,}|~{3,})\s*$")
_HEADING = re.compile(r"^ {0,3}(?P<marks>#{1,6})(?:[ \t]+(?P<text>.*?))?[ \t]*$")
_CLOSING_HASHES = re.compile(r"(?:^|[ \t]+)#+$")
_THEMATIC_BREAK = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
_LIST_ITEM = re.compile(r"^(?P<indent>\s*)(?:[-*+]|\d{1,9}[.)])(?:[ \t]+|$)")
_FRONT_MATTER_CLOSE = ("---", "...")


def _dedent(lines: list[str], column: int) -> tuple[list[str], list[int]]:
    """Strip up to `column` leading spaces; also returns the count stripped per line."""
    result = []
    stripped = []
    for line in lines:
        strip = min(column, len(line) - len(line.lstrip(" ")))
        result.append(line[strip:])
        stripped.append(strip)
    return result, stripped


def _restore_widths(model: StructuralModel, stripped: list[int]) -> StructuralModel:
    """Give fragment lines back the columns dedenting removed, nested fences included."""
    lines = tuple(
        line.model_copy(update={"raw_length": line.raw_length + stripped[line.index - 1]})
        if line.index <= len(stripped) else line
        for line in model.lines
    )
    fragments = tuple(
        fragment.model_copy(
            update={"model": _restore_widths(fragment.model, stripped[fragment.line_offset:])}
        )
        if fragment.model is not None else fragment
        for fragment in model.fragments
    )
    return model.model_copy(update={"lines": lines, "fragments": fragments})


def _fragment(
    info: str, raw_interior: list[str], column: int, start: int, end: int, *,
    file_path: str, budget: int,
) -> Fragment:
    # dispatch imports this module; resolved lazily to keep the table in one place
    from stylegate.core.extractors import dispatch

    interior, stripped = _dedent(raw_interior, column)
    content = "\n".join(interior) + ("\n" if interior else "")
    kind, dialect = classify_tag(info, content)
    try:
        model = dispatch.extract(
            kind, content, file_path=file_path, dialect=dialect, recovery_budget=budget
        )
    except ParseError as e:
        logger.debug(f"Fence at line {start} ({info or 'untagged'}) did not parse: {e}")
        return Fragment(
            tag=info, language=kind, start_line=start, end_line=end, line_offset=start,
            parse_error=str(e),
        )
    if any(stripped):
        model = _restore_widths(model, stripped)
    return Fragment(tag=info, language=kind, start_line=start, end_line=end, line_offset=start, model=model)


def extract(
    content: str,
    *,
    file_path: str = "",
    dialect: str = "md",
    recovery_budget: int = 2,
) -> StructuralModel:
    """Build the structural model of a prose document."""
    raw_lines = split_lines(content)
    total = len(raw_lines)
    kinds = [LineKind.BLANK if not line.strip() else LineKind.CODE for line in raw_lines]

    headings: list[HeadingDecl] = []
    list_items: list[ListItemDecl] = []
    breaks: list[int] = []
    fences: list[tuple[int, int, str, int]] = []

    row = 1
    if raw_lines and raw_lines[0].strip() == "---":
        close = next(
            (i for i in range(2, total + 1) if raw_lines[i - 1].strip() in _FRONT_MATTER_CLOSE),
            None,
        )
        if close is not None:
            row = close + 1

    while row <= total:
        text = raw_lines[row - 1]

        opening = _FENCE_OPEN.match(text)
        if opening and not (opening.group("marker")[0] == "`" and "`" in opening.group("info")):
            column = indent_of(text)
            marker = opening.group("marker")
            close_row = None
            for later in range(row + 1, total + 1):
                closing = _FENCE_CLOSE.match(raw_lines[later - 1])
                if (
                    closing
                    and closing.group("marker")[0] == marker[0]
                    and len(closing.group("marker")) >= len(marker)
                    and indent_of(raw_lines[later - 1]) == column
                ):
                    close_row = later
                    break
            if close_row is None:
                raise ParseError(f"Unterminated fence opened at line {row}", row)
            kinds[row - 1] = LineKind.FENCE_BOUNDARY
            kinds[close_row - 1] = LineKind.FENCE_BOUNDARY
            for inner in range(row + 1, close_row):
                kinds[inner - 1] = LineKind.CODE
            fences.append((row, close_row, opening.group("info").strip(), column))
            row = close_row + 1
            continue

        if text.lstrip().startswith("<!--"):
            end = row
            while end <= total and "-->" not in raw_lines[end - 1]:
                end += 1
            end = min(end, total)
            for inner in range(row, end + 1):
                kinds[inner - 1] = LineKind.COMMENT
            row = end + 1
            continue

        heading = _HEADING.match(text)
        if heading:
            title = _CLOSING_HASHES.sub("", heading.group("text") or "").strip()
            headings.append(HeadingDecl(line=row, depth=len(heading.group("marks")), text=title))
            kinds[row - 1] = LineKind.HEADING
        elif _THEMATIC_BREAK.match(text):
            breaks.append(row)
        else:
            item = _LIST_ITEM.match(text)
            if item:
                indent = len(item.group("indent").expandtabs(TAB_WIDTH))
                list_items.append(ListItemDecl(line=row, indent=indent))
        row += 1

    sections: list[tuple[int, int]] = []
    for pos, heading in enumerate(headings):
        end = total
        for later in headings[pos + 1:]:
            if later.depth <= heading.depth:
                end = later.line - 1
                break
        sections.append((heading.line, end))

    blocks = [
        BlockSpan(
            start_line=start, end_line=end, kind=BlockKind.HEADING_SECTION,
            declared_name=heading.text, depth=depth,
        )
        for (start, end), heading, depth in zip(sections, headings, nesting_depths(sections))
    ]
    blocks.extend(
        BlockSpan(start_line=start, end_line=end, kind=BlockKind.FENCE, declared_name=info or None)
        for start, end, info, _ in fences
    )
    blocks.sort(key=lambda block: (block.start_line, block.kind.value))

    fragments = tuple(
        _fragment(
            info,
            raw_lines[start:end - 1],
            column,
            start,
            end,
            file_path=file_path,
            budget=recovery_budget,
        )
        for start, end, info, column in fences
    )

    return StructuralModel(
        file_path=file_path,
        language=LanguageKind.PROSE_MARKUP,
        dialect=dialect,
        lines=build_lines(raw_lines, kinds),
        blocks=tuple(blocks),
        headings=tuple(headings),
        list_items=tuple(list_items),
        thematic_breaks=tuple(breaks),
        fragments=fragments,
    )
