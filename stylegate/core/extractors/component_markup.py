"""
Component-Markup Extractor — Structural model for brace/JSX source.

A single character scan tracks strings, template literals, comments,
regex literals, bracket depth and JSX element depth. Each row records its
depth on entry, on exit and at its deepest point; a declaration header
starts a span that ends on the first row where depth is back at the
header's starting depth and the statement does not continue.

Mismatched closers are recovered by popping to the nearest matching
opener. More recoveries than the parser budget, an unterminated template
literal or an unterminated block comment raise ParseError.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field

from stylegate.core.exceptions import ParseError
from stylegate.core.extractors.common import (
    attach_leading_comments,
    build_lines,
    nesting_depths,
    split_lines,
)
from stylegate.core.naming import classify_case
from stylegate.models.structure_models import (
    BlockKind,
    BlockSpan,
    CasePattern,
    IdentifierDecl,
    IdentifierRole,
    LanguageKind,
    LineKind,
    ParameterDecl,
    SignatureDecl,
    StructuralModel,
    TerminalStatement,
)

_OPENERS = "([{"
_CLOSER_FOR = {")": "(", "]": "[", "}": "{"}

_JSX_PRECEDERS = frozenset("(,=:?&|{[;>")
_JSX_KEYWORDS = frozenset({"return", "yield", "default"})
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{;+-*%<>~^")
_REGEX_KEYWORDS = frozenset({"return", "typeof", "case", "in", "of", "delete", "void", "throw", "yield"})
_NOT_JSX = re.compile(r"<[A-Za-z][\w.:-]*\s*(?:,|extends\b)")

_NO_JSX_DIALECTS = frozenset({"ts", "mts", "cts", "typescript", "vue", "svelte"})
_SCRIPT_DIALECTS = frozenset({"vue", "svelte"})
_SCRIPT_BLOCK = re.compile(r"<script\b[^>]*>(.*?)</script\s*>", re.S | re.I)

_IDENT = r"[A-Za-z_$][\w$]*"
_FUNCTION_DECL = re.compile(
    rf"^\s*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*(?P<name>{_IDENT})\s*"
    r"(?:<[^>]*>\s*)?\("
)
_BINDING_DECL = re.compile(
    rf"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>{_IDENT})\s*"
    r"(?::\s*(?P<type>[^=]+?)\s*)?=\s*(?:async\s+)?"
    rf"(?:(?P<function>function\b\s*\*?\s*(?:{_IDENT}\s*)?(?:<[^>]*>\s*)?\()"
    rf"|(?P<generic><[^>]*>\s*)?\(|(?P<single>{_IDENT})\s*=>)"
)
_CLASS_DECL = re.compile(
    rf"^\s*(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+(?P<name>{_IDENT})"
)
_METHOD_DECL = re.compile(
    r"^\s*(?:(?:public|private|protected|static|async|readonly|override|get|set)\s+)*"
    rf"(?!(?:if|for|while|switch|catch|function|return|with)\b)(?P<name>{_IDENT})\s*"
    r"(?:<[^>]*>\s*)?\("
)
_TYPE_DECL = re.compile(
    rf"^\s*(?:export\s+)?(?:declare\s+)?(?:const\s+)?(?:type|interface|enum)\s+(?P<name>{_IDENT})"
)
_VARIABLE_DECL = re.compile(rf"^\s*(?:export\s+)?(?P<keyword>const|let|var)\s+(?P<name>{_IDENT})")
_IMPORT_START = re.compile(
    rf"^\s*(?:import\b|export\s+(?:\*|\{{[^}}]*\}})\s*from\b|(?:const|let|var)\s+{_IDENT}\s*=\s*require\()"
)
_DIRECTIVE = re.compile(r"""^\s*(['"])use [\w ]+\1;?\s*$""")
_RETURN = re.compile(r"^\s*return\b")
_HOOK_NAME = re.compile(r"^use[A-Z0-9]")
_COMPONENT_TYPE = re.compile(r"\b(?:FC|VFC|FunctionComponent|Component|ComponentType)\b")
_CONDITIONAL = re.compile(r"(?<!\?)\?(?![.?])|&&|\|\|")
_MODIFIER = re.compile(r"^(?:(?:public|private|protected|readonly|override)\s+)+")
_TRAILING_COMMENT = re.compile(r"\s//.*$")

_CONTINUATION_TAILS = ("=>", "=", ",", "(", "[", "{", "&&", "||", "??", "?", ":", ".")
_CONTINUATION_LEADS = ("{", "=>", ".", "?", ":", "&&", "||")


@dataclass
class _ScanResult:
    depth_start: list[int]
    depth_end: list[int]
    depth_max: list[int]
    code_rows: set[int] = field(default_factory=set)
    comment_rows: set[int] = field(default_factory=set)
    doc_rows: set[int] = field(default_factory=set)
    continued_rows: set[int] = field(default_factory=set)
    jsx_rows: set[int] = field(default_factory=set)


class _Scanner:
    """One left-to-right pass over normalised source; created per extraction."""

    def __init__(self, src: str, rows: int, *, jsx: bool, budget: int) -> None:
        self.src = src
        self.jsx = jsx
        self.budget = budget
        self.pos = 0
        self.row = 1
        self.stack: list[str] = []
        self.opened_at: list[int] = []
        self.prev = ""
        self.recoveries = 0
        self.first_fault: int | None = None
        size = rows + 2
        self.result = _ScanResult([0] * size, [0] * size, [0] * size)

    # -- depth bookkeeping -------------------------------------------------

    def _newline(self) -> None:
        self.result.depth_end[self.row] = len(self.stack)
        self.row += 1
        if self.row < len(self.result.depth_start):
            self.result.depth_start[self.row] = len(self.stack)
            self.result.depth_max[self.row] = len(self.stack)
        self.pos += 1

    def _push(self, frame: str) -> None:
        self.stack.append(frame)
        self.opened_at.append(self.row)
        if len(self.stack) > self.result.depth_max[self.row]:
            self.result.depth_max[self.row] = len(self.stack)

    def _truncate(self, keep: int) -> None:
        del self.stack[keep:]
        del self.opened_at[keep:]

    def _fault(self) -> None:
        self.recoveries += 1
        if self.first_fault is None:
            self.first_fault = self.row

    def _close(self, opener: str) -> None:
        accepted = (opener, "${") if opener == "{" else (opener,)
        if self.stack and self.stack[-1] in accepted:
            self._truncate(len(self.stack) - 1)
            return
        self._fault()
        for k in range(len(self.stack) - 1, -1, -1):
            if self.stack[k] in accepted:
                self._truncate(k)
                return

    def _close_element(self) -> None:
        if self.stack and self.stack[-1] == "elem":
            self._truncate(len(self.stack) - 1)
            return
        self._fault()
        if "elem" in self.stack:
            self._truncate(len(self.stack) - 1 - self.stack[::-1].index("elem"))

    # -- lexical pieces ----------------------------------------------------

    def _peek(self, ahead: int = 1) -> str:
        at = self.pos + ahead
        return self.src[at] if at < len(self.src) else ""

    def _string(self, quote: str) -> None:
        src = self.src
        self.pos += 1
        while self.pos < len(src):
            c = src[self.pos]
            if c == "\\":
                if self._peek() == "\n":
                    self.pos += 1
                    self._newline()
                    self.result.continued_rows.add(self.row)
                    continue
                self.pos += 2
                continue
            if c == quote:
                self.pos += 1
                return
            if c == "\n":
                return
            self.pos += 1

    def _regex(self) -> None:
        src = self.src
        self.pos += 1
        in_class = False
        while self.pos < len(src):
            c = src[self.pos]
            if c == "\\":
                self.pos += 2
                continue
            if c == "\n":
                return
            if in_class:
                in_class = c != "]"
            elif c == "[":
                in_class = True
            elif c == "/":
                self.pos += 1
                while self.pos < len(src) and src[self.pos].isalpha():
                    self.pos += 1
                return
            self.pos += 1

    def _block_comment(self) -> None:
        src = self.src
        start_row = self.row
        is_doc = src.startswith("/**", self.pos) and not src.startswith("/**/", self.pos)
        end = src.find("*/", self.pos + 2)
        if end == -1:
            raise ParseError("Unterminated block comment", start_row)
        while self.pos < end + 2:
            if src[self.pos] == "\n":
                self._newline()
            else:
                self.pos += 1
        target = self.result.doc_rows if is_doc else self.result.comment_rows
        target.update(range(start_row, self.row + 1))

    def _word(self) -> str:
        src = self.src
        start = self.pos
        while self.pos < len(src) and (src[self.pos].isalnum() or src[self.pos] in "_$"):
            self.pos += 1
        return src[start:self.pos]

    def _opens_jsx(self) -> bool:
        if not self.jsx:
            return False
        nxt = self._peek()
        if not (nxt.isalpha() or nxt == ">"):
            return False
        if not (self.prev in _JSX_PRECEDERS or self.prev in _JSX_KEYWORDS or self.prev == ""):
            return False
        return not _NOT_JSX.match(self.src, self.pos)

    def _open_tag(self) -> None:
        self.result.jsx_rows.add(self.row)
        self.result.code_rows.add(self.row)
        if self._peek() == ">":
            self._push("elem")
            self.pos += 2
            self.prev = ">"
            return
        self._push("tag")
        self.pos += 1
        src = self.src
        while self.pos < len(src) and (src[self.pos].isalnum() or src[self.pos] in "._-:"):
            self.pos += 1
        self.prev = "tag"

    # -- modes -------------------------------------------------------------

    def _template_char(self) -> None:
        c = self.src[self.pos]
        if c == "\n":
            self._newline()
            self.result.continued_rows.add(self.row)
            return
        self.result.code_rows.add(self.row)
        if c == "\\":
            self.pos += 1 if self._peek() == "\n" else 2
        elif c == "`":
            self._truncate(len(self.stack) - 1)
            self.pos += 1
            self.prev = "`"
        elif c == "$" and self._peek() == "{":
            self._push("${")
            self.pos += 2
            self.prev = "{"
        else:
            self.pos += 1

    def _element_char(self) -> None:
        c = self.src[self.pos]
        if c == "\n":
            self._newline()
            return
        if c.isspace():
            self.pos += 1
            return
        self.result.code_rows.add(self.row)
        if c == "{":
            self._push("{")
            self.pos += 1
            self.prev = "{"
        elif c == "<" and self._peek() == "/":
            end = self.src.find(">", self.pos)
            end = len(self.src) - 1 if end == -1 else end
            while self.pos <= end:
                if self.src[self.pos] == "\n":
                    self._newline()
                else:
                    self.pos += 1
            self._close_element()
            self.prev = ">"
        elif c == "<" and (self._peek().isalpha() or self._peek() == ">"):
            self._open_tag()
        else:
            self.pos += 1

    def _tag_char(self) -> bool:
        """Attribute-position characters of an opening tag. False if not handled."""
        c = self.src[self.pos]
        if c == "/" and self._peek() == ">":
            self._truncate(len(self.stack) - 1)
            self.pos += 2
            self.prev = ">"
        elif c == ">":
            self._truncate(len(self.stack) - 1)
            self._push("elem")
            self.pos += 1
            self.prev = ">"
        elif c in "\"'":
            self._string(c)
        elif c == "{":
            return False
        else:
            self.pos += 1
        return True

    def _code_char(self) -> None:
        src = self.src
        c = src[self.pos]
        if c == "\n":
            self._newline()
            return
        if c.isspace():
            self.pos += 1
            return
        nxt = self._peek()
        if c == "/" and nxt == "/":
            self.result.comment_rows.add(self.row)
            end = src.find("\n", self.pos)
            self.pos = len(src) if end == -1 else end
            return
        if c == "/" and nxt == "*":
            self._block_comment()
            return

        self.result.code_rows.add(self.row)
        if self.stack and self.stack[-1] == "tag" and self._tag_char():
            return
        if c in "\"'":
            self._string(c)
            self.prev = "str"
        elif c == "`":
            self._push("`")
            self.pos += 1
        elif c == "/" and (self.prev in _REGEX_PRECEDERS or self.prev in _REGEX_KEYWORDS or not self.prev):
            self._regex()
            self.prev = "regex"
        elif c == "<" and self._opens_jsx():
            self._open_tag()
        elif c in _OPENERS:
            self._push(c)
            self.pos += 1
            self.prev = c
        elif c in _CLOSER_FOR:
            self._close(_CLOSER_FOR[c])
            self.pos += 1
            self.prev = c
        elif c.isalnum() or c in "_$":
            self.prev = self._word()
        else:
            self.pos += 1
            self.prev = c

    def run(self) -> _ScanResult:
        src = self.src
        while self.pos < len(src):
            top = self.stack[-1] if self.stack else None
            if top == "`":
                self._template_char()
            elif top == "elem":
                self._element_char()
            else:
                self._code_char()
        self.result.depth_end[self.row] = len(self.stack)

        if "`" in self.stack:
            raise ParseError("Unterminated template literal", self.opened_at[self.stack.index("`")])
        for _ in self.stack:
            self._fault()
        if self.recoveries > self.budget:
            raise ParseError(
                f"Unbalanced bracket depth ({self.recoveries} recoveries, budget {self.budget})",
                self.first_fault,
            )
        return self.result


@dataclass
class _Source:
    """Masked lines, their joined text and the scan facts for one extraction."""

    lines: list[str]
    text: str
    scan: _ScanResult
    row_starts: list[int]

    @classmethod
    def build(cls, lines: list[str], scan: _ScanResult) -> _Source:
        starts: list[int] = []
        offset = 0
        for line in lines:
            starts.append(offset)
            offset += len(line) + 1
        return cls(lines, "\n".join(lines), scan, starts)

    @property
    def total(self) -> int:
        return len(self.lines)

    def row_of(self, offset: int) -> int:
        return bisect_right(self.row_starts, offset)

    def offset_of(self, row: int) -> int:
        return self.row_starts[row - 1]

    def _continues(self, row: int) -> bool:
        tail = _TRAILING_COMMENT.sub("", self.lines[row - 1]).rstrip()
        if tail.endswith(_CONTINUATION_TAILS):
            return True
        for later in range(row + 1, self.total + 1):
            lead = self.lines[later - 1].strip()
            if lead:
                return lead.startswith(_CONTINUATION_LEADS)
        return False

    def statement_end(self, row: int) -> int:
        """Last row of the construct starting at `row`."""
        base = self.scan.depth_start[row]
        for current in range(row, self.total + 1):
            if self.scan.depth_end[current] <= base and not self._continues(current):
                return current
        return self.total


def _script_only(raw_lines: list[str]) -> list[str]:
    """Blank out everything outside <script> sections, keeping line breaks."""
    if not raw_lines:
        return []
    text = "\n".join(raw_lines)
    keep = bytearray(len(text))
    for match in _SCRIPT_BLOCK.finditer(text):
        keep[match.start(1):match.end(1)] = b"\x01" * (match.end(1) - match.start(1))
    masked = "".join(c if keep[i] or c == "\n" else " " for i, c in enumerate(text))
    return masked.split("\n")


def _matching_close(text: str, open_pos: int) -> int | None:
    depth = 0
    quote: str | None = None
    i = open_pos
    while i < len(text):
        c = text[i]
        if quote:
            if c == "\\":
                i += 2
                continue
            if c == quote:
                quote = None
        elif c in "\"'`":
            quote = c
        elif c in _OPENERS:
            depth += 1
        elif c in _CLOSER_FOR:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _split_top_level(text: str) -> list[tuple[int, str]]:
    """Comma-separated pieces of a parameter list with their offsets."""
    parts: list[tuple[int, str]] = []
    depth = 0
    start = 0
    quote: str | None = None
    i = 0
    while i < len(text):
        c = text[i]
        if quote:
            if c == "\\":
                i += 2
                continue
            if c == quote:
                quote = None
        elif c in "\"'`":
            quote = c
        elif c in "([{<":
            depth += 1
        elif c in ")]}":
            depth -= 1
        elif c == ">" and (i == 0 or text[i - 1] != "="):
            depth -= 1
        elif c == "," and depth == 0:
            parts.append((start, text[start:i]))
            start = i + 1
        i += 1
    parts.append((start, text[start:]))
    return [(offset, piece) for offset, piece in parts if piece.strip()]


def _default_index(text: str) -> int | None:
    """Position of a top-level `=` introducing a default value."""
    depth = 0
    for i, c in enumerate(text):
        if c in "([{<":
            depth += 1
        elif c in ")]}":
            depth -= 1
        elif c == ">" and (i == 0 or text[i - 1] != "="):
            depth -= 1
        elif c == "=" and depth == 0:
            after = text[i + 1] if i + 1 < len(text) else ""
            before = text[i - 1] if i else ""
            if after not in "=>" and before not in "=!<>":
                return i
    return None


def _parse_param(segment: str) -> tuple[str, str | None]:
    text = _MODIFIER.sub("", segment.strip())
    if text[0] in "{[":
        close = _matching_close(text, 0)
        close = len(text) - 1 if close is None else close
        name = f"{text[0]}...{text[close]}"
        rest = text[close + 1:]
    else:
        match = re.match(rf"(\.\.\.)?({_IDENT})\??", text)
        if not match:
            return text, None
        name = (match.group(1) or "") + match.group(2)
        rest = text[match.end():]

    rest = rest.lstrip()
    if not rest.startswith(":"):
        return name, None
    annotation = rest[1:]
    cut = _default_index(annotation)
    if cut is not None:
        annotation = annotation[:cut]
    return name, annotation.strip() or None


def _return_annotation(text: str, close: int) -> tuple[str | None, int]:
    """Return type written after the parameter list, and where it stops."""
    i = close + 1
    while i < len(text) and text[i] in " \t":
        i += 1
    if i >= len(text) or text[i] != ":":
        return None, i
    start = i + 1
    depth = 0
    j = start
    while j < len(text):
        c = text[j]
        if c in "(<[":
            depth += 1
        elif c in ")]":
            depth -= 1
        elif c == ">" and text[j - 1] != "=":
            depth -= 1
        elif depth <= 0 and (c in "{;" or text.startswith("=>", j)):
            break
        elif depth <= 0 and c == "\n" and text[start:j].strip():
            break
        j += 1
    return text[start:j].strip() or None, j


@dataclass
class _Header:
    row: int
    keyword: str
    name: str
    open_pos: int | None = None
    single: str | None = None
    binding_type: str | None = None


def _signature(source: _Source, header: _Header) -> SignatureDecl | None:
    """Signature of a function-like header, or None if it is not one."""
    typed_binding = header.binding_type is not None
    if header.single is not None:
        return SignatureDecl(
            name=header.name,
            line=header.row,
            parameters=(ParameterDecl(name=header.single, line=header.row),),
            return_line=header.row,
            contextually_typed=typed_binding,
        )

    text = source.text
    close = _matching_close(text, header.open_pos)
    if close is None:
        return None
    params: list[ParameterDecl] = []
    inner_start = header.open_pos + 1
    for offset, piece in _split_top_level(text[inner_start:close]):
        lead = len(piece) - len(piece.lstrip())
        name, annotation = _parse_param(piece)
        params.append(
            ParameterDecl(
                name=name,
                annotation=annotation,
                line=source.row_of(inner_start + offset + lead),
                implicit=name == "this",
            )
        )

    annotation, after = _return_annotation(text, close)
    following = text[after:].lstrip()
    if header.keyword == "arrow" and not following.startswith("=>"):
        return None
    if header.keyword == "method" and not following.startswith("{"):
        return None

    return SignatureDecl(
        name=header.name,
        line=header.row,
        parameters=tuple(params),
        return_annotation=annotation,
        return_line=source.row_of(close),
        contextually_typed=typed_binding,
    )


def _match_header(source: _Source, row: int) -> _Header | None:
    text = source.lines[row - 1]
    base = source.offset_of(row)
    match = _FUNCTION_DECL.match(text)
    if match:
        return _Header(row, "function", match.group("name"), open_pos=base + match.end() - 1)
    match = _BINDING_DECL.match(text)
    if match:
        binding_type = match.group("type")
        if match.group("single"):
            return _Header(row, "arrow", match.group("name"), single=match.group("single"),
                           binding_type=binding_type)
        keyword = "function" if match.group("function") else "arrow"
        return _Header(row, keyword, match.group("name"), open_pos=base + match.end() - 1,
                       binding_type=binding_type)
    match = _CLASS_DECL.match(text)
    if match:
        return _Header(row, "class", match.group("name"))
    return None


def _function_role(name: str, rows: range, source: _Source, binding_type: str | None) -> IdentifierRole:
    if _HOOK_NAME.match(name):
        return IdentifierRole.HOOK
    if binding_type and _COMPONENT_TYPE.search(binding_type):
        return IdentifierRole.COMPONENT
    # Lower-case helpers that return markup (renderRow) stay functions
    if name[:1].isupper() and any(row in source.scan.jsx_rows for row in rows):
        return IdentifierRole.COMPONENT
    return IdentifierRole.FUNCTION


def _line_kinds(raw_lines: list[str], scan: _ScanResult) -> list[LineKind]:
    kinds: list[LineKind] = []
    for row, text in enumerate(raw_lines, start=1):
        if row in scan.continued_rows:
            kinds.append(LineKind.CODE)
        elif row in scan.code_rows:
            kinds.append(LineKind.CODE if text.strip() else LineKind.BLANK)
        elif row in scan.doc_rows:
            kinds.append(LineKind.DOCSTRING)
        elif row in scan.comment_rows:
            kinds.append(LineKind.COMMENT)
        elif not text.strip():
            kinds.append(LineKind.BLANK)
        else:
            kinds.append(LineKind.CODE)
    return kinds


def _imports_end(source: _Source, kinds: list[LineKind]) -> int | None:
    end: int | None = None
    row = 1
    while row <= source.total:
        if kinds[row - 1] != LineKind.CODE:
            row += 1
            continue
        text = source.lines[row - 1]
        if end is None and _DIRECTIVE.match(text):
            row += 1
            continue
        if not _IMPORT_START.match(text):
            break
        end = source.statement_end(row)
        row = end + 1
    return end


def _terminals(source: _Source, kinds: list[LineKind]) -> list[TerminalStatement]:
    found: list[TerminalStatement] = []
    for row in range(1, source.total + 1):
        if kinds[row - 1] != LineKind.CODE or row in source.scan.continued_rows:
            continue
        if not _RETURN.match(source.lines[row - 1]):
            continue
        end = source.statement_end(row)
        body = "\n".join(source.lines[row - 1:end])
        found.append(
            TerminalStatement(line=row, end_line=end, has_conditional=bool(_CONDITIONAL.search(body)))
        )
    return found


def extract(
    content: str,
    *,
    file_path: str = "",
    dialect: str = "js",
    recovery_budget: int = 2,
) -> StructuralModel:
    """Build the structural model of brace-delimited component source."""
    raw_lines = split_lines(content)
    lines = _script_only(raw_lines) if dialect in _SCRIPT_DIALECTS else list(raw_lines)
    scanner = _Scanner(
        "\n".join(lines),
        len(lines),
        jsx=dialect not in _NO_JSX_DIALECTS,
        budget=recovery_budget,
    )
    source = _Source.build(lines, scanner.run())
    kinds = _line_kinds(raw_lines, source.scan)

    candidates = [
        row for row in range(1, source.total + 1)
        if kinds[row - 1] == LineKind.CODE and row not in source.scan.continued_rows
    ]

    headers: list[tuple[_Header, int]] = []
    for row in candidates:
        header = _match_header(source, row)
        if header is not None:
            headers.append((header, source.statement_end(row)))

    # Methods sit one level inside a class body
    for header, end in list(headers):
        if header.keyword != "class":
            continue
        body_depth = source.scan.depth_start[header.row] + 1
        for row in candidates:
            if not header.row < row <= end or source.scan.depth_start[row] != body_depth:
                continue
            match = _METHOD_DECL.match(source.lines[row - 1])
            if match:
                method = _Header(row, "method", match.group("name"),
                                 open_pos=source.offset_of(row) + match.end() - 1)
                headers.append((method, source.statement_end(row)))
    headers.sort(key=lambda item: item[0].row)

    spans: list[tuple[int, int, BlockKind, str]] = []
    identifiers: list[IdentifierDecl] = []
    signatures: list[SignatureDecl] = []
    function_rows: set[int] = set()
    for header, end in headers:
        if header.keyword == "class":
            spans.append((header.row, end, BlockKind.CLASS, header.name))
            function_rows.add(header.row)
            continue
        signature = _signature(source, header)
        if signature is None:
            continue
        if header.keyword == "method":
            role = IdentifierRole.FUNCTION
        else:
            role = _function_role(header.name, range(header.row, end + 1), source, header.binding_type)
        kind = BlockKind.COMPONENT if role == IdentifierRole.COMPONENT else BlockKind.FUNCTION
        spans.append((header.row, end, kind, header.name))
        signatures.append(signature)
        function_rows.add(header.row)
        if header.keyword != "method" or header.name != "constructor":
            identifiers.append(
                IdentifierDecl(
                    name=header.name,
                    role=role,
                    declared_at_line=header.row,
                    case_pattern=classify_case(header.name),
                )
            )

    for row in candidates:
        if row in function_rows:
            continue
        text = source.lines[row - 1]
        match = _TYPE_DECL.match(text)
        if match:
            role = IdentifierRole.TYPE_ALIAS
        else:
            match = _VARIABLE_DECL.match(text)
            if not match:
                continue
            name = match.group("name")
            module_level = source.scan.depth_start[row] == 0
            screaming = classify_case(name) == CasePattern.SCREAMING_SNAKE_CASE
            if module_level and match.group("keyword") == "const" and screaming:
                role = IdentifierRole.CONSTANT
            else:
                role = IdentifierRole.VARIABLE
        name = match.group("name")
        identifiers.append(
            IdentifierDecl(
                name=name, role=role, declared_at_line=row, case_pattern=classify_case(name)
            )
        )
    identifiers.sort(key=lambda ident: ident.declared_at_line)

    depths = nesting_depths([(start, end) for start, end, _, _ in spans])
    blocks = [
        BlockSpan(start_line=start, end_line=end, kind=kind, declared_name=name, depth=depth)
        for (start, end, kind, name), depth in zip(spans, depths)
    ]
    blocks, adjacent = attach_leading_comments(blocks, kinds)

    return StructuralModel(
        file_path=file_path,
        language=LanguageKind.COMPONENT_MARKUP,
        dialect=dialect,
        lines=build_lines(raw_lines, kinds, adjacent),
        blocks=tuple(blocks),
        identifiers=tuple(identifiers),
        signatures=tuple(signatures),
        terminals=tuple(_terminals(source, kinds)),
        imports_end_line=_imports_end(source, kinds),
    )
