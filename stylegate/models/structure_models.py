"""
Structural Data Models — The language-aware model of one file or fragment.

Extractors produce these; rule evaluators consume them. A model is built
once per file, never mutated, and discarded after evaluation.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LanguageKind(str, Enum):
    INDENT_BLOCK = "indent_block"
    COMPONENT_MARKUP = "component_markup"
    PROSE_MARKUP = "prose_markup"
    UNCLASSIFIED = "unclassified"


class LineKind(str, Enum):
    CODE = "code"
    BLANK = "blank"
    COMMENT = "comment"
    DOCSTRING = "docstring"
    HEADING = "heading"
    FENCE_BOUNDARY = "fence_boundary"


class BlockKind(str, Enum):
    FUNCTION = "function"
    CLASS = "class"
    COMPONENT = "component"
    HEADING_SECTION = "heading_section"
    FENCE = "fence"


class IdentifierRole(str, Enum):
    FUNCTION = "function"
    VARIABLE = "variable"
    CONSTANT = "constant"
    TYPE_ALIAS = "type_alias"
    COMPONENT = "component"
    HOOK = "hook"


class CasePattern(str, Enum):
    SNAKE_CASE = "snake_case"
    PASCAL_CASE = "pascal_case"
    CAMEL_CASE = "camel_case"
    SCREAMING_SNAKE_CASE = "screaming_snake_case"
    MIXED = "mixed"


_FROZEN = ConfigDict(frozen=True)


class LogicalLine(BaseModel):
    """One physical line of content."""

    model_config = _FROZEN

    index: int = Field(..., ge=1)
    raw_length: int = Field(..., ge=0)
    indent_depth: int = Field(default=0, ge=0, description="Leading columns, tabs expanded")
    kind: LineKind
    text: str = ""
    doc_adjacent: bool = Field(
        default=False, description="Comment directly preceding a block header"
    )


class BlockSpan(BaseModel):
    """A contiguous structural unit."""

    model_config = _FROZEN

    start_line: int = Field(..., ge=1)
    end_line: int = Field(..., ge=1)
    kind: BlockKind
    declared_name: str | None = None
    depth: int = Field(default=0, ge=0, description="Number of enclosing blocks")
    leading_line: int | None = Field(
        default=None, description="First line of a doc-adjacent comment run before the header"
    )

    @model_validator(mode="after")
    def _ordered(self) -> BlockSpan:
        if self.end_line < self.start_line:
            raise ValueError("BlockSpan ends before it starts")
        return self

    @property
    def first_line(self) -> int:
        """First line belonging to the block, including its leading comments."""
        return self.leading_line or self.start_line

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


class IdentifierDecl(BaseModel):
    """A declared name together with its inferred role."""

    model_config = _FROZEN

    name: str
    role: IdentifierRole
    declared_at_line: int = Field(..., ge=1)
    case_pattern: CasePattern


class ParameterDecl(BaseModel):
    model_config = _FROZEN

    name: str
    annotation: str | None = None
    line: int = Field(..., ge=1)
    implicit: bool = Field(default=False, description="self/cls receiver")


class SignatureDecl(BaseModel):
    """Parameter and return positions of one function or component."""

    model_config = _FROZEN

    name: str
    line: int = Field(..., ge=1)
    parameters: tuple[ParameterDecl, ...] = ()
    return_annotation: str | None = None
    return_line: int = Field(..., ge=1)
    contextually_typed: bool = Field(
        default=False, description="Whole signature typed by a declared binding type"
    )


class TerminalStatement(BaseModel):
    """A return statement, with the facts needed to judge its complexity."""

    model_config = _FROZEN

    line: int = Field(..., ge=1)
    end_line: int = Field(..., ge=1)
    has_conditional: bool = False

    @property
    def line_count(self) -> int:
        return self.end_line - self.line + 1


class HeadingDecl(BaseModel):
    model_config = _FROZEN

    line: int = Field(..., ge=1)
    depth: int = Field(..., ge=1)
    text: str = ""


class ListItemDecl(BaseModel):
    model_config = _FROZEN

    line: int = Field(..., ge=1)
    indent: int = Field(..., ge=0)


class Fragment(BaseModel):
    """An embedded fenced block, modelled in its own coordinates."""

    model_config = _FROZEN

    tag: str = ""
    language: LanguageKind
    start_line: int = Field(..., ge=1, description="Opening fence line")
    end_line: int = Field(..., ge=1, description="Closing fence line")
    line_offset: int = Field(..., ge=0, description="Added to fragment line numbers")
    model: StructuralModel | None = None
    parse_error: str | None = None


class StructuralModel(BaseModel):
    """Complete structural representation of one file or fragment."""

    model_config = _FROZEN

    file_path: str = ""
    language: LanguageKind
    dialect: str = ""
    lines: tuple[LogicalLine, ...] = ()
    blocks: tuple[BlockSpan, ...] = ()
    identifiers: tuple[IdentifierDecl, ...] = ()
    signatures: tuple[SignatureDecl, ...] = ()
    terminals: tuple[TerminalStatement, ...] = ()
    imports_end_line: int | None = None
    headings: tuple[HeadingDecl, ...] = ()
    list_items: tuple[ListItemDecl, ...] = ()
    thematic_breaks: tuple[int, ...] = ()
    fragments: tuple[Fragment, ...] = ()
    parse_warnings: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _within_bounds(self) -> StructuralModel:
        total = len(self.lines)
        for expected, line in enumerate(self.lines, start=1):
            if line.index != expected:
                raise ValueError(f"Line index {line.index} out of sequence (expected {expected})")
        for block in self.blocks:
            if block.end_line > total:
                raise ValueError(f"BlockSpan {block.start_line}-{block.end_line} exceeds {total} lines")
        for ident in self.identifiers:
            if ident.declared_at_line > total:
                raise ValueError(f"Identifier '{ident.name}' declared past end of file")
        return self

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    def line(self, index: int) -> LogicalLine:
        """Line by 1-based index."""
        return self.lines[index - 1]

    def blank_runs(self) -> list[tuple[int, int]]:
        """(first, last) line of every run of consecutive blank lines."""
        runs: list[tuple[int, int]] = []
        start: int | None = None
        for line in self.lines:
            if line.kind == LineKind.BLANK:
                if start is None:
                    start = line.index
            elif start is not None:
                runs.append((start, line.index - 1))
                start = None
        if start is not None:
            runs.append((start, self.total_lines))
        return runs


Fragment.model_rebuild()
