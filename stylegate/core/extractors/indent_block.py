"""
Indent-Block Extractor — Structural model for indentation-based source.

Lines, comments and statement boundaries come from the `tokenize` module.
A def/class header (with its decorators) opens a span covering every
following statement indented deeper than the header; the span ends at the
first statement whose indentation is at or above the header's.

Identifiers, signatures, docstrings, the import region and return
statements come from `ast`. Snippets that tokenize but do not parse keep
their lines and spans and record a parse warning instead.
"""

from __future__ import annotations

import ast
import io
import re
import tokenize
from dataclasses import dataclass, field

from stylegate.core.exceptions import ParseError
from stylegate.core.extractors.common import (
    attach_leading_comments,
    build_lines,
    indent_of,
    nesting_depths,
    split_lines,
)
from stylegate.core.naming import classify_case
from stylegate.models.structure_models import (
    BlockKind,
    BlockSpan,
    IdentifierDecl,
    IdentifierRole,
    LanguageKind,
    LineKind,
    ParameterDecl,
    SignatureDecl,
    StructuralModel,
    TerminalStatement,
)

_HEADER = re.compile(r"^\s*(?:async\s+)?(def|class)\s+([A-Za-z_]\w*)")

_LAYOUT_TOKENS = frozenset(
    {
        tokenize.NL,
        tokenize.NEWLINE,
        tokenize.COMMENT,
        tokenize.INDENT,
        tokenize.DEDENT,
        tokenize.ENDMARKER,
        tokenize.ENCODING,
    }
)

_TYPING_CONSTRUCTORS = frozenset(
    {"TypeVar", "NewType", "ParamSpec", "TypeVarTuple", "NamedTuple", "TypedDict"}
)
_TYPING_GENERICS = frozenset(
    {
        "Union", "Optional", "Callable", "Literal", "Annotated", "Dict", "List",
        "Tuple", "Set", "FrozenSet", "Type", "Mapping", "Sequence", "Iterable",
        "Iterator", "dict", "list", "tuple", "set", "frozenset", "type",
    }
)


@dataclass
class _TokenFacts:
    comment_rows: set[int] = field(default_factory=set)
    code_rows: set[int] = field(default_factory=set)
    continued_rows: set[int] = field(default_factory=set)
    statements: dict[int, int] = field(default_factory=dict)


def _scan_tokens(content: str) -> _TokenFacts:
    """Collect comment rows, string interiors and logical statement ranges."""
    facts = _TokenFacts()
    stmt_start: int | None = None
    try:
        for tok in tokenize.generate_tokens(io.StringIO(content).readline):
            srow, erow = tok.start[0], tok.end[0]
            if tok.type == tokenize.COMMENT:
                facts.comment_rows.add(srow)
                continue
            if tok.type == tokenize.NEWLINE:
                if stmt_start is not None:
                    facts.statements[stmt_start] = srow
                stmt_start = None
                continue
            if tok.type in _LAYOUT_TOKENS:
                continue
            facts.code_rows.add(srow)
            if erow > srow:
                facts.continued_rows.update(range(srow + 1, erow + 1))
            if stmt_start is None:
                stmt_start = srow
    except tokenize.TokenError as e:
        position = e.args[1] if len(e.args) > 1 else None
        line = position[0] if isinstance(position, tuple) else None
        raise ParseError(f"Cannot determine line structure: {e.args[0]}", line) from None
    except SyntaxError as e:
        raise ParseError(f"Cannot determine line structure: {e.msg}", e.lineno) from None

    if stmt_start is not None:
        facts.statements[stmt_start] = max(facts.code_rows)
    return facts


def _find_blocks(raw_lines: list[str], facts: _TokenFacts) -> list[tuple[int, int, BlockKind, str]]:
    starts = sorted(facts.statements)
    found: list[tuple[int, int, BlockKind, str]] = []
    for pos, row in enumerate(starts):
        match = _HEADER.match(raw_lines[row - 1])
        if not match:
            continue
        header_indent = indent_of(raw_lines[row - 1])

        end = facts.statements[row]
        for later in starts[pos + 1:]:
            if indent_of(raw_lines[later - 1]) <= header_indent:
                break
            end = facts.statements[later]

        first = row
        back = pos - 1
        while back >= 0:
            prev = starts[back]
            text = raw_lines[prev - 1]
            adjacent = facts.statements[prev] == first - 1
            if not (adjacent and text.lstrip().startswith("@") and indent_of(text) == header_indent):
                break
            first = prev
            back -= 1

        kind = BlockKind.CLASS if match.group(1) == "class" else BlockKind.FUNCTION
        found.append((first, end, kind, match.group(2)))
    return found


def _unparse(node: ast.expr | None) -> str | None:
    return ast.unparse(node) if node is not None else None


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _looks_like_type(value: ast.expr | None) -> bool:
    if isinstance(value, ast.Call):
        func = value.func
        name = func.id if isinstance(func, ast.Name) else getattr(func, "attr", "")
        return name in _TYPING_CONSTRUCTORS
    if isinstance(value, ast.Subscript):
        base = value.value
        name = base.id if isinstance(base, ast.Name) else getattr(base, "attr", "")
        return name in _TYPING_GENERICS
    return False


def _module_binding_role(name: str, annotation: ast.expr | None, value: ast.expr | None) -> IdentifierRole:
    ann = _unparse(annotation) or ""
    if ann.split("[")[0].split(".")[-1] == "TypeAlias":
        return IdentifierRole.TYPE_ALIAS
    if ann.split("[")[0].split(".")[-1] == "Final":
        return IdentifierRole.CONSTANT
    if _looks_like_type(value):
        return IdentifierRole.TYPE_ALIAS
    if classify_case(name).value == "screaming_snake_case":
        return IdentifierRole.CONSTANT
    return IdentifierRole.VARIABLE


def _decorator_name(node: ast.expr) -> str:
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Attribute):
        return node.attr
    if isinstance(node, ast.Name):
        return node.id
    return ""


def _signature(node: ast.FunctionDef | ast.AsyncFunctionDef, is_method: bool) -> SignatureDecl:
    args = node.args
    positional = [*args.posonlyargs, *args.args]
    decorators = {_decorator_name(d) for d in node.decorator_list}
    has_receiver = is_method and "staticmethod" not in decorators

    params: list[ParameterDecl] = []
    for i, arg in enumerate(positional):
        params.append(
            ParameterDecl(
                name=arg.arg,
                annotation=_unparse(arg.annotation),
                line=arg.lineno,
                implicit=has_receiver and i == 0,
            )
        )
    if args.vararg:
        params.append(
            ParameterDecl(
                name=f"*{args.vararg.arg}",
                annotation=_unparse(args.vararg.annotation),
                line=args.vararg.lineno,
            )
        )
    for arg in args.kwonlyargs:
        params.append(
            ParameterDecl(name=arg.arg, annotation=_unparse(arg.annotation), line=arg.lineno)
        )
    if args.kwarg:
        params.append(
            ParameterDecl(
                name=f"**{args.kwarg.arg}",
                annotation=_unparse(args.kwarg.annotation),
                line=args.kwarg.lineno,
            )
        )

    if node.returns is not None:
        return_line = node.returns.lineno
    else:
        return_line = max([node.lineno] + [p.line for p in params])

    return SignatureDecl(
        name=node.name,
        line=node.lineno,
        parameters=tuple(params),
        return_annotation=_unparse(node.returns),
        return_line=return_line,
    )


class _DeclarationCollector:
    """Walks statement lists collecting identifiers and signatures by scope."""

    def __init__(self) -> None:
        self.identifiers: list[IdentifierDecl] = []
        self.signatures: list[SignatureDecl] = []

    def _add(self, name: str, role: IdentifierRole, line: int, seen: set[str]) -> None:
        if _is_dunder(name) or name in seen:
            return
        seen.add(name)
        self.identifiers.append(
            IdentifierDecl(
                name=name, role=role, declared_at_line=line, case_pattern=classify_case(name)
            )
        )

    def _bind(self, target: ast.expr, scope: str, annotation, value, seen: set[str]) -> None:
        if isinstance(target, ast.Name):
            if scope == "module":
                role = _module_binding_role(target.id, annotation, value)
            else:
                role = IdentifierRole.VARIABLE
            self._add(target.id, role, target.lineno, seen)
        elif isinstance(target, (ast.Tuple, ast.List)):
            for elt in target.elts:
                self._bind(elt, scope, None, None, seen)

    def collect(self, body: list[ast.stmt], scope: str, seen: set[str]) -> None:
        for node in body:
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                self._add(node.name, IdentifierRole.FUNCTION, node.lineno, seen)
                self.signatures.append(_signature(node, is_method=scope == "class"))
                self.collect(node.body, "function", set())
            elif isinstance(node, ast.ClassDef):
                self.collect(node.body, "class", set())
            elif scope == "class":
                continue
            elif isinstance(node, ast.Assign):
                for target in node.targets:
                    self._bind(target, scope, None, node.value, seen)
            elif isinstance(node, ast.AnnAssign):
                self._bind(node.target, scope, node.annotation, node.value, seen)
            elif type(node).__name__ == "TypeAlias":
                self._add(node.name.id, IdentifierRole.TYPE_ALIAS, node.lineno, seen)
            else:
                for child in ast.iter_child_nodes(node):
                    if isinstance(child, ast.stmt):
                        self.collect([child], scope, seen)
                    elif isinstance(child, (ast.ExceptHandler, ast.match_case)):
                        self.collect(child.body, scope, seen)


def _docstring_rows(tree: ast.Module) -> set[int]:
    rows: set[int] = set()
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Module, ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            continue
        if not node.body:
            continue
        first = node.body[0]
        if (
            isinstance(first, ast.Expr)
            and isinstance(first.value, ast.Constant)
            and isinstance(first.value.value, str)
        ):
            rows.update(range(first.lineno, first.end_lineno + 1))
    return rows


def _imports_end(tree: ast.Module) -> int | None:
    end: int | None = None
    for pos, stmt in enumerate(tree.body):
        is_docstring = (
            pos == 0
            and isinstance(stmt, ast.Expr)
            and isinstance(stmt.value, ast.Constant)
            and isinstance(stmt.value.value, str)
        )
        if is_docstring:
            continue
        if isinstance(stmt, (ast.Import, ast.ImportFrom)):
            end = stmt.end_lineno
            continue
        break
    return end


def _terminals(tree: ast.Module) -> list[TerminalStatement]:
    found = [
        TerminalStatement(
            line=node.lineno,
            end_line=node.end_lineno or node.lineno,
            has_conditional=any(
                isinstance(n, (ast.IfExp, ast.BoolOp)) for n in ast.walk(node)
            ),
        )
        for node in ast.walk(tree)
        if isinstance(node, ast.Return)
    ]
    return sorted(found, key=lambda t: t.line)


def extract(
    content: str,
    *,
    file_path: str = "",
    dialect: str = "py",
    recovery_budget: int = 2,
) -> StructuralModel:
    """Build the structural model of indentation-based source."""
    raw_lines = split_lines(content)
    facts = _scan_tokens(content)

    warnings: list[str] = []
    tree: ast.Module | None
    try:
        tree = ast.parse(content, filename=file_path or "<fragment>")
    except (SyntaxError, ValueError) as e:
        tree = None
        where = f" at line {e.lineno}" if isinstance(e, SyntaxError) and e.lineno else ""
        warnings.append(f"Source does not parse{where}; declarations not extracted")

    docstrings = _docstring_rows(tree) if tree else set()
    kinds: list[LineKind] = []
    for row, text in enumerate(raw_lines, start=1):
        if row in docstrings:
            kinds.append(LineKind.DOCSTRING)
        elif row in facts.continued_rows:
            kinds.append(LineKind.CODE)
        elif not text.strip():
            kinds.append(LineKind.BLANK)
        elif row in facts.comment_rows and row not in facts.code_rows:
            kinds.append(LineKind.COMMENT)
        else:
            kinds.append(LineKind.CODE)

    found = _find_blocks(raw_lines, facts)
    depths = nesting_depths([(start, end) for start, end, _, _ in found])
    blocks = [
        BlockSpan(start_line=start, end_line=end, kind=kind, declared_name=name, depth=depth)
        for (start, end, kind, name), depth in zip(found, depths)
    ]
    blocks, adjacent = attach_leading_comments(blocks, kinds)

    identifiers: list[IdentifierDecl] = []
    signatures: list[SignatureDecl] = []
    terminals: list[TerminalStatement] = []
    imports_end: int | None = None
    if tree is not None:
        collector = _DeclarationCollector()
        collector.collect(tree.body, "module", set())
        identifiers = collector.identifiers
        signatures = collector.signatures
        terminals = _terminals(tree)
        imports_end = _imports_end(tree)
    else:
        for start, _, kind, name in found:
            if kind == BlockKind.FUNCTION and not _is_dunder(name):
                header = next(
                    row for row in range(start, len(raw_lines) + 1)
                    if _HEADER.match(raw_lines[row - 1])
                )
                identifiers.append(
                    IdentifierDecl(
                        name=name,
                        role=IdentifierRole.FUNCTION,
                        declared_at_line=header,
                        case_pattern=classify_case(name),
                    )
                )

    return StructuralModel(
        file_path=file_path,
        language=LanguageKind.INDENT_BLOCK,
        dialect=dialect,
        lines=build_lines(raw_lines, kinds, adjacent),
        blocks=tuple(blocks),
        identifiers=tuple(identifiers),
        signatures=tuple(signatures),
        terminals=tuple(terminals),
        imports_end_line=imports_end,
        parse_warnings=tuple(warnings),
    )
