"""
Tests for the indent-block extractor — lines, spans and declarations.
"""

import pytest

from stylegate.core.exceptions import ParseError
from stylegate.core.extractors.indent_block import extract
from stylegate.models.structure_models import BlockKind, IdentifierRole, LanguageKind, LineKind


def test_line_kinds(clean_python_code):
    model = extract(clean_python_code, file_path="geometry.py")
    assert model.language == LanguageKind.INDENT_BLOCK
    assert model.total_lines == 10
    assert model.line(1).kind == LineKind.DOCSTRING
    assert model.line(2).kind == LineKind.BLANK
    assert model.line(3).kind == LineKind.CODE
    assert model.line(6).kind == LineKind.DOCSTRING
    assert model.imports_end_line == 3


def test_function_spans(clean_python_code):
    model = extract(clean_python_code)
    spans = [(b.declared_name, b.start_line, b.end_line, b.depth) for b in model.blocks]
    assert spans == [("area", 5, 7, 0), ("is_unit", 9, 10, 0)]


def test_decorators_belong_to_block():
    code = "import functools\n\n@functools.cache\ndef cached(x: int) -> int:\n    return x\n"
    model = extract(code)
    block = model.blocks[0]
    assert (block.start_line, block.end_line, block.declared_name) == (3, 5, "cached")


def test_methods_nest_inside_class():
    code = (
        "class Box:\n"
        "    def open(self) -> None:\n"
        "        pass\n"
        "\n"
        "    def close(self) -> None:\n"
        "        pass\n"
    )
    model = extract(code)
    spans = [(b.kind, b.declared_name, b.start_line, b.end_line, b.depth) for b in model.blocks]
    assert spans == [
        (BlockKind.CLASS, "Box", 1, 6, 0),
        (BlockKind.FUNCTION, "open", 2, 3, 1),
        (BlockKind.FUNCTION, "close", 5, 6, 1),
    ]
    receivers = [p.implicit for sig in model.signatures for p in sig.parameters]
    assert receivers == [True, True]


def test_blank_line_in_string_is_code():
    code = 'TEXT = """\n\nend"""\n'
    model = extract(code)
    assert model.line(2).kind == LineKind.CODE
    assert model.blank_runs() == []


def test_comment_above_header_is_doc_adjacent():
    code = "# Loads the settings\ndef load() -> None:\n    # read it\n    pass\n"
    model = extract(code)
    assert model.line(1).doc_adjacent
    assert not model.line(3).doc_adjacent
    assert model.blocks[0].leading_line == 1
    assert model.blocks[0].first_line == 1


def test_identifier_roles():
    code = (
        "from typing import Final, TypeVar\n"
        "\n"
        "LIMIT: Final = 3\n"
        "T = TypeVar('T')\n"
        "Pairs = list[tuple[int, int]]\n"
        "count = 0\n"
        "\n"
        "def tally(items: list) -> int:\n"
        "    subtotal = len(items)\n"
        "    return subtotal\n"
    )
    model = extract(code)
    roles = {ident.name: ident.role for ident in model.identifiers}
    assert roles == {
        "LIMIT": IdentifierRole.CONSTANT,
        "T": IdentifierRole.TYPE_ALIAS,
        "Pairs": IdentifierRole.TYPE_ALIAS,
        "count": IdentifierRole.VARIABLE,
        "tally": IdentifierRole.FUNCTION,
        "subtotal": IdentifierRole.VARIABLE,
    }


def test_signature_positions():
    code = (
        "def connect(\n"
        "    host: str,\n"
        "    port,\n"
        "    *args,\n"
        "    timeout: float = 1.0,\n"
        "):\n"
        "    pass\n"
    )
    model = extract(code)
    sig = model.signatures[0]
    assert [(p.name, p.annotation, p.line) for p in sig.parameters] == [
        ("host", "str", 2),
        ("port", None, 3),
        ("*args", None, 4),
        ("timeout", "float", 5),
    ]
    assert sig.return_annotation is None
    assert sig.return_line == 5


def test_staticmethod_has_no_receiver():
    code = (
        "class Util:\n"
        "    @staticmethod\n"
        "    def parse(text: str) -> int:\n"
        "        return int(text)\n"
    )
    model = extract(code)
    assert [p.implicit for p in model.signatures[0].parameters] == [False]


def test_terminal_statements():
    code = (
        "def pick(flag: bool, a: int, b: int) -> int:\n"
        "    return a if flag else b\n"
        "\n"
        "def build(a: int) -> dict:\n"
        "    return {\n"
        "        'a': a,\n"
        "    }\n"
    )
    model = extract(code)
    terminals = [(t.line, t.end_line, t.has_conditional) for t in model.terminals]
    assert terminals == [(2, 2, True), (5, 7, False)]


def test_unparsable_snippet_keeps_lines_and_spans():
    model = extract("def broken():\n    return = 1\n")
    assert model.parse_warnings
    assert model.blocks[0].declared_name == "broken"
    assert [ident.name for ident in model.identifiers] == ["broken"]
    assert model.signatures == ()


@pytest.mark.parametrize(
    "code",
    [
        'x = """never closed\n',
        "values = (1,\n    2,\n",
    ],
)
def test_undeterminable_structure_raises(code):
    with pytest.raises(ParseError):
        extract(code)


def test_empty_content():
    model = extract("")
    assert model.total_lines == 0
    assert model.blocks == ()
