"""
Language Classifier — Map a file (or a fenced fragment) to a LanguageKind.

Explicit extension / fence-tag mappings win. When the extension or tag is
absent or unknown, the content is sniffed; anything still undecided is
Unclassified and only receives the universal rules.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import NamedTuple

from stylegate.models.structure_models import LanguageKind


class Classification(NamedTuple):
    kind: LanguageKind
    dialect: str


_INDENT = LanguageKind.INDENT_BLOCK
_COMPONENT = LanguageKind.COMPONENT_MARKUP
_PROSE = LanguageKind.PROSE_MARKUP
_NONE = LanguageKind.UNCLASSIFIED

EXTENSION_MAP: dict[str, LanguageKind] = {
    ".py": _INDENT,
    ".pyi": _INDENT,
    ".pyw": _INDENT,
    ".js": _COMPONENT,
    ".jsx": _COMPONENT,
    ".mjs": _COMPONENT,
    ".cjs": _COMPONENT,
    ".ts": _COMPONENT,
    ".tsx": _COMPONENT,
    ".mts": _COMPONENT,
    ".cts": _COMPONENT,
    ".vue": _COMPONENT,
    ".svelte": _COMPONENT,
    ".md": _PROSE,
    ".markdown": _PROSE,
    ".mdx": _PROSE,
}

TAG_MAP: dict[str, LanguageKind] = {
    "python": _INDENT,
    "py": _INDENT,
    "python3": _INDENT,
    "pyi": _INDENT,
    "javascript": _COMPONENT,
    "js": _COMPONENT,
    "jsx": _COMPONENT,
    "mjs": _COMPONENT,
    "typescript": _COMPONENT,
    "ts": _COMPONENT,
    "tsx": _COMPONENT,
    "vue": _COMPONENT,
    "svelte": _COMPONENT,
    "markdown": _PROSE,
    "md": _PROSE,
    "mdx": _PROSE,
}

# Known formats that never carry the checked structure
UNCLASSIFIED_NAMES = frozenset(
    {
        "json", "jsonc", "yaml", "yml", "toml", "ini", "cfg", "conf", "csv",
        "txt", "text", "plain", "sh", "bash", "zsh", "shell", "console",
        "powershell", "ps1", "bat", "cmd", "html", "xml", "css", "scss",
        "sql", "diff", "patch", "env", "dockerfile", "makefile", "lock",
    }
)

_PY_SHEBANG = re.compile(r"^#!.*\bpython[\d.]*\b")
_NODE_SHEBANG = re.compile(r"^#!.*\b(node|deno|bun|ts-node)\b")
_PY_KEYWORD = re.compile(r"^\s*(def|class|async\s+def)\s+\w+.*:\s*(#.*)?$|^\s*(from\s+[\w.]+\s+)?import\s+\w")
_JS_KEYWORD = re.compile(
    r"^\s*(export\s+|import\s+.+\s+from\s+['\"]|const\s+\w+\s*=|let\s+\w+|function\s+\w*\s*\(|"
    r"interface\s+\w+|type\s+\w+\s*=)"
)
_HEADING = re.compile(r"^#{1,6}\s+\S")


def _sniff(content: str) -> LanguageKind:
    """Brace / indentation / marker heuristics for content of unknown kind."""
    lines = content.splitlines()
    if not lines:
        return _NONE
    first = lines[0]
    if _PY_SHEBANG.match(first):
        return _INDENT
    if _NODE_SHEBANG.match(first):
        return _COMPONENT

    sample = lines[:200]
    py_score = sum(1 for line in sample if _PY_KEYWORD.match(line))
    js_score = sum(1 for line in sample if _JS_KEYWORD.match(line))
    braces = sum(line.count("{") + line.count("}") + line.count(";") for line in sample)
    colon_blocks = sum(1 for line in sample if line.rstrip().endswith(":"))

    if py_score and py_score >= js_score and colon_blocks and braces <= colon_blocks * 2:
        return _INDENT
    if js_score and braces:
        return _COMPONENT

    first_content = next((line for line in sample if line.strip()), "")
    if _HEADING.match(first_content):
        return _PROSE
    return _NONE


def classify(path: str, content: str) -> Classification:
    """Classify a file by extension, falling back to content sniffing."""
    suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
    if suffix in EXTENSION_MAP:
        return Classification(EXTENSION_MAP[suffix], suffix.lstrip("."))
    if suffix and suffix.lstrip(".") in UNCLASSIFIED_NAMES:
        return Classification(_NONE, suffix.lstrip("."))
    return Classification(_sniff(content), suffix.lstrip("."))


def classify_tag(tag: str, content: str) -> Classification:
    """Classify a fenced fragment by its info-string language tag."""
    # Info strings may carry attributes after the language: ```python title="x"
    name = tag.strip().split(maxsplit=1)[0].lower() if tag.strip() else ""
    name = name.lstrip("{.").rstrip("}")
    if name in TAG_MAP:
        return Classification(TAG_MAP[name], name)
    if name in UNCLASSIFIED_NAMES:
        return Classification(_NONE, name)
    return Classification(_sniff(content), name)
