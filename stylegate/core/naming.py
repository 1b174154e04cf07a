"""
Identifier case classification, independent of the identifier's role.
"""

from __future__ import annotations

import re

from stylegate.models.structure_models import CasePattern

_CASE_REGEXES: dict[CasePattern, re.Pattern[str]] = {
    CasePattern.SNAKE_CASE: re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$"),
    CasePattern.CAMEL_CASE: re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    CasePattern.PASCAL_CASE: re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
    CasePattern.SCREAMING_SNAKE_CASE: re.compile(r"^[A-Z][A-Z0-9]*(_[A-Z0-9]+)*$"),
}

# Priority when a name is compatible with several patterns ("foo", "FOO")
_PRIMARY_ORDER = (
    CasePattern.SCREAMING_SNAKE_CASE,
    CasePattern.SNAKE_CASE,
    CasePattern.CAMEL_CASE,
    CasePattern.PASCAL_CASE,
)


def core_name(name: str) -> str:
    """Strip private/dunder underscores that carry no case information."""
    return name.strip("_")


def matching_patterns(name: str) -> frozenset[CasePattern]:
    """Every case pattern `name` is compatible with."""
    core = core_name(name)
    if not core:
        return frozenset()
    return frozenset(p for p, rx in _CASE_REGEXES.items() if rx.match(core))


def classify_case(name: str) -> CasePattern:
    """The single most specific case pattern for `name`."""
    matches = matching_patterns(name)
    for pattern in _PRIMARY_ORDER:
        if pattern in matches:
            return pattern
    return CasePattern.MIXED


def conforms(name: str, required: CasePattern) -> bool:
    return required in matching_patterns(name)


def has_prefix(name: str, prefixes: tuple[str, ...]) -> bool:
    """True if `name` starts with one of `prefixes` as a whole word.

    Works for both separator styles: `is_valid` and `isValid` match "is",
    `island` does not.
    """
    core = core_name(name)
    for prefix in prefixes:
        if not core.lower().startswith(prefix.lower()):
            continue
        rest = core[len(prefix):]
        if not rest or rest[0] == "_" or rest[0].isupper() or rest[0].isdigit():
            return True
    return False
