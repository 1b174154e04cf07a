"""
Extractor Dispatch — The single point selecting a strategy per LanguageKind.

Every strategy is a module-level `extract(content, *, file_path, dialect,
recovery_budget)` function; none keeps state between calls.
"""

from __future__ import annotations

from typing import Callable

from stylegate.core.extractors import component_markup, indent_block, plain, prose_markup
from stylegate.models.structure_models import LanguageKind, StructuralModel

Extractor = Callable[..., StructuralModel]

EXTRACTORS: dict[LanguageKind, Extractor] = {
    LanguageKind.INDENT_BLOCK: indent_block.extract,
    LanguageKind.COMPONENT_MARKUP: component_markup.extract,
    LanguageKind.PROSE_MARKUP: prose_markup.extract,
    LanguageKind.UNCLASSIFIED: plain.extract,
}


def extract(
    kind: LanguageKind,
    content: str,
    *,
    file_path: str = "",
    dialect: str = "",
    recovery_budget: int = 2,
) -> StructuralModel:
    """Build the structural model of `content` with the strategy for `kind`.

    Raises:
        ParseError: when line or block boundaries cannot be determined.
    """
    strategy = EXTRACTORS[kind]
    return strategy(content, file_path=file_path, dialect=dialect, recovery_budget=recovery_budget)
