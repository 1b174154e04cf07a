"""
Plain Extractor — Line-only model for content of no recognised kind.

Only the universal line rules apply to unclassified content, so the model
carries nothing beyond its lines.
"""

from __future__ import annotations

from stylegate.core.extractors.common import build_lines, split_lines
from stylegate.models.structure_models import LanguageKind, LineKind, StructuralModel


def extract(
    content: str,
    *,
    file_path: str = "",
    dialect: str = "",
    recovery_budget: int = 2,
) -> StructuralModel:
    raw_lines = split_lines(content)
    kinds = [LineKind.CODE if line.strip() else LineKind.BLANK for line in raw_lines]
    return StructuralModel(
        file_path=file_path,
        language=LanguageKind.UNCLASSIFIED,
        dialect=dialect,
        lines=build_lines(raw_lines, kinds),
    )
