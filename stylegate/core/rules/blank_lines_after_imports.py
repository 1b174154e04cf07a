"""
Blank Lines After Imports Rule — Exact spacing between imports and the first block.
"""

from __future__ import annotations

from stylegate.core.rules.common import code_blocks, make_violation, plural
from stylegate.models.rule_models import Rule, RuleCategory, Violation
from stylegate.models.rule_params import AfterImportsParams
from stylegate.models.structure_models import LanguageKind, LineKind, StructuralModel

CHECK_ID = "blank-lines-after-imports"
CATEGORY = RuleCategory.SPACING
LANGUAGES = frozenset({LanguageKind.INDENT_BLOCK, LanguageKind.COMPONENT_MARKUP})
FILE_SCOPE = False


def check(model: StructuralModel, rule: Rule) -> list[Violation]:
    params: AfterImportsParams = rule.params
    imports_end = model.imports_end_line
    if imports_end is None:
        return []
    following = [b for b in code_blocks(model) if b.first_line > imports_end]
    if not following:
        return []
    first_block = min(following, key=lambda b: b.first_line)

    gap = range(imports_end + 1, first_block.first_line)
    # Only the run directly between the imports and the block is measured
    if any(model.line(i).kind != LineKind.BLANK for i in gap):
        return []
    found = len(gap)
    if found == params.exact:
        return []
    start, end = (gap.start, gap.stop - 1) if found else (first_block.first_line, first_block.first_line)
    return [
        make_violation(
            model,
            rule,
            start,
            f"Expected {plural(params.exact, 'blank line')} after imports, found {found}",
            line_end=end,
        )
    ]
