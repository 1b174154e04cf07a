"""
Rule Engine — Orchestrates the rule evaluators for one file.

Classifies the file, builds its structural model and runs every enabled
rule that applies to the model's language. Evaluators are pure functions
of (model, rule); a fault in one becomes an error violation under that
rule's id and never stops the others. Embedded fragments are evaluated on
their own models and their violations shifted into file coordinates.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, NamedTuple

from stylegate.core.classifier import classify
from stylegate.core.exceptions import ParseError
from stylegate.core.extractors.common import split_lines
from stylegate.core.extractors.dispatch import extract
from stylegate.models.rule_models import (
    PARSE_ERROR_RULE_ID,
    Rule,
    RuleCategory,
    Ruleset,
    Severity,
    Violation,
)
from stylegate.models.structure_models import LanguageKind, StructuralModel

# Import all rule modules
from stylegate.core.rules import (
    behavior_comments,
    blank_lines_after_imports,
    blank_lines_between_blocks,
    blank_lines_inside_block,
    boolean_prefix,
    fence_language,
    file_length,
    heading_max_depth,
    heading_single_h1,
    line_length,
    list_indent,
    naming_case,
    section_separator,
    trailing_whitespace,
    type_annotations,
)

logger = logging.getLogger("stylegate.engine")

# Type for a rule check function
RuleCheckFn = Callable[[StructuralModel, Rule], list[Violation]]


class Evaluator(NamedTuple):
    check: RuleCheckFn
    languages: frozenset[LanguageKind]
    file_scope: bool


_RULE_MODULES = (
    file_length,
    line_length,
    trailing_whitespace,
    blank_lines_between_blocks,
    blank_lines_inside_block,
    blank_lines_after_imports,
    behavior_comments,
    naming_case,
    boolean_prefix,
    type_annotations,
    heading_single_h1,
    heading_max_depth,
    section_separator,
    fence_language,
    list_indent,
)

# Registry of all evaluators, keyed by check name
RULE_REGISTRY: dict[str, Evaluator] = {
    module.CHECK_ID: Evaluator(module.check, module.LANGUAGES, module.FILE_SCOPE)
    for module in _RULE_MODULES
}


def parse_error_violation(file: str, message: str, line_start: int, line_end: int | None = None) -> Violation:
    return Violation(
        file=file,
        line_start=line_start,
        line_end=line_end if line_end is not None else line_start,
        rule_id=PARSE_ERROR_RULE_ID,
        category=RuleCategory.INTERNAL,
        severity=Severity.ERROR,
        message=message,
    )


class RuleEngine:
    """
    Evaluates a read-only Ruleset against structural models.

    Holds no per-file state, so one instance serves every worker thread.
    """

    def __init__(self, ruleset: Ruleset, registry: dict[str, Evaluator] | None = None) -> None:
        self.ruleset = ruleset
        self.registry = registry or RULE_REGISTRY
        self._rules = ruleset.enabled_rules()

    def evaluate(self, model: StructuralModel, *, fragment: bool = False) -> list[Violation]:
        """
        Run every applicable enabled rule against one model.

        Args:
            model: The structural model of a file or embedded fragment.
            fragment: True for fragments, which skip whole-file rules.

        Returns:
            Violations in the model's own line coordinates.
        """
        violations: list[Violation] = []
        for rule in self._rules:
            evaluator = self.registry.get(rule.check)
            if evaluator is None:
                continue
            if model.language not in evaluator.languages:
                continue
            if fragment and evaluator.file_scope:
                continue
            try:
                violations.extend(evaluator.check(model, rule))
            except Exception as e:
                # Rule failures should not crash the engine
                logger.exception(f"Rule '{rule.id}' failed on {model.file_path or '<fragment>'}")
                if not model.total_lines and not fragment:
                    # An empty file has no line to anchor the failure to
                    continue
                violations.append(
                    Violation(
                        file=model.file_path,
                        line_start=1,
                        line_end=1,
                        rule_id=rule.id,
                        category=rule.category,
                        severity=Severity.ERROR,
                        message=f"Rule '{rule.id}' internal error: {type(e).__name__}: {e}",
                    )
                )

        for embedded in model.fragments:
            if embedded.parse_error is not None:
                violations.append(
                    parse_error_violation(
                        model.file_path,
                        f"Embedded '{embedded.tag or 'untagged'}' block could not be parsed: "
                        f"{embedded.parse_error}",
                        embedded.start_line,
                        embedded.end_line,
                    )
                )
            elif embedded.model is not None:
                violations.extend(
                    v.shifted(embedded.line_offset)
                    for v in self.evaluate(embedded.model, fragment=True)
                )
        return violations

    def check_file(self, path: str, content: str) -> list[Violation]:
        """Classify, model and evaluate one file's content."""
        start = time.monotonic()
        kind, dialect = classify(path, content)
        try:
            model = extract(
                kind,
                content,
                file_path=path,
                dialect=dialect,
                recovery_budget=self.ruleset.recovery_budget,
            )
        except ParseError as e:
            logger.warning(f"Parse error in {path}: {e}")
            last = max(1, len(split_lines(content)))
            line = min(max(e.line or 1, 1), last)
            return [parse_error_violation(path, f"Cannot model {kind.value} content: {e.message}", line)]
        except Exception as e:
            logger.exception(f"Extractor failed on {path}")
            return [parse_error_violation(path, f"Extractor failed: {type(e).__name__}: {e}", 1)]

        for warning in model.parse_warnings:
            logger.debug(f"{path}: {warning}")
        violations = self.evaluate(model)
        elapsed = (time.monotonic() - start) * 1000
        logger.debug(
            f"Checked {path} as {kind.value} in {elapsed:.1f}ms: {len(violations)} violations"
        )
        return violations
