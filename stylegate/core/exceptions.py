"""
StyleGate error taxonomy.

ConfigError is fatal for a run. ParseError is recorded per file (or per
embedded fragment) and never stops other work.
"""

from __future__ import annotations


class StyleGateError(Exception):
    """Base class for errors raised by the engine."""


class ConfigError(StyleGateError):
    """The ruleset configuration is malformed or ambiguous."""


class ParseError(StyleGateError):
    """Content could not be structurally modelled."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.message} (line {self.line})"
        return self.message
