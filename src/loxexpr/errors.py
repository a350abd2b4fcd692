"""Diagnostics collection and error types with formatted source context."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

from loxexpr.tokens import Token, TokenKind


class Phase(Enum):
    LEXICAL = auto()
    SYNTAX = auto()


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reported error: 1-based line, location context, and message."""

    line: int
    where: str
    message: str
    phase: Phase = Phase.LEXICAL

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"

    def format(self, source: str | None = None, filename: str = "<script>") -> str:
        """Render the diagnostic, with a source snippet when source is given."""
        header = str(self)
        if source is None:
            return header

        lines = source.splitlines()
        line_idx = self.line - 1

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\r")
        else:
            source_line = ""

        # Tokens carry no column, so underline the whole line
        stripped = source_line.lstrip()
        pad = " " * (len(source_line) - len(stripped))
        carets = "^" * max(1, len(stripped.rstrip()))

        line_num = str(self.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"{header}\n"
            f"{' ' * gutter_width}--> {filename}:{self.line}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


@dataclass(slots=True)
class Diagnostics:
    """Ordered collector of diagnostics shared by the scanner and parser.

    Stands in for a global "had error" flag: callers check ``had_error``
    (or the collector's truthiness) after running a phase.
    """

    items: list[Diagnostic] = field(default_factory=list)

    def report(
        self, line: int, where: str, message: str, phase: Phase = Phase.LEXICAL
    ) -> Diagnostic:
        diagnostic = Diagnostic(line, where, message, phase)
        self.items.append(diagnostic)
        return diagnostic

    def error(self, line: int, message: str) -> Diagnostic:
        """Report a lexical error with no location context."""
        return self.report(line, "", message, Phase.LEXICAL)

    def token_error(self, token: Token, message: str) -> Diagnostic:
        """Report a syntax error located at token."""
        if token.kind == TokenKind.EOF:
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        return self.report(token.line, where, message, Phase.SYNTAX)

    @property
    def had_error(self) -> bool:
        return bool(self.items)

    def of_phase(self, phase: Phase) -> list[Diagnostic]:
        return [d for d in self.items if d.phase == phase]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return self.had_error


class ParseError(Exception):
    """Internal signal unwinding the parser to its top-level entry point."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        super().__init__(str(diagnostic))
