"""Scanner, parser, and tree printers for Lox expressions."""

from __future__ import annotations

__version__ = "0.1.0"


def to_prefix(source: str) -> str | None:
    """Parse source and render it in prefix form, or None if it has errors."""
    from loxexpr.parser import parse
    from loxexpr.printer import print_prefix

    result = parse(source)
    if result.expression is None or result.diagnostics.had_error:
        return None
    return print_prefix(result.expression)


def to_postfix(source: str) -> str | None:
    """Parse source and render it in postfix form, or None if it has errors."""
    from loxexpr.parser import parse
    from loxexpr.printer import print_postfix

    result = parse(source)
    if result.expression is None or result.diagnostics.had_error:
        return None
    return print_postfix(result.expression)
