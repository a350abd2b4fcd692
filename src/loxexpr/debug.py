"""--debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from loxexpr.ast import Binary, Expr, Grouping, Literal, Ternary, Unary, children
from loxexpr.printer import format_literal


def dump_ast(expr: Expr, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*, one node per line."""
    stack: list[tuple[Expr, int]] = [(expr, 0)]
    while stack:
        node, depth = stack.pop()
        file.write(f"{_indent(depth)}{_describe(node)}\n")
        for child in reversed(children(node)):
            stack.append((child, depth + 1))


def _indent(depth: int) -> str:
    return "  " * depth


def _describe(expr: Expr) -> str:
    if isinstance(expr, Literal):
        return f"Literal {_literal_repr(expr)}"
    if isinstance(expr, Grouping):
        return "Grouping"
    if isinstance(expr, Unary):
        return f"Unary {expr.operator.lexeme}"
    if isinstance(expr, Binary):
        return f"Binary {expr.operator.lexeme}"
    if isinstance(expr, Ternary):
        return "Ternary"
    raise TypeError(f"Not an expression node: {type(expr).__name__}")


def _literal_repr(expr: Literal) -> str:
    # Quote strings so "1" and 1 dump differently
    if isinstance(expr.value, str):
        return repr(expr.value)
    return format_literal(expr.value)
