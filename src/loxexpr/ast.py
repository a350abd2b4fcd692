"""AST node types for parsed Lox expressions."""

from __future__ import annotations

from dataclasses import dataclass

from loxexpr.tokens import LiteralValue, Token


@dataclass(frozen=True, slots=True)
class Literal:
    """Number, string, boolean, or nil (None) value."""

    value: LiteralValue


@dataclass(frozen=True, slots=True)
class Grouping:
    """Parenthesized sub-expression, kept so printers can show it."""

    expression: Expr


@dataclass(frozen=True, slots=True)
class Unary:
    """Prefix '!' or '-' applied to an operand."""

    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Binary:
    """Infix operator, including the ',' sequence operator."""

    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, slots=True)
class Ternary:
    """Conditional expression: condition ? if_true : if_false."""

    condition: Expr
    if_true: Expr
    if_false: Expr


Expr = Literal | Grouping | Unary | Binary | Ternary


def children(expr: Expr) -> tuple[Expr, ...]:
    """Return the direct sub-expressions of expr, left to right."""
    if isinstance(expr, Literal):
        return ()
    if isinstance(expr, Grouping):
        return (expr.expression,)
    if isinstance(expr, Unary):
        return (expr.right,)
    if isinstance(expr, Binary):
        return (expr.left, expr.right)
    if isinstance(expr, Ternary):
        return (expr.condition, expr.if_true, expr.if_false)
    raise TypeError(f"Not an expression node: {type(expr).__name__}")


def count_nodes(expr: Expr) -> int:
    """Count every node in the tree rooted at expr."""
    total = 0
    stack = [expr]
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(children(node))
    return total
