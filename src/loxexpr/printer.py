"""Prefix and postfix (reverse-Polish) string renderings of expression trees.

Both printers walk the tree with an explicit stack, so arbitrarily deep trees
(a long ``1 + 1 + ... + 1`` chain folds into one) render without recursion.
"""

from __future__ import annotations

from loxexpr.ast import Binary, Expr, Grouping, Literal, Ternary, Unary, children
from loxexpr.tokens import LiteralValue

TERNARY_OPERATOR = "?:"

# Largest magnitude still printed as a plain integer; beyond it repr() is used
_MAX_PLAIN_INTEGER = 1e16


class _Text(str):
    """Output text queued on the traversal stack between nodes."""


def format_literal(value: LiteralValue) -> str:
    """Render a literal value the way Lox source would spell it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < _MAX_PLAIN_INTEGER:
            return str(int(value))
        return repr(value)
    return str(value)


def _operator_name(expr: Expr) -> str:
    if isinstance(expr, Grouping):
        return "group"
    if isinstance(expr, (Unary, Binary)):
        return expr.operator.lexeme
    if isinstance(expr, Ternary):
        return TERNARY_OPERATOR
    raise TypeError(f"Not an expression node: {type(expr).__name__}")


def print_prefix(expr: Expr) -> str:
    """Render expr fully parenthesized with the operator first: (+ 1 (* 2 3))."""
    out: list[str] = []
    stack: list[Expr | _Text] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, _Text):
            out.append(item)
            continue
        if isinstance(item, Literal):
            out.append(format_literal(item.value))
            continue

        operands = children(item)
        out.append("(" + _operator_name(item))
        stack.append(_Text(")"))
        for operand in reversed(operands):
            stack.append(operand)
            stack.append(_Text(" "))
    return "".join(out)


def print_postfix(expr: Expr) -> str:
    """Render expr in reverse-Polish order: operands first, then the operator.

    Groupings are transparent since postfix order is already unambiguous.
    """
    out: list[str] = []
    stack: list[Expr | _Text] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, _Text):
            out.append(item)
            continue
        if isinstance(item, Literal):
            out.append(format_literal(item.value))
            continue
        if isinstance(item, Grouping):
            stack.append(item.expression)
            continue

        operands = children(item)
        stack.append(_Text(" " + _operator_name(item)))
        for index in range(len(operands) - 1, -1, -1):
            stack.append(operands[index])
            if index:
                stack.append(_Text(" "))
    return "".join(out)
