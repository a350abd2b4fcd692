"""Lox expression parser: converts a token stream into an AST."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loxexpr.ast import Binary, Expr, Grouping, Literal, Ternary, Unary
from loxexpr.errors import Diagnostics, ParseError
from loxexpr.scanner import scan
from loxexpr.tokens import Token, TokenKind


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of a parse: the expression (None on failure) and all diagnostics."""

    expression: Expr | None
    diagnostics: Diagnostics

    @property
    def ok(self) -> bool:
        return self.expression is not None and not self.diagnostics.had_error


class Parser:
    """Recursive descent parser for Lox expressions.

    One method per grammar level, lowest precedence first:

        sequence   -> ternary ( "," ternary )*
        ternary    -> expression ( "?" expression ":" ternary )?
        expression -> equality
        equality   -> comparison ( ( "!=" | "==" ) comparison )*
        comparison -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
        term       -> factor ( ( "-" | "+" ) factor )*
        factor     -> unary ( ( "/" | "*" ) unary )*
        unary      -> ( "!" | "-" ) unary | primary
        primary    -> NUMBER | STRING | "true" | "false" | "nil"
                    | "(" sequence ")"
    """

    def __init__(self, tokens: list[Token], diagnostics: Diagnostics | None = None) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            raise ValueError("token list must end with an EOF token")
        self._tokens = tokens
        self._diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _previous(self) -> Token:
        return self._tokens[self._pos - 1]

    def _at_end(self) -> bool:
        return self._peek().kind == TokenKind.EOF

    def _check(self, kind: TokenKind) -> bool:
        return not self._at_end() and self._peek().kind == kind

    def _advance(self) -> Token:
        if not self._at_end():
            self._pos += 1
        return self._previous()

    def _match(self, kinds: frozenset[TokenKind]) -> Token | None:
        """Consume and return the current token if its kind is in kinds."""
        if not self._at_end() and self._peek().kind in kinds:
            return self._advance()
        return None

    def _expect(self, kind: TokenKind, message: str) -> Token:
        if self._check(kind):
            return self._advance()
        raise self._error(self._peek(), message)

    def _error(self, token: Token, message: str) -> ParseError:
        return ParseError(self._diagnostics.token_error(token, message))

    @property
    def position(self) -> int:
        """Index of the next unconsumed token."""
        return self._pos

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def parse(self) -> ParseResult:
        """Parse the whole token list as a single expression.

        A syntax error is recorded in the diagnostics and yields a result
        with ``expression=None``; nothing is raised.
        """
        try:
            expression = self._sequence()
            if not self._at_end():
                raise self._error(self._peek(), "Expect end of expression.")
        except ParseError:
            # A single top-level expression leaves nothing to resume; once
            # there are several, recovery calls synchronize() here.
            return ParseResult(None, self._diagnostics)
        except RecursionError:
            self._diagnostics.token_error(self._peek(), "Expression nested too deeply.")
            return ParseResult(None, self._diagnostics)
        return ParseResult(expression, self._diagnostics)

    def synchronize(self) -> None:
        """Discard tokens until a likely construct boundary.

        Always consumes at least one token unless already at EOF. Stops after
        a ';' or before a keyword that starts a statement.
        """
        self._advance()

        while not self._at_end():
            if self._previous().kind == TokenKind.SEMICOLON:
                return
            if self._peek().kind in _STATEMENT_STARTS:
                return
            self._advance()

    # ------------------------------------------------------------------
    # Grammar levels
    # ------------------------------------------------------------------

    def _sequence(self) -> Expr:
        # Lowest precedence, left associative
        expr = self._ternary()
        while (operator := self._match(_COMMA)) is not None:
            right = self._ternary()
            expr = Binary(expr, operator, right)
        return expr

    def _ternary(self) -> Expr:
        expr = self._expression()
        if self._match(_QUESTION) is None:
            return expr

        if_true = self._expression()
        self._expect(TokenKind.COLON, "Expect ':' after then branch of conditional expression.")
        # Right associative: the else branch re-enters this level
        if_false = self._ternary()
        return Ternary(expr, if_true, if_false)

    def _expression(self) -> Expr:
        return self._equality()

    def _equality(self) -> Expr:
        return self._left_assoc(self._comparison, _EQUALITY)

    def _comparison(self) -> Expr:
        return self._left_assoc(self._term, _COMPARISON)

    def _term(self) -> Expr:
        return self._left_assoc(self._factor, _TERM)

    def _factor(self) -> Expr:
        return self._left_assoc(self._unary, _FACTOR)

    def _left_assoc(self, operand: Callable[[], Expr], operators: frozenset[TokenKind]) -> Expr:
        """Parse operand ( op operand )* folding to the left: a-b-c is (a-b)-c."""
        expr = operand()
        while (operator := self._match(operators)) is not None:
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def _unary(self) -> Expr:
        operator = self._match(_UNARY)
        if operator is not None:
            return Unary(operator, self._unary())
        return self._primary()

    def _primary(self) -> Expr:
        if self._match(_FALSE) is not None:
            return Literal(False)
        if self._match(_TRUE) is not None:
            return Literal(True)
        if self._match(_NIL) is not None:
            return Literal(None)

        tok = self._match(_LITERALS)
        if tok is not None:
            return Literal(tok.literal)

        if self._match(_LEFT_PAREN) is not None:
            expr = self._sequence()
            self._expect(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self._error(self._peek(), "Expect expression.")


# Module-level constants
_COMMA: frozenset[TokenKind] = frozenset({TokenKind.COMMA})
_QUESTION: frozenset[TokenKind] = frozenset({TokenKind.QUESTION})
_EQUALITY: frozenset[TokenKind] = frozenset({TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL})
_COMPARISON: frozenset[TokenKind] = frozenset(
    {TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL}
)
_TERM: frozenset[TokenKind] = frozenset({TokenKind.MINUS, TokenKind.PLUS})
_FACTOR: frozenset[TokenKind] = frozenset({TokenKind.SLASH, TokenKind.STAR})
_UNARY: frozenset[TokenKind] = frozenset({TokenKind.BANG, TokenKind.MINUS})
_FALSE: frozenset[TokenKind] = frozenset({TokenKind.FALSE})
_TRUE: frozenset[TokenKind] = frozenset({TokenKind.TRUE})
_NIL: frozenset[TokenKind] = frozenset({TokenKind.NIL})
_LITERALS: frozenset[TokenKind] = frozenset({TokenKind.NUMBER, TokenKind.STRING})
_LEFT_PAREN: frozenset[TokenKind] = frozenset({TokenKind.LEFT_PAREN})
_STATEMENT_STARTS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.CLASS,
        TokenKind.FUN,
        TokenKind.VAR,
        TokenKind.FOR,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.PRINT,
        TokenKind.RETURN,
    }
)


def parse_tokens(tokens: list[Token], diagnostics: Diagnostics | None = None) -> ParseResult:
    """Parse an already-scanned token list."""
    return Parser(tokens, diagnostics).parse()


def parse(source: str) -> ParseResult:
    """Convenience function: scan and parse source text with one collector."""
    diagnostics = Diagnostics()
    tokens = scan(source, diagnostics)
    return Parser(tokens, diagnostics).parse()
