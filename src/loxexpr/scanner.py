"""Lox expression scanner: converts source text into a flat token stream."""

from __future__ import annotations

from loxexpr.errors import Diagnostics
from loxexpr.tokens import (
    EQUAL_SUFFIX_TOKENS,
    KEYWORDS,
    SINGLE_CHAR_TOKENS,
    LiteralValue,
    Token,
    TokenKind,
    is_alpha,
    is_alpha_numeric,
    is_digit,
)


class Scanner:
    """Tokenize source text into a list of Token objects.

    Scanning never aborts: lexical errors go to the diagnostics collector and
    the rest of the input is still scanned.
    """

    def __init__(self, source: str, diagnostics: Diagnostics | None = None) -> None:
        self._source = source
        self._diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._start = 0  # start of the current lexeme
        self._pos = 0
        self._line = 1
        self._tokens: list[Token] = []

    @property
    def diagnostics(self) -> Diagnostics:
        return self._diagnostics

    def scan_tokens(self) -> list[Token]:
        """Scan the full source and return the token list, ending with EOF."""
        while not self._at_end():
            self._start = self._pos
            self._scan_token()

        self._tokens.append(Token(TokenKind.EOF, "", None, self._line))
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume the next character only if it equals expected."""
        if self._at_end() or self._source[self._pos] != expected:
            return False
        self._pos += 1
        return True

    def _emit(self, kind: TokenKind, literal: LiteralValue = None) -> Token:
        text = self._source[self._start : self._pos]
        tok = Token(kind, text, literal, self._line)
        self._tokens.append(tok)
        return tok

    def _error(self, message: str) -> None:
        self._diagnostics.error(self._line, message)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        ch = self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            self._emit(SINGLE_CHAR_TOKENS[ch])
            return

        if ch in EQUAL_SUFFIX_TOKENS:
            single, double = EQUAL_SUFFIX_TOKENS[ch]
            self._emit(double if self._match("=") else single)
            return

        if ch == "/":
            if self._match("/"):
                self._skip_line_comment()
            elif self._match("*"):
                self._skip_block_comment()
            else:
                self._emit(TokenKind.SLASH)
            return

        if ch in " \r\t":
            return

        if ch == "\n":
            self._line += 1
            return

        if ch == '"':
            self._lex_string()
            return

        if is_digit(ch):
            self._lex_number()
            return

        if is_alpha(ch):
            self._lex_identifier()
            return

        self._error("Unexpected character.")

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _skip_line_comment(self) -> None:
        while not self._at_end() and self._peek() != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        depth = 1
        while not self._at_end():
            if self._peek() == "/" and self._peek(1) == "*":
                self._advance()
                self._advance()
                depth += 1
                continue

            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                depth -= 1
                if depth == 0:
                    return
                continue

            if self._advance() == "\n":
                self._line += 1

        self._error("Unterminated block comment.")

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _lex_string(self) -> None:
        # No escape sequences: the first '"' always closes the string
        while not self._at_end() and self._peek() != '"':
            if self._advance() == "\n":
                self._line += 1

        if self._at_end():
            self._error("Unterminated string.")
            return

        self._advance()  # closing quote
        value = self._source[self._start + 1 : self._pos - 1]
        self._emit(TokenKind.STRING, value)

    def _lex_number(self) -> None:
        while is_digit(self._peek()):
            self._advance()

        # A trailing '.' without a digit after it is not part of the number
        if self._peek() == "." and is_digit(self._peek(1)):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        text = self._source[self._start : self._pos]
        self._emit(TokenKind.NUMBER, float(text))

    def _lex_identifier(self) -> None:
        while is_alpha_numeric(self._peek()):
            self._advance()

        text = self._source[self._start : self._pos]
        self._emit(KEYWORDS.get(text, TokenKind.IDENTIFIER))


def scan(source: str, diagnostics: Diagnostics | None = None) -> list[Token]:
    """Convenience function: scan source text and return the token list."""
    return Scanner(source, diagnostics).scan_tokens()
