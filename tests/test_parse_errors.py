"""Tests for parser error messages, locations, and recovery."""

from __future__ import annotations

import pytest

from loxexpr.errors import Diagnostics, Phase
from loxexpr.parser import Parser, parse, parse_tokens
from loxexpr.scanner import scan
from loxexpr.tokens import Token, TokenKind


def only_syntax_error(result):
    errors = result.diagnostics.of_phase(Phase.SYNTAX)
    assert len(errors) == 1
    return errors[0]


class TestMissingParts:
    def test_empty_input(self, parse_failure):
        d = only_syntax_error(parse_failure(""))
        assert d.message == "Expect expression."
        assert d.where == " at end"
        assert d.line == 1

    def test_missing_right_operand(self, parse_failure):
        d = only_syntax_error(parse_failure("1 +"))
        assert d.message == "Expect expression."
        assert d.where == " at end"

    def test_missing_close_paren(self, parse_failure):
        d = only_syntax_error(parse_failure("(1 + 2"))
        assert d.message == "Expect ')' after expression."
        assert d.where == " at end"

    def test_missing_colon_at_end(self, parse_failure):
        d = only_syntax_error(parse_failure("1 ? 2"))
        assert d.message == "Expect ':' after then branch of conditional expression."
        assert d.where == " at end"

    def test_missing_colon_reports_offending_token(self, parse_failure):
        d = only_syntax_error(parse_failure("1 ? 2 3"))
        assert d.where == " at '3'"

    def test_missing_else_branch(self, parse_failure):
        d = only_syntax_error(parse_failure("1 ? 2 :"))
        assert d.message == "Expect expression."


class TestUnexpectedTokens:
    def test_leading_close_paren(self, parse_failure):
        d = only_syntax_error(parse_failure(")"))
        assert d.message == "Expect expression."
        assert d.where == " at ')'"

    def test_identifier_is_not_an_expression(self, parse_failure):
        d = only_syntax_error(parse_failure("a + 1"))
        assert d.where == " at 'a'"

    def test_trailing_tokens(self, parse_failure):
        d = only_syntax_error(parse_failure("1 2"))
        assert d.message == "Expect end of expression."
        assert d.where == " at '2'"

    def test_stray_close_paren(self, parse_failure):
        d = only_syntax_error(parse_failure("(1))"))
        assert d.message == "Expect end of expression."
        assert d.where == " at ')'"

    def test_comma_not_allowed_in_then_branch(self, parse_failure):
        d = only_syntax_error(parse_failure("1 ? 2, 3 : 4"))
        assert d.where == " at ','"

    def test_nested_ternary_needs_parens_in_then_branch(self, parse_failure):
        d = only_syntax_error(parse_failure("1 ? 2 ? 3 : 4 : 5"))
        assert d.where == " at '?'"

    def test_binary_operator_without_left_operand(self, parse_failure):
        d = only_syntax_error(parse_failure("* 2"))
        assert d.where == " at '*'"

    def test_error_line(self, parse_failure):
        d = only_syntax_error(parse_failure("1 +\n\n)"))
        assert d.line == 3

    def test_string_lexeme_in_context(self, parse_failure):
        d = only_syntax_error(parse_failure('1 "s"'))
        assert d.where == " at '\"s\"'"


class TestNoThrow:
    @pytest.mark.parametrize(
        "source",
        ["", "(", ")", "?", ":", ",", "1 ? : 2", "((((", "1 + * 2", "var x", "}", ";;", "!"],
    )
    def test_malformed_input_never_raises(self, source):
        result = parse(source)
        assert result.expression is None
        assert result.diagnostics.had_error

    def test_excessive_nesting_is_reported(self, parse_failure):
        depth = 5000
        result = parse_failure("(" * depth + "1" + ")" * depth)
        assert result.diagnostics.items[-1].message == "Expression nested too deeply."

    def test_first_error_aborts_parse(self, parse_failure):
        result = parse_failure(") ) )")
        assert len(result.diagnostics) == 1


class TestMixedPhases:
    def test_lexical_and_syntax_errors_share_collector(self):
        result = parse("1 + @")
        phases = [d.phase for d in result.diagnostics]
        assert phases == [Phase.LEXICAL, Phase.SYNTAX]

    def test_lexical_error_with_valid_expression(self):
        result = parse("1 @ + 2")
        assert result.expression is not None
        assert not result.ok


class TestParserInput:
    def test_requires_eof_terminated_tokens(self):
        with pytest.raises(ValueError):
            Parser([Token(TokenKind.NUMBER, "1", 1.0, 1)])

    def test_rejects_empty_token_list(self):
        with pytest.raises(ValueError):
            Parser([])

    def test_parse_tokens_uses_given_collector(self):
        diagnostics = Diagnostics()
        result = parse_tokens(scan(")"), diagnostics)
        assert result.diagnostics is diagnostics
        assert len(diagnostics) == 1

    def test_parse_consumes_every_token(self):
        tokens = scan("1 + 2 * 3")
        parser = Parser(tokens)
        assert parser.parse().ok
        assert parser.position == len(tokens) - 1


class TestSynchronize:
    def test_stops_after_semicolon(self):
        parser = Parser(scan("a b ; c"))
        parser.synchronize()
        assert parser.position == 3

    def test_stops_before_statement_keyword(self):
        parser = Parser(scan("a b var c"))
        parser.synchronize()
        assert parser.position == 2

    @pytest.mark.parametrize(
        "keyword", ["class", "fun", "var", "for", "if", "while", "print", "return"]
    )
    def test_each_statement_keyword(self, keyword):
        parser = Parser(scan(f"1 2 {keyword} 3"))
        parser.synchronize()
        assert parser.position == 2

    def test_always_advances_at_least_one_token(self):
        parser = Parser(scan("var x"))
        parser.synchronize()
        assert parser.position == 2

    def test_semicolon_first(self):
        parser = Parser(scan("; 1"))
        parser.synchronize()
        assert parser.position == 1

    def test_other_keywords_do_not_stop(self):
        tokens = scan("1 and or true else 2")
        parser = Parser(tokens)
        parser.synchronize()
        assert parser.position == len(tokens) - 1

    def test_at_eof_is_a_no_op(self):
        parser = Parser(scan(""))
        parser.synchronize()
        assert parser.position == 0

    def test_repeated_calls_reach_eof(self):
        tokens = scan("1 ; 2 ; var 3 ; if")
        parser = Parser(tokens)
        seen = []
        while parser.position < len(tokens) - 1:
            parser.synchronize()
            seen.append(parser.position)
        assert seen == sorted(set(seen))
        assert seen[-1] == len(tokens) - 1
