"""
Test suite for syntax error reporting.

Tests cover:
- Error kinds (unexpected token vs. unexpected end of input)
- Positions, locations and expected-token sets
- Diagnostic text and suggestions
- The nesting depth limit
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from funlang.lexer.tokens import TokenType
from funlang.lexer.lexer import tokenize_string
from funlang.parser.parser import (
    Parser, parse_string, DEFAULT_MAX_DEPTH, TERM_START, EXPRESSION_START, OPERAND_FOLLOW,
)
from funlang.parser.ast_nodes import If
from funlang.parser.errors import (
    ParseError, UnexpectedTokenError, UnexpectedEndOfInputError,
    NestingTooDeepError, COMPARISON_TOKENS, format_expected,
)


class TestErrorKinds(unittest.TestCase):
    """Which error is raised, and where."""

    def _parse_error(self, source: str) -> ParseError:
        with self.assertRaises(ParseError) as ctx:
            parse_string(source)
        return ctx.exception

    def test_comparison_does_not_chain(self):
        error = self._parse_error("a < b < c")
        self.assertIsInstance(error, UnexpectedTokenError)
        self.assertEqual(error.position, 3)
        self.assertEqual(error.token.type, TokenType.LESS_THAN)
        self.assertEqual(error.location.column, 7)
        self.assertEqual(error.expected, OPERAND_FOLLOW | {TokenType.EOF})
        self.assertNotIn(TokenType.LESS_THAN, error.expected)
        self.assertTrue(any("do not chain" in s for s in error.diagnostic.suggestions))

    def test_unmatched_parenthesis(self):
        error = self._parse_error("(1 + 2")
        self.assertIsInstance(error, UnexpectedEndOfInputError)
        self.assertEqual(error.token.type, TokenType.EOF)
        self.assertEqual(error.position, 4)
        self.assertIn(TokenType.RIGHT_PAREN, error.expected)
        self.assertIn(TokenType.PLUS, error.expected)
        self.assertIn(TokenType.LESS_THAN, error.expected)
        self.assertIn("Add a closing parenthesis ')'", error.diagnostic.suggestions)

    def test_extra_closing_parenthesis(self):
        error = self._parse_error("1 + 2)")
        self.assertIsInstance(error, UnexpectedTokenError)
        self.assertEqual(error.token.type, TokenType.RIGHT_PAREN)
        self.assertIn(TokenType.EOF, error.expected)

    def test_empty_input(self):
        error = self._parse_error("")
        self.assertIsInstance(error, UnexpectedEndOfInputError)
        self.assertEqual(error.expected, EXPRESSION_START)

    def test_missing_right_operand(self):
        error = self._parse_error("1 +")
        self.assertIsInstance(error, UnexpectedEndOfInputError)
        self.assertEqual(error.expected, TERM_START)

    def test_if_as_unparenthesized_operand(self):
        error = self._parse_error("1 + if c then 2 else 3")
        self.assertIsInstance(error, UnexpectedTokenError)
        self.assertEqual(error.token.type, TokenType.IF)
        self.assertEqual(error.expected, TERM_START)

    def test_missing_then(self):
        error = self._parse_error("if a b")
        self.assertIsInstance(error, UnexpectedEndOfInputError)
        self.assertIn(TokenType.THEN, error.expected)

    def test_missing_else(self):
        error = self._parse_error("if a then b")
        self.assertIsInstance(error, UnexpectedEndOfInputError)
        self.assertIn(TokenType.ELSE, error.expected)

    def test_missing_is(self):
        error = self._parse_error("fun x : int : int x")
        self.assertIsInstance(error, UnexpectedTokenError)
        self.assertEqual(error.expected, {TokenType.IS, TokenType.ARROW})

    def test_fun_requires_parameter_name(self):
        error = self._parse_error("fun 1 : int : int is 1")
        self.assertIsInstance(error, UnexpectedTokenError)
        self.assertEqual(error.expected, {TokenType.IDENTIFIER})

    def test_keyword_cannot_be_a_variable(self):
        error = self._parse_error("then + 1")
        self.assertIsInstance(error, UnexpectedTokenError)
        self.assertEqual(error.expected, EXPRESSION_START)

    def test_misspelled_keyword_suggestion(self):
        error = self._parse_error("fun x : int : int iss x")
        self.assertIn("Did you mean 'is'?", error.diagnostic.suggestions)

    def test_failure_is_deterministic(self):
        first = self._parse_error("if a then (b")
        second = self._parse_error("if a then (b")
        self.assertEqual(type(first), type(second))
        self.assertEqual(first.position, second.position)
        self.assertEqual(first.expected, second.expected)


class TestDiagnostics(unittest.TestCase):
    """Rendered error text."""

    def test_diagnostic_text(self):
        with self.assertRaises(ParseError) as ctx:
            parse_string("fun x : int\n  : int iss x", "prog.fun")
        text = str(ctx.exception)
        self.assertTrue(text.startswith("ERROR: Unexpected identifier 'iss'"))
        self.assertIn("prog.fun:2:9", text)
        self.assertIn("Expected 'is' or '->' at this position.", text)
        self.assertIn("Did you mean 'is'?", text)

    def test_misspelled_else_is_absorbed_as_application(self):
        # An identifier after a complete expression is an argument, so the
        # error surfaces at the end of input
        with self.assertRaises(UnexpectedEndOfInputError) as ctx:
            parse_string("if x then 1 elsee 2")
        self.assertIn(TokenType.ELSE, ctx.exception.expected)

    def test_format_expected_is_ordered(self):
        self.assertEqual(format_expected({TokenType.EOF, TokenType.THEN}), "'then' or end of input")
        self.assertEqual(format_expected([TokenType.RIGHT_PAREN]), "')'")
        self.assertEqual(
            format_expected(COMPARISON_TOKENS),
            "'<', '==' or '>'",
        )


class TestNestingLimit(unittest.TestCase):
    """Deep nesting is reported, not crashed on."""

    def _nested(self, depth: int) -> str:
        return "(" * depth + "1" + ")" * depth

    def test_nesting_within_limit(self):
        tokens = tokenize_string(self._nested(40))
        self.assertEqual(Parser(tokens, max_depth=50).parse().value, 1)

    def test_nesting_beyond_limit(self):
        tokens = tokenize_string(self._nested(50))
        with self.assertRaises(NestingTooDeepError) as ctx:
            Parser(tokens, max_depth=50).parse()
        self.assertEqual(ctx.exception.code, "P014")
        self.assertEqual(ctx.exception.position, 50)

    def test_thousands_of_parentheses(self):
        with self.assertRaises(NestingTooDeepError):
            parse_string(self._nested(5000))

    def test_recursion_error_is_converted(self):
        tokens = tokenize_string(self._nested(sys.getrecursionlimit() * 2))
        with self.assertRaises(NestingTooDeepError):
            Parser(tokens, max_depth=10 ** 9).parse()

    def test_long_flat_chains_are_not_nesting(self):
        source = " + ".join(["1"] * 2000)
        self.assertEqual(parse_string(source).right.value, 1)
        applications = " ".join(["f"] * 2000)
        self.assertEqual(parse_string(applications).argument.name, "f")

    def test_nesting_up_to_default_limit(self):
        tree = parse_string(self._nested(DEFAULT_MAX_DEPTH - 1))
        self.assertEqual(tree.value, 1)

    def test_long_else_if_chain(self):
        source = "".join(f"if a then {i} else " for i in range(70)) + "0"
        tree = parse_string(source)
        depth = 0
        while isinstance(tree, If):
            self.assertEqual(tree.then_branch.value, depth)
            tree = tree.else_branch
            depth += 1
        self.assertEqual(depth, 70)
        self.assertEqual(tree.value, 0)

    def test_nested_types_count(self):
        source = "fun x : " + "(" * 30 + "int" + ")" * 30 + " : int is x"
        with self.assertRaises(NestingTooDeepError):
            Parser(tokenize_string(source), max_depth=20).parse()


if __name__ == '__main__':
    unittest.main()
