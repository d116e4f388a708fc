"""
Test suite for type annotation parsing.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from funlang.parser.parser import parse_type_string
from funlang.parser.ast_nodes import IntType, BoolType, ArrowType
from funlang.parser.errors import UnexpectedTokenError, UnexpectedEndOfInputError
from funlang.lexer.tokens import TokenType


class TestTypeGrammar(unittest.TestCase):
    """Test cases for the type grammar."""

    def test_base_types(self):
        self.assertEqual(parse_type_string("int"), IntType())
        self.assertEqual(parse_type_string("bool"), BoolType())

    def test_arrow_is_right_associative(self):
        self.assertEqual(
            parse_type_string("int -> int -> bool"),
            ArrowType(IntType(), ArrowType(IntType(), BoolType())),
        )

    def test_parenthesized_left_operand(self):
        self.assertEqual(
            parse_type_string("(int -> bool) -> int"),
            ArrowType(ArrowType(IntType(), BoolType()), IntType()),
        )

    def test_redundant_parentheses(self):
        self.assertEqual(parse_type_string("((int))"), IntType())
        self.assertEqual(
            parse_type_string("int -> (int -> bool)"),
            parse_type_string("int -> int -> bool"),
        )

    def test_type_cannot_start_with_identifier(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_type_string("string")
        self.assertEqual(ctx.exception.expected,
                         {TokenType.INT, TokenType.BOOL, TokenType.LEFT_PAREN})

    def test_dangling_arrow(self):
        with self.assertRaises(UnexpectedEndOfInputError) as ctx:
            parse_type_string("int ->")
        self.assertEqual(ctx.exception.expected,
                         {TokenType.INT, TokenType.BOOL, TokenType.LEFT_PAREN})

    def test_trailing_token_after_type(self):
        with self.assertRaises(UnexpectedTokenError) as ctx:
            parse_type_string("int bool")
        self.assertEqual(ctx.exception.expected, {TokenType.ARROW, TokenType.EOF})

    def test_unclosed_type_parenthesis(self):
        with self.assertRaises(UnexpectedEndOfInputError) as ctx:
            parse_type_string("(int -> bool")
        self.assertEqual(ctx.exception.expected, {TokenType.ARROW, TokenType.RIGHT_PAREN})


if __name__ == '__main__':
    unittest.main()
