"""
funlang recursive descent parser.

Each precedence tier of the expression grammar is one routine calling the
next tighter tier for its operands:

    expression  := 'if' expression 'then' expression 'else' expression
                 | 'fun' IDENT ':' type ':' type 'is' expression
                 | sum [('<' | '==' | '>') sum]
    sum         := factor (('+' | '-') factor)*
    factor      := application (('*' | '/') application)*
    application := term term*
    term        := INTEGER | 'true' | 'false' | IDENT | '(' expression ')'

    type        := atom_type ['->' type]
    atom_type   := 'int' | 'bool' | '(' type ')'

One token of lookahead decides every branch; nothing backtracks.
"""

import logging
import sys
from typing import Callable, Dict, FrozenSet, List

from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    Expression, TypeRef, SourceSpan, ArithOp, CmpOp,
    If, Fun, CmpBinOp, ArithBinOp, Application, Literal, Var,
    IntType, BoolType, ArrowType,
)
from .errors import (
    ParseError, COMPARISON_TOKENS, create_unexpected_token_error,
    create_unexpected_eof_error, create_nesting_too_deep_error,
)
from .literals import convert_integer, convert_boolean

logger = logging.getLogger(__name__)

# Each nested expression or type counts one level. A parenthesized level
# costs about nine Python frames, so the default keeps the deepest accepted
# input inside the interpreter recursion limit (83 levels at the usual 1000).
DEFAULT_MAX_DEPTH = sys.getrecursionlimit() // 12

TERM_START: FrozenSet[TokenType] = frozenset({
    TokenType.INTEGER, TokenType.TRUE, TokenType.FALSE,
    TokenType.IDENTIFIER, TokenType.LEFT_PAREN,
})
EXPRESSION_START: FrozenSet[TokenType] = TERM_START | {TokenType.IF, TokenType.FUN}
TYPE_START: FrozenSet[TokenType] = frozenset({TokenType.INT, TokenType.BOOL, TokenType.LEFT_PAREN})

FACTOR_OPERATORS: Dict[TokenType, ArithOp] = {
    TokenType.MULTIPLY: ArithOp.MUL,
    TokenType.DIVIDE: ArithOp.DIV,
}
SUM_OPERATORS: Dict[TokenType, ArithOp] = {
    TokenType.PLUS: ArithOp.ADD,
    TokenType.MINUS: ArithOp.SUB,
}
COMPARISON_OPERATORS: Dict[TokenType, CmpOp] = {
    TokenType.LESS_THAN: CmpOp.LT,
    TokenType.EQUAL: CmpOp.EQ,
    TokenType.GREATER_THAN: CmpOp.GT,
}

# Tokens that can extend a finished chain of sums
OPERAND_FOLLOW: FrozenSet[TokenType] = (
    TERM_START | frozenset(FACTOR_OPERATORS) | frozenset(SUM_OPERATORS)
)


class Parser:
    """
    funlang parser.

    Consumes a classified token stream and produces a single root
    expression (or type), raising a ParseError at the first token no
    production accepts. A Parser holds per-parse state only; use one
    instance per token stream.
    """

    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Token stream, with or without a trailing EOF token
            max_depth: Maximum nesting of expressions and types
        """
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            self.tokens.append(self._synthesize_eof())
        self.current = 0
        self.max_depth = max_depth
        self._depth = 0

        # Tokens that could have continued the most recently completed
        # expression or type; reported alongside the expected terminator.
        self._follow: FrozenSet[TokenType] = frozenset()

        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize the term and type dispatch tables."""

        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            TokenType.INTEGER: self._parse_integer_literal,
            TokenType.TRUE: self._parse_boolean_literal,
            TokenType.FALSE: self._parse_boolean_literal,
            TokenType.IDENTIFIER: self._parse_identifier,
            TokenType.LEFT_PAREN: self._parse_grouping,
        }

        self.type_parsers: Dict[TokenType, Callable[[], TypeRef]] = {
            TokenType.INT: self._parse_int_type,
            TokenType.BOOL: self._parse_bool_type,
            TokenType.LEFT_PAREN: self._parse_type_grouping,
        }

    def _synthesize_eof(self) -> Token:
        """Build an EOF token positioned just past the last token."""
        if not self.tokens:
            return Token(TokenType.EOF, "", None, SourceLocation("<input>", 1, 1, 0))
        last = self.tokens[-1]
        width = len(last.lexeme)
        location = SourceLocation(
            last.location.filename,
            last.location.line,
            last.location.column + width,
            last.location.offset + width,
        )
        return Token(TokenType.EOF, "", None, location)

    # Entry points

    def parse(self) -> Expression:
        """
        Parse the whole token stream as one expression.

        Returns:
            The root expression

        Raises:
            ParseError: On the first syntax or literal error
        """
        root = self._parse_root(self._parse_expression)
        logger.debug("Parsed %d tokens into %s", len(self.tokens), root.node_type.value)
        return root

    def parse_type(self) -> TypeRef:
        """Parse the whole token stream as one type annotation."""
        root = self._parse_root(self._parse_type)
        logger.debug("Parsed %d tokens into type %s", len(self.tokens), root.node_type.value)
        return root

    def _parse_root(self, production):
        self.current = 0
        self._depth = 0
        self._follow = frozenset()
        try:
            root = production()
            self._consume(TokenType.EOF, follow=self._follow)
        except RecursionError:
            raise create_nesting_too_deep_error(self._peek(), self.current, self.max_depth) from None
        except ParseError as e:
            logger.debug("Parse failed at token %s: %s", e.position, e.diagnostic.message)
            raise
        return root

    # Expressions

    def _parse_expression(self) -> Expression:
        """Parse a full expression, the loosest tier."""
        try:
            self._enter()
            token_type = self._peek().type
            if token_type == TokenType.IF:
                return self._parse_if()
            if token_type == TokenType.FUN:
                return self._parse_fun()
            if token_type not in EXPRESSION_START:
                raise self._error(EXPRESSION_START)
            return self._parse_comparison()
        finally:
            self._depth -= 1

    def _parse_if(self) -> If:
        """Parse 'if' C 'then' T 'else' E; the else branch extends rightward."""
        start_token = self._advance()  # Consume 'if'

        condition = self._parse_expression()
        self._consume(TokenType.THEN, follow=self._follow)

        then_branch = self._parse_expression()
        self._consume(TokenType.ELSE, follow=self._follow)

        else_branch = self._parse_expression()

        span = SourceSpan(start_token.location, else_branch.span.end)
        return If(condition, then_branch, else_branch, span)

    def _parse_fun(self) -> Fun:
        """Parse 'fun' x ':' T ':' R 'is' body."""
        start_token = self._advance()  # Consume 'fun'

        name_token = self._consume(TokenType.IDENTIFIER)
        self._consume(TokenType.COLON)
        param_type = self._parse_type()

        self._consume(TokenType.COLON, follow=self._follow)
        return_type = self._parse_type()

        self._consume(TokenType.IS, follow=self._follow)
        body = self._parse_expression()

        span = SourceSpan(start_token.location, body.span.end)
        return Fun(name_token.lexeme, param_type, return_type, body, span)

    def _parse_comparison(self) -> Expression:
        """Parse a sum, optionally compared with exactly one other sum."""
        left = self._parse_sum()

        operator_token = self._peek()
        if operator_token.type not in COMPARISON_OPERATORS:
            self._follow = OPERAND_FOLLOW | COMPARISON_TOKENS
            return left

        self._advance()
        right = self._parse_sum()
        # A second comparison operator is never acceptable here
        self._follow = OPERAND_FOLLOW

        span = SourceSpan(left.span.start, right.span.end)
        return CmpBinOp(COMPARISON_OPERATORS[operator_token.type], left, right, span)

    def _parse_sum(self) -> Expression:
        return self._parse_left_associative(self._parse_factor, SUM_OPERATORS)

    def _parse_factor(self) -> Expression:
        return self._parse_left_associative(self._parse_application, FACTOR_OPERATORS)

    def _parse_left_associative(self, operand: Callable[[], Expression],
                                operators: Dict[TokenType, ArithOp]) -> Expression:
        """Parse operand (op operand)*, folding to the left."""
        left = operand()

        while self._peek().type in operators:
            operator = operators[self._advance().type]
            right = operand()
            span = SourceSpan(left.span.start, right.span.end)
            left = ArithBinOp(operator, left, right, span)

        return left

    def _parse_application(self) -> Expression:
        """Parse juxtaposed terms; ``f x y`` is ``(f x) y``."""
        function = self._parse_term()

        while self._peek().type in TERM_START:
            argument = self._parse_term()
            span = SourceSpan(function.span.start, argument.span.end)
            function = Application(function, argument, span)

        return function

    def _parse_term(self) -> Expression:
        """Parse an atom. 'if' and 'fun' are not atoms and need parentheses here."""
        prefix_parser = self.prefix_parsers.get(self._peek().type)
        if prefix_parser is None:
            raise self._error(TERM_START)
        return prefix_parser()

    def _parse_integer_literal(self) -> Literal:
        position = self.current
        token = self._advance()
        value = convert_integer(token, position)
        return Literal.number(value, SourceSpan(token.location, token.location))

    def _parse_boolean_literal(self) -> Literal:
        position = self.current
        token = self._advance()
        value = convert_boolean(token, position)
        return Literal.boolean(value, SourceSpan(token.location, token.location))

    def _parse_identifier(self) -> Var:
        token = self._advance()
        return Var(token.lexeme, SourceSpan(token.location, token.location))

    def _parse_grouping(self) -> Expression:
        """Parse parenthesized expression."""
        self._advance()  # Consume (

        expr = self._parse_expression()

        self._consume(TokenType.RIGHT_PAREN, follow=self._follow)

        return expr

    # Types

    def _parse_type(self) -> TypeRef:
        """Parse a type; the right operand of '->' is a full type."""
        try:
            self._enter()
            param = self._parse_atom_type()

            if not self._match(TokenType.ARROW):
                self._follow = frozenset({TokenType.ARROW})
                return param

            result = self._parse_type()
            span = SourceSpan(param.span.start, result.span.end)
            return ArrowType(param, result, span)
        finally:
            self._depth -= 1

    def _parse_atom_type(self) -> TypeRef:
        type_parser = self.type_parsers.get(self._peek().type)
        if type_parser is None:
            raise self._error(TYPE_START)
        return type_parser()

    def _parse_int_type(self) -> IntType:
        token = self._advance()
        return IntType(SourceSpan(token.location, token.location))

    def _parse_bool_type(self) -> BoolType:
        token = self._advance()
        return BoolType(SourceSpan(token.location, token.location))

    def _parse_type_grouping(self) -> TypeRef:
        self._advance()  # Consume (

        inner = self._parse_type()

        self._consume(TokenType.RIGHT_PAREN, follow=self._follow)

        return inner

    # Utility methods

    def _enter(self):
        """Descend one nesting level, enforcing max_depth."""
        self._depth += 1
        if self._depth > self.max_depth:
            raise create_nesting_too_deep_error(self._peek(), self.current, self.max_depth)

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token; EOF is never consumed."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Return current token without consuming."""
        return self.tokens[self.current]

    def _previous(self) -> Token:
        """Return previous token."""
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self.tokens[0]

    def _consume(self, token_type: TokenType,
                 follow: FrozenSet[TokenType] = frozenset()) -> Token:
        """
        Consume token of expected type or raise error.

        ``follow`` lists the tokens that could also have appeared here,
        because they would have continued the preceding construct.
        """
        if self._check(token_type):
            return self._advance()
        raise self._error(follow | {token_type})

    def _error(self, expected: FrozenSet[TokenType]) -> ParseError:
        """Build the error for the current token given what was acceptable."""
        token = self._peek()
        if token.type == TokenType.EOF:
            return create_unexpected_eof_error(expected, token, self.current)
        return create_unexpected_token_error(expected, token, self.current)


def parse_string(source: str, filename: str = "<string>",
                 max_depth: int = DEFAULT_MAX_DEPTH) -> Expression:
    """
    Convenience function to parse a source string as an expression.

    Raises:
        LexerError: If tokenizing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    parser = Parser(tokens, max_depth=max_depth)
    return parser.parse()


def parse_type_string(source: str, filename: str = "<string>",
                      max_depth: int = DEFAULT_MAX_DEPTH) -> TypeRef:
    """
    Convenience function to parse a source string as a type annotation.

    Raises:
        LexerError: If tokenizing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    parser = Parser(tokens, max_depth=max_depth)
    return parser.parse_type()


def parse_file(filepath: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Expression:
    """
    Convenience function to parse a source file.

    Raises:
        LexerError: If tokenizing fails
        ParseError: If parsing fails
        IOError: If file cannot be read
    """
    from ..lexer import tokenize_file

    tokens = tokenize_file(filepath)
    parser = Parser(tokens, max_depth=max_depth)
    return parser.parse()
