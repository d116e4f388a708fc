"""
Error handling for the funlang parser.

Every syntax error carries the offending token, its index in the token
stream, and the set of token types that would have been accepted there.
Parsing stops at the first error; there is no recovery.
"""

from typing import AbstractSet, FrozenSet, Iterable, List, Optional

from ..lexer.tokens import Token, TokenType, SourceLocation, KEYWORDS, describe_token_type
from ..lexer.errors import Diagnostic, ErrorRecovery


class ParseError(Exception):
    """
    Exception raised when the parser rejects its input.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        position: Optional[int] = None,
        expected: Iterable[TokenType] = (),
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token
        self.position = position
        self.expected: FrozenSet[TokenType] = frozenset(expected)

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class UnexpectedTokenError(ParseError):
    """The current token matches no applicable production."""


class UnexpectedEndOfInputError(ParseError):
    """The token stream ended in the middle of a production."""


class LiteralOverflowError(ParseError):
    """An integer literal does not fit in a signed 64-bit integer."""


class InvalidLiteralError(ParseError):
    """A literal token whose lexeme cannot be converted."""


class NestingTooDeepError(ParseError):
    """The input nests deeper than the parser's configured limit."""


class SyntaxErrorRecovery:
    """
    Suggestions attached to syntax errors.
    """

    @staticmethod
    def suggest_missing_token(expected: AbstractSet[TokenType], found: Token) -> List[str]:
        """Suggest what token might be missing."""
        suggestions = []

        token_suggestions = {
            TokenType.RIGHT_PAREN: "Add a closing parenthesis ')'",
            TokenType.THEN: "Add 'then' after the condition",
            TokenType.ELSE: "Add an 'else' branch; every 'if' needs one",
            TokenType.IS: "Add 'is' between the return type and the function body",
            TokenType.COLON: "Add a colon ':' before the type annotation",
        }

        for token_type, suggestion in token_suggestions.items():
            if token_type in expected:
                suggestions.append(suggestion)

        # A misspelled keyword lexes as an identifier
        if found is not None and found.is_identifier:
            keywords = [text for text, token_type in KEYWORDS.items() if token_type in expected]
            for keyword in ErrorRecovery.suggest_keyword_corrections(found.lexeme, keywords):
                suggestions.append(f"Did you mean '{keyword}'?")

        return suggestions

    @staticmethod
    def suggest_for_unexpected(found: Token) -> List[str]:
        """Suggestions that depend only on the unexpected token."""
        if found.type in COMPARISON_TOKENS:
            return ["Comparisons do not chain; parenthesize one comparison, e.g. '(a < b) == c'"]
        if found.type in (TokenType.IF, TokenType.FUN):
            return [f"Wrap the '{found.lexeme}' expression in parentheses when it is an operand"]
        if found.type == TokenType.RIGHT_PAREN:
            return ["Remove the unmatched ')'"]
        return []


COMPARISON_TOKENS = frozenset({TokenType.LESS_THAN, TokenType.EQUAL, TokenType.GREATER_THAN})


def format_expected(expected: Iterable[TokenType]) -> str:
    """Render an expected-token set in declaration order, e.g. "'then' or '+'"."""
    names = [describe_token_type(t) for t in sorted(set(expected), key=lambda t: t.value)]
    if not names:
        return "nothing"
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " or " + names[-1]


def create_unexpected_token_error(expected: AbstractSet[TokenType], found: Token,
                                  position: int) -> ParseError:
    """Create an error for a token that no production accepts here."""
    found_str = describe_token_type(found.type)
    if found.type in (TokenType.IDENTIFIER, TokenType.INTEGER):
        found_str = f"{found_str} '{found.lexeme}'"
    expected_str = format_expected(expected)

    suggestions = SyntaxErrorRecovery.suggest_missing_token(expected, found)
    suggestions.extend(SyntaxErrorRecovery.suggest_for_unexpected(found))

    return UnexpectedTokenError(
        message=f"Unexpected {found_str}",
        location=found.location,
        token=found,
        position=position,
        expected=expected,
        code="P001",
        help_text=f"Expected {expected_str} at this position.",
        suggestions=suggestions
    )


def create_unexpected_eof_error(expected: AbstractSet[TokenType], found: Token,
                                position: int) -> ParseError:
    """Create an error for input that ends mid-production."""
    expected_str = format_expected(expected)

    return UnexpectedEndOfInputError(
        message=f"Unexpected end of input, expected {expected_str}",
        location=found.location,
        token=found,
        position=position,
        expected=expected,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected_str}.",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(expected, found)
    )


def create_literal_overflow_error(token: Token, position: int) -> ParseError:
    """Create an error for an integer literal outside the 64-bit range."""
    return LiteralOverflowError(
        message=f"Integer literal '{token.lexeme}' is out of range",
        location=token.location,
        token=token,
        position=position,
        code="P013",
        help_text="Integer literals must fit in a signed 64-bit integer (at most 9223372036854775807).",
    )


def create_invalid_literal_error(token: Token, position: int, reason: str) -> ParseError:
    """Create an error for a literal token whose lexeme cannot be converted."""
    return InvalidLiteralError(
        message=f"Invalid literal: '{token.lexeme}'",
        location=token.location,
        token=token,
        position=position,
        code="P005",
        help_text=reason,
    )


def create_nesting_too_deep_error(token: Token, position: int, limit: int) -> ParseError:
    """Create an error for input nested beyond the parser's depth limit."""
    return NestingTooDeepError(
        message=f"Expression nested deeper than {limit} levels",
        location=token.location,
        token=token,
        position=position,
        code="P014",
        help_text="Deeply nested input exceeds the parser's nesting limit.",
        suggestions=["Reduce the nesting depth", "Raise the parser's max_depth"]
    )
