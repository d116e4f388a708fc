"""
Token definitions for the funlang lexer.

This module defines all token types of the expression language:
- Keywords (control forms, boolean literals, base type names)
- Operators (arithmetic, comparison, the type arrow)
- Literals (decimal integers)
- Identifiers
- Punctuation
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict


class TokenType(Enum):
    """
    Enumeration of all token types in funlang.

    Organized by category; declaration order is also the order in which
    expected-token sets are reported in diagnostics.
    """

    # ========================================================================
    # Literals and identifiers
    # ========================================================================
    INTEGER = auto()                # 42, 007
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    IDENTIFIER = auto()             # x, _tmp, fact2

    # ========================================================================
    # Keywords
    # ========================================================================
    IF = auto()                     # if
    THEN = auto()                   # then
    ELSE = auto()                   # else
    FUN = auto()                    # fun (function literal)
    IS = auto()                     # is (separates signature from body)
    INT = auto()                    # int (type)
    BOOL = auto()                   # bool (type)

    # ========================================================================
    # Operators
    # ========================================================================
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    LESS_THAN = auto()              # <
    EQUAL = auto()                  # ==
    GREATER_THAN = auto()           # >
    ARROW = auto()                  # ->

    # ========================================================================
    # Punctuation
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    COLON = auto()                  # :

    # ========================================================================
    # Special
    # ========================================================================
    EOF = auto()                    # End of input


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and for the spans attached to AST nodes.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    Contains the token type, lexeme (raw text), semantic value and source
    location. Integer tokens carry no value: the parser converts the lexeme
    so that out-of-range literals are reported as parse errors.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # bool for TRUE/FALSE, name for IDENTIFIER
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER


# Lookup tables used by the lexer for keyword/operator recognition

KEYWORDS: Dict[str, TokenType] = {
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "fun": TokenType.FUN,
    "is": TokenType.IS,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "int": TokenType.INT,
    "bool": TokenType.BOOL,
}

OPERATORS: Dict[str, TokenType] = {
    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,

    # Comparison
    "<": TokenType.LESS_THAN,
    "==": TokenType.EQUAL,
    ">": TokenType.GREATER_THAN,

    # Types
    "->": TokenType.ARROW,

    # Punctuation
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ":": TokenType.COLON,
}

# Human readable names used in diagnostics
TOKEN_DESCRIPTIONS: Dict[TokenType, str] = {
    **{token_type: f"'{text}'" for text, token_type in {**KEYWORDS, **OPERATORS}.items()},
    TokenType.INTEGER: "integer literal",
    TokenType.IDENTIFIER: "identifier",
    TokenType.EOF: "end of input",
}


def describe_token_type(token_type: TokenType) -> str:
    """Return the diagnostic name of a token type, e.g. "'then'"."""
    return TOKEN_DESCRIPTIONS.get(token_type, token_type.name)
