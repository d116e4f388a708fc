"""
funlang Lexer Package

Lexical analyzer producing the classified token stream consumed by the
parser. Tracks line/column/offset for every token so that parse errors
can be located precisely.
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import LexerError, Diagnostic

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexerError",
    "Diagnostic",
    "tokenize_string",
    "tokenize_file",
]
