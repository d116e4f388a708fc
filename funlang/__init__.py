"""
funlang Parser Front-End

Parser for a small expression-oriented functional language: conditionals,
single-argument function literals with type annotations, application by
juxtaposition, arithmetic and comparison, and `int`/`bool`/arrow types.

Architecture:
    funlang/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST generation
    └── cli.py           # funlang-parse command line front-end

License: MIT
"""

from ._version import __version__

__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, LexerError
from .parser import Parser, ParseError, parse_string, parse_type_string, format_ast

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Token",
    "TokenType",

    # Convenience functions
    "parse_string",
    "parse_type_string",
    "format_ast",

    # Errors
    "LexerError",
    "ParseError",

    # Version info
    "__version__",
    "__license__",
]
