"""
funlang Lexer - turns source text into a classified token stream.

The language only needs decimal integers, ASCII identifiers, nine
keywords and a handful of operators, so the scanner is a straight
character loop with two precompiled patterns.
"""

import logging
import re
from typing import List, Optional

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS
from .errors import LexerError, create_invalid_character_error

logger = logging.getLogger(__name__)


class Lexer:
    """
    funlang lexical analyzer.

    Converts source code text into a list of tokens terminated by EOF.
    Invalid characters are recorded as errors and skipped so that all of
    them can be reported from a single pass.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""
        self.integer_pattern = re.compile(r'[0-9]+')
        self.identifier_pattern = re.compile(r'[_a-zA-Z][_a-zA-Z0-9]*')

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens including EOF token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens.clear()
        self.errors.clear()

        while self.pos < len(self.source):
            try:
                self._skip_whitespace()

                if self.pos >= len(self.source):
                    break

                token = self._next_token()
                if token:
                    self.tokens.append(token)

            except LexerError as e:
                self.errors.append(e)
                # Recover by skipping the problematic character
                self._advance()

        eof_location = SourceLocation(self.filename, self.line, self.column, self.pos)
        self.tokens.append(Token(TokenType.EOF, "", None, eof_location))

        logger.debug("Tokenized %s into %d tokens (%d errors)",
                     self.filename, len(self.tokens), len(self.errors))
        return self.tokens

    def _next_token(self) -> Optional[Token]:
        """Get the next token from the source."""
        if self.pos >= len(self.source):
            return None

        location = SourceLocation(self.filename, self.line, self.column, self.pos)
        current_char = self.source[self.pos]

        match = self.integer_pattern.match(self.source, self.pos)
        if match:
            return self._tokenize_integer(match.group(0), location)

        match = self.identifier_pattern.match(self.source, self.pos)
        if match:
            return self._tokenize_identifier_or_keyword(match.group(0), location)

        # Operators and punctuation (longest match first, so '->' beats '-')
        for op_len in (2, 1):
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                self._advance_by(op_len)
                return Token(OPERATORS[potential_op], potential_op, None, location)

        raise create_invalid_character_error(current_char, location)

    def _tokenize_integer(self, lexeme: str, location: SourceLocation) -> Token:
        """Tokenize a decimal integer literal; the value is left to the parser."""
        self._advance_by(len(lexeme))
        return Token(TokenType.INTEGER, lexeme, None, location)

    def _tokenize_identifier_or_keyword(self, lexeme: str, location: SourceLocation) -> Token:
        """Tokenize an identifier; exact keyword matches become keywords."""
        self._advance_by(len(lexeme))

        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None

        # Handle boolean literals
        if token_type in (TokenType.TRUE, TokenType.FALSE):
            value = token_type == TokenType.TRUE

        return Token(token_type, lexeme, value, location)

    def _skip_whitespace(self):
        """Skip whitespace, newlines included."""
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self._advance()

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        # Raise the first error encountered
        raise lexer.errors[0]

    return tokens


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
