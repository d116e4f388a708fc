"""
Conversion of literal tokens into Python values.

Integer literals are signed 64-bit. An out-of-range literal is an error,
never wrapped or truncated.
"""

from ..lexer.tokens import Token, TokenType
from .errors import create_invalid_literal_error, create_literal_overflow_error

INT64_MAX = 2 ** 63 - 1

_ASCII_DIGITS = frozenset("0123456789")
_INT64_MAX_DIGITS = len(str(INT64_MAX))


def convert_integer(token: Token, position: int) -> int:
    """
    Convert an INTEGER token to its value.

    Leading zeros are accepted. Overflow is detected from the digit count
    first, so very long literals are rejected without building the number.

    Raises:
        LiteralOverflowError: If the value exceeds INT64_MAX
        InvalidLiteralError: If the lexeme is not one or more ASCII digits
    """
    lexeme = token.lexeme
    if not lexeme or not _ASCII_DIGITS.issuperset(lexeme):
        raise create_invalid_literal_error(
            token, position, "Integer literals consist of ASCII digits only.")

    significant = lexeme.lstrip("0") or "0"
    if len(significant) > _INT64_MAX_DIGITS:
        raise create_literal_overflow_error(token, position)

    value = int(significant)
    if value > INT64_MAX:
        raise create_literal_overflow_error(token, position)
    return value


def convert_boolean(token: Token, position: int) -> bool:
    """Convert a TRUE/FALSE token to its value."""
    if token.type == TokenType.TRUE:
        return True
    if token.type == TokenType.FALSE:
        return False
    raise create_invalid_literal_error(
        token, position, "Boolean literals are 'true' and 'false'.")
