"""
funlang Parser Package

Recursive descent parser turning a token stream into an expression tree.
Each precedence tier is one parsing routine; errors report the offending
token and the set of tokens that would have been accepted.
"""

from .ast_nodes import *
from .parser import Parser, parse_string, parse_type_string, parse_file, DEFAULT_MAX_DEPTH
from .printer import format_ast, ast_to_dict
from .errors import (
    ParseError, UnexpectedTokenError, UnexpectedEndOfInputError,
    LiteralOverflowError, InvalidLiteralError, NestingTooDeepError,
)

__all__ = [
    # Core parser
    "Parser", "parse_string", "parse_type_string", "parse_file", "DEFAULT_MAX_DEPTH",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "SourceSpan", "fold_tree",
    "Expression", "If", "Fun", "CmpBinOp", "ArithBinOp", "Application", "Literal", "Var",
    "ArithOp", "CmpOp",
    "TypeRef", "IntType", "BoolType", "ArrowType",

    # Rendering
    "format_ast", "ast_to_dict",

    # Error handling
    "ParseError", "UnexpectedTokenError", "UnexpectedEndOfInputError",
    "LiteralOverflowError", "InvalidLiteralError", "NestingTooDeepError",
]
