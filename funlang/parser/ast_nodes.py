"""
Abstract Syntax Tree node definitions for funlang.

Two mutually referencing trees: expressions (``Expression`` subclasses)
and the type annotations embedded in function literals (``TypeRef``
subclasses). Nodes are immutable; structural equality ignores source spans,
so re-parsing the same input yields an equal tree.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, ClassVar, List, Optional, Union

from ..lexer.tokens import SourceLocation

__all__ = [
    "ASTNodeType", "ArithOp", "CmpOp", "SourceSpan", "ASTVisitor", "ASTNode", "fold_tree",
    "TypeRef", "IntType", "BoolType", "ArrowType",
    "Expression", "If", "Fun", "CmpBinOp", "ArithBinOp", "Application", "Literal", "Var",
]


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Expressions
    IF = "If"
    FUN = "Fun"
    CMP_BIN_OP = "CmpBinOp"
    ARITH_BIN_OP = "ArithBinOp"
    APPLICATION = "Application"
    LITERAL = "Literal"
    VAR = "Var"

    # Types
    INT_TYPE = "Int"
    BOOL_TYPE = "Bool"
    ARROW_TYPE = "Arrow"


class ArithOp(Enum):
    """Arithmetic operators, valued by their surface syntax."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class CmpOp(Enum):
    """Comparison operators, valued by their surface syntax."""
    LT = "<"
    EQ = "=="
    GT = ">"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


def _span_field() -> Any:
    """Span attached to every node; never part of equality."""
    return field(default=None, compare=False, repr=False)


class ASTVisitor(ABC):
    """Abstract visitor interface for traversing AST nodes."""

    @abstractmethod
    def visit(self, node: 'ASTNode') -> Any:
        """Visit a generic AST node."""
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    node_type: ClassVar[ASTNodeType]

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    def walk(self):
        """Yield this node and all its descendants, parents first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def _scalar_fields(self) -> tuple:
        """Compared field values that are not sub-nodes."""
        return tuple(
            getattr(self, f.name) for f in fields(self)
            if f.compare and not isinstance(getattr(self, f.name), ASTNode)
        )

    # Equality, hashing and repr walk the tree with explicit stacks; a long
    # operator chain is as deep as it is long.

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ASTNode):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if type(left) is not type(right):
                return False
            if left._scalar_fields() != right._scalar_fields():
                return False
            pending.extend(zip(left.children(), right.children()))
        return True

    def __hash__(self) -> int:
        return hash(tuple((type(node), node._scalar_fields()) for node in self.walk()))

    def __repr__(self) -> str:
        def render(node: 'ASTNode', parts: List[str]) -> str:
            remaining = iter(parts)
            args = []
            for f in fields(node):
                if not f.repr:
                    continue
                value = getattr(node, f.name)
                text = next(remaining) if isinstance(value, ASTNode) else repr(value)
                args.append(f"{f.name}={text}")
            return f"{type(node).__name__}({', '.join(args)})"
        return fold_tree(self, render)

    def __str__(self) -> str:
        from .printer import format_ast
        return format_ast(self)


def fold_tree(root: ASTNode, combine: Callable[[ASTNode, List[Any]], Any]) -> Any:
    """
    Evaluate a tree bottom-up without recursion.

    ``combine(node, parts)`` receives the node and the results already
    computed for its ``children()``, in order.
    """
    results: List[Any] = []
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            count = len(node.children())
            parts = results[len(results) - count:]
            del results[len(results) - count:]
            results.append(combine(node, parts))
        else:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children()))
    return results[0]


# ============================================================================
# Types
# ============================================================================

class TypeRef(ASTNode):
    """Base class for type annotations."""
    pass


@dataclass(frozen=True, eq=False, repr=False)
class IntType(TypeRef):
    """The ``int`` base type."""
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.INT_TYPE

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True, eq=False, repr=False)
class BoolType(TypeRef):
    """The ``bool`` base type."""
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.BOOL_TYPE

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True, eq=False, repr=False)
class ArrowType(TypeRef):
    """Function type ``param -> result``; the arrow associates to the right."""
    param: TypeRef
    result: TypeRef
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.ARROW_TYPE

    def children(self) -> List[ASTNode]:
        return [self.param, self.result]


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""
    pass


@dataclass(frozen=True, eq=False, repr=False)
class If(Expression):
    """Conditional expression; all three parts are full expressions."""
    condition: Expression
    then_branch: Expression
    else_branch: Expression
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.IF

    def children(self) -> List[ASTNode]:
        return [self.condition, self.then_branch, self.else_branch]


@dataclass(frozen=True, eq=False, repr=False)
class Fun(Expression):
    """
    Single-argument function literal.

    The parameter and declared return types are carried for later stages;
    nothing here checks them.
    """
    param_name: str
    param_type: TypeRef
    return_type: TypeRef
    body: Expression
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUN

    def children(self) -> List[ASTNode]:
        return [self.param_type, self.return_type, self.body]


@dataclass(frozen=True, eq=False, repr=False)
class CmpBinOp(Expression):
    """Comparison; at most one per expression level."""
    op: CmpOp
    left: Expression
    right: Expression
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.CMP_BIN_OP

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


@dataclass(frozen=True, eq=False, repr=False)
class ArithBinOp(Expression):
    """Arithmetic operation, left-associative within its tier."""
    op: ArithOp
    left: Expression
    right: Expression
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.ARITH_BIN_OP

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


@dataclass(frozen=True, eq=False, repr=False)
class Application(Expression):
    """Function application by juxtaposition (``f x``)."""
    function: Expression
    argument: Expression
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.APPLICATION

    def children(self) -> List[ASTNode]:
        return [self.function, self.argument]


@dataclass(frozen=True, eq=False, repr=False)
class Literal(Expression):
    """Integer or boolean literal."""
    value: Union[int, bool]
    literal_type: str  # "integer" or "boolean"
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.LITERAL

    @classmethod
    def number(cls, value: int, span: Optional[SourceSpan] = None) -> 'Literal':
        return cls(value, "integer", span)

    @classmethod
    def boolean(cls, value: bool, span: Optional[SourceSpan] = None) -> 'Literal':
        return cls(value, "boolean", span)

    def children(self) -> List[ASTNode]:
        return []


@dataclass(frozen=True, eq=False, repr=False)
class Var(Expression):
    """Variable reference."""
    name: str
    span: Optional[SourceSpan] = _span_field()

    node_type: ClassVar[ASTNodeType] = ASTNodeType.VAR

    def children(self) -> List[ASTNode]:
        return []
