"""
Rendering of AST nodes.

``format_ast`` produces a compact S-expression form, e.g.
``(+ 1 (* 2 3))`` or ``(λ (x: int -> int): int x)``; types print in
surface syntax with a left-nested arrow parenthesized. ``ast_to_dict``
produces a JSON-serializable nested dict for external consumers.

Both build their output bottom-up with ``fold_tree``, so trees of any
depth render without recursion.
"""

from typing import Any, Dict, List

from .ast_nodes import (
    ASTNode, ASTVisitor, If, Fun, CmpBinOp, ArithBinOp, Application,
    Literal, Var, IntType, BoolType, ArrowType, fold_tree,
)


class SExpressionPrinter(ASTVisitor):
    """
    Visitor rendering a tree as an S-expression string.

    Each ``visit_<Class>`` method receives the node followed by the
    already-rendered text of its children.
    """

    def visit(self, node: ASTNode) -> str:
        if not isinstance(node, ASTNode):
            raise TypeError(f"Cannot format {type(node).__name__}")
        return fold_tree(node, self._render)

    def _render(self, node: ASTNode, parts: List[str]) -> str:
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method is None:
            raise TypeError(f"Cannot format {type(node).__name__}")
        return method(node, *parts)

    def visit_Var(self, node: Var) -> str:
        return node.name

    def visit_Literal(self, node: Literal) -> str:
        if node.literal_type == "boolean":
            return "true" if node.value else "false"
        return str(node.value)

    def visit_ArithBinOp(self, node: ArithBinOp, left: str, right: str) -> str:
        return f"({node.op.value} {left} {right})"

    def visit_CmpBinOp(self, node: CmpBinOp, left: str, right: str) -> str:
        return f"({node.op.value} {left} {right})"

    def visit_If(self, node: If, condition: str, then_branch: str, else_branch: str) -> str:
        return f"(if {condition} {then_branch} {else_branch})"

    def visit_Fun(self, node: Fun, param_type: str, return_type: str, body: str) -> str:
        return f"(λ ({node.param_name}: {param_type}): {return_type} {body})"

    def visit_Application(self, node: Application, function: str, argument: str) -> str:
        return f"({function} {argument})"

    def visit_IntType(self, node: IntType) -> str:
        return "int"

    def visit_BoolType(self, node: BoolType) -> str:
        return "bool"

    def visit_ArrowType(self, node: ArrowType, param: str, result: str) -> str:
        if isinstance(node.param, ArrowType):
            param = f"({param})"
        return f"{param} -> {result}"


def format_ast(node: ASTNode) -> str:
    """Render an expression or type as an S-expression string."""
    return node.accept(SExpressionPrinter())


def _node_to_dict(node: ASTNode, parts: List[Dict[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {"node": node.node_type.value}

    if isinstance(node, Var):
        result["name"] = node.name
    elif isinstance(node, Literal):
        result["type"] = node.literal_type
        result["value"] = node.value
    elif isinstance(node, (ArithBinOp, CmpBinOp)):
        result["op"] = node.op.value
        result["left"], result["right"] = parts
    elif isinstance(node, Application):
        result["function"], result["argument"] = parts
    elif isinstance(node, If):
        result["condition"], result["then"], result["else"] = parts
    elif isinstance(node, Fun):
        result["param_name"] = node.param_name
        result["param_type"], result["return_type"], result["body"] = parts
    elif isinstance(node, ArrowType):
        result["param"], result["result"] = parts

    return result


def ast_to_dict(node: ASTNode) -> Dict[str, Any]:
    """
    Convert a tree to nested dicts keyed by field name.

    Every dict has a ``"node"`` entry naming the node kind; operators are
    rendered by their surface syntax and spans are omitted.
    """
    return fold_tree(node, _node_to_dict)
