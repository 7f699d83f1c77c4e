"""
Abstract Syntax Tree (AST) node types for plural formulas.

The AST is produced by the parser and consumed by the evaluator. Nodes are
frozen and own their children exclusively, so a parsed tree can be shared
between threads and evaluated concurrently.
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import List, Literal, Tuple, Union

# ============================================================
# Operator Types
# ============================================================

UnaryOperator = Literal["!", "-"]

BinaryOperator = Literal[
    "*",
    "/",
    "%",
    "+",
    "-",
    "<",
    "<=",
    ">",
    ">=",
    "==",
    "!=",
    "&&",
    "||",
]


# ============================================================
# AST Node Types
# ============================================================


@dataclass(frozen=True)
class AstNodeBase(ABC):
    """Base class for all AST nodes."""

    position: int = field(compare=False)
    """Position in source formula (for error reporting, ignored by equality)."""


@dataclass(frozen=True)
class NumberLiteralNode(AstNodeBase):
    """Integer literal node."""

    value: int

    @property
    def type(self) -> Literal["NumberLiteral"]:
        return "NumberLiteral"


@dataclass(frozen=True)
class VariableNode(AstNodeBase):
    """The quantity ``n`` bound at evaluation time."""

    @property
    def type(self) -> Literal["Variable"]:
        return "Variable"


@dataclass(frozen=True)
class UnaryOpNode(AstNodeBase):
    """Unary operator node."""

    operator: UnaryOperator
    operand: "AstNode"

    @property
    def type(self) -> Literal["UnaryOp"]:
        return "UnaryOp"


@dataclass(frozen=True)
class BinaryOpNode(AstNodeBase):
    """Binary operator node."""

    operator: BinaryOperator
    left: "AstNode"
    right: "AstNode"

    @property
    def type(self) -> Literal["BinaryOp"]:
        return "BinaryOp"


@dataclass(frozen=True)
class TernaryOpNode(AstNodeBase):
    """Ternary operator node (condition ? consequent : alternate)."""

    condition: "AstNode"
    consequent: "AstNode"
    alternate: "AstNode"

    @property
    def type(self) -> Literal["TernaryOp"]:
        return "TernaryOp"


# Union type for all AST nodes
AstNode = Union[
    NumberLiteralNode,
    VariableNode,
    UnaryOpNode,
    BinaryOpNode,
    TernaryOpNode,
]


# ============================================================
# AST Utilities
# ============================================================


def _children(node: AstNode) -> Tuple[AstNode, ...]:
    if isinstance(node, UnaryOpNode):
        return (node.operand,)
    if isinstance(node, BinaryOpNode):
        return (node.left, node.right)
    if isinstance(node, TernaryOpNode):
        return (node.condition, node.consequent, node.alternate)
    return ()


# Walked with an explicit stack: a left-deep chain such as "n + n + ... + n"
# can outgrow the recursion limit before the depth limit rejects it.


def count_ast_nodes(node: AstNode) -> int:
    """Counts the total number of nodes in an AST."""
    count = 0
    stack: List[AstNode] = [node]
    while stack:
        current = stack.pop()
        count += 1
        stack.extend(_children(current))
    return count


def calculate_ast_depth(node: AstNode) -> int:
    """Calculates the maximum depth of an AST."""
    max_depth = 0
    stack: List[Tuple[AstNode, int]] = [(node, 1)]
    while stack:
        current, depth = stack.pop()
        max_depth = max(max_depth, depth)
        stack.extend((child, depth + 1) for child in _children(current))
    return max_depth


def ast_to_string(node: AstNode, indent: int = 0) -> str:
    """Returns a human-readable representation of an AST node for debugging."""
    prefix = "  " * indent

    if isinstance(node, NumberLiteralNode):
        return f"{prefix}Number: {node.value}"

    if isinstance(node, VariableNode):
        return f"{prefix}Variable: n"

    if isinstance(node, UnaryOpNode):
        return f"{prefix}UnaryOp: {node.operator}\n{ast_to_string(node.operand, indent + 1)}"

    if isinstance(node, BinaryOpNode):
        return (
            f"{prefix}BinaryOp: {node.operator}\n"
            f"{ast_to_string(node.left, indent + 1)}\n"
            f"{ast_to_string(node.right, indent + 1)}"
        )

    if isinstance(node, TernaryOpNode):
        return (
            f"{prefix}TernaryOp:\n"
            f"{prefix}  condition:\n{ast_to_string(node.condition, indent + 2)}\n"
            f"{prefix}  consequent:\n{ast_to_string(node.consequent, indent + 2)}\n"
            f"{prefix}  alternate:\n{ast_to_string(node.alternate, indent + 2)}"
        )

    return f"{prefix}Unknown: {node}"


def ast_to_source(node: AstNode) -> str:
    """
    Renders an AST back into formula text.

    Every compound sub-expression is parenthesized, so the output parses
    back into an equal tree regardless of the operator precedence rules.
    """
    return _to_source(node, nested=False)


def _to_source(node: AstNode, nested: bool) -> str:
    if isinstance(node, NumberLiteralNode):
        return str(node.value)

    if isinstance(node, VariableNode):
        return "n"

    if isinstance(node, UnaryOpNode):
        text = f"{node.operator}{_to_source(node.operand, nested=True)}"
        # `!` binds looser than arithmetic, so it must not appear bare inside it
        return f"({text})" if nested and node.operator == "!" else text

    if isinstance(node, BinaryOpNode):
        text = (
            f"{_to_source(node.left, nested=True)} {node.operator} "
            f"{_to_source(node.right, nested=True)}"
        )
    elif isinstance(node, TernaryOpNode):
        text = (
            f"{_to_source(node.condition, nested=True)} ? "
            f"{_to_source(node.consequent, nested=True)} : "
            f"{_to_source(node.alternate, nested=True)}"
        )
    else:
        raise ValueError(f"Unknown AST node: {node!r}")

    return f"({text})" if nested else text
