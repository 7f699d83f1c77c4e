"""
Resource limits for formula parsing and evaluation.

These limits bound recursion depth in the parser and evaluator and
protect against overly complex formulas coming from untrusted catalogs.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import LimitExceededError

# Formulas compute with C-style signed 64-bit integers.
MIN_INTEGER = -(2**63)
MAX_INTEGER = 2**63 - 1


@dataclass(frozen=True)
class ExpressionLimits:
    """Formula limits configuration."""

    # Maximum formula string length in characters
    max_expression_length: int = 4096

    # Maximum AST depth (nesting level)
    max_ast_depth: int = 64

    # Maximum number of AST nodes
    max_ast_nodes: int = 512


# Default formula limits.
#
# Real-world Plural-Forms formulas are well under a hundred nodes.
DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def is_in_integer_range(value: int) -> bool:
    """Checks that a value fits in a signed 64-bit integer."""
    return MIN_INTEGER <= value <= MAX_INTEGER


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that formula length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        raise LimitExceededError(
            "max_expression_length", limits.max_expression_length, len(expression)
        )


def check_ast_depth(depth: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates AST depth during parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_ast_depth:
        raise LimitExceededError("max_ast_depth", limits.max_ast_depth, depth)


def check_ast_node_count(
    count: int, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates AST node count during parsing."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_ast_nodes:
        raise LimitExceededError("max_ast_nodes", limits.max_ast_nodes, count)
