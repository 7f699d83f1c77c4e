"""
Formula evaluator.

Evaluates an AST for a bound quantity ``n`` and returns an integer.

Numeric semantics follow C on signed 64-bit integers:
- Booleans are the integers 1 and 0; any nonzero value is true.
- ``&&`` and ``||`` short-circuit and always yield 1 or 0.
- ``/`` truncates toward zero and ``%`` takes the sign of the dividend.
- Results outside the 64-bit range raise instead of wrapping.
- Only the taken branch of a ternary is evaluated.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .ast import (
    AstNode,
    BinaryOperator,
    BinaryOpNode,
    NumberLiteralNode,
    TernaryOpNode,
    UnaryOpNode,
    VariableNode,
    ast_to_source,
)
from .errors import (
    ArithmeticOverflowError,
    DivisionByZeroError,
    EvaluationError,
    ExpressionError,
    ModuloByZeroError,
)
from .limits import is_in_integer_range


@dataclass
class EvaluationContext:
    """Evaluation context holding the bound quantity."""

    n: int
    """The quantity the formula selects a plural form for."""

    source: Optional[str] = None
    """Source formula for error reporting."""

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int):
            raise TypeError(f"Quantity must be an integer, got {type(self.n).__name__}")


@dataclass
class EvaluationResult:
    """Result of formula evaluation."""

    value: Optional[int]
    """The evaluated value."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""

    error_kind: Optional[str] = None
    """Kind of the error if evaluation failed (e.g. "division-by-zero")."""


def _bool_to_int(value: bool) -> int:
    return 1 if value else 0


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _truncating_mod(left: int, right: int) -> int:
    return left - right * _truncating_div(left, right)


class Evaluator:
    """Evaluates an AST node and returns the result."""

    def __init__(self, context: EvaluationContext):
        self._context = context
        self._source = context.source or ""

    def evaluate(self, node: AstNode) -> int:
        """Evaluates an AST node and returns the value."""
        if isinstance(node, NumberLiteralNode):
            return node.value

        if isinstance(node, VariableNode):
            return self._evaluate_variable(node)

        if isinstance(node, UnaryOpNode):
            return self._evaluate_unary_op(node)

        if isinstance(node, BinaryOpNode):
            return self._evaluate_binary_op(node)

        if isinstance(node, TernaryOpNode):
            return self._evaluate_ternary_op(node)

        raise EvaluationError(f"Unknown AST node: {node!r}", None, self._source)

    def _evaluate_variable(self, node: VariableNode) -> int:
        n = self._context.n
        if not is_in_integer_range(n):
            raise ArithmeticOverflowError(
                f"Quantity {n} is outside the signed 64-bit range",
                node.position,
                self._source,
            )
        return n

    def _evaluate_unary_op(self, node: UnaryOpNode) -> int:
        value = self.evaluate(node.operand)

        if node.operator == "!":
            return _bool_to_int(value == 0)

        return self._checked(-value, node)

    def _evaluate_binary_op(self, node: BinaryOpNode) -> int:
        operator = node.operator

        # Short-circuit evaluation for logical operators
        if operator == "&&":
            if self.evaluate(node.left) == 0:
                return 0
            return _bool_to_int(self.evaluate(node.right) != 0)

        if operator == "||":
            if self.evaluate(node.left) != 0:
                return 1
            return _bool_to_int(self.evaluate(node.right) != 0)

        # Eager evaluation for other operators
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)

        if operator == "+":
            return self._checked(left + right, node)
        if operator == "-":
            return self._checked(left - right, node)
        if operator == "*":
            return self._checked(left * right, node)

        if operator == "/":
            if right == 0:
                raise DivisionByZeroError(
                    f"Division by zero in '{ast_to_source(node)}'",
                    node.position,
                    self._source,
                    operator=operator,
                    subexpression=ast_to_source(node),
                )
            return self._checked(_truncating_div(left, right), node)

        if operator == "%":
            if right == 0:
                raise ModuloByZeroError(
                    f"Modulo by zero in '{ast_to_source(node)}'",
                    node.position,
                    self._source,
                    operator=operator,
                    subexpression=ast_to_source(node),
                )
            return _truncating_mod(left, right)

        return self._evaluate_comparison(operator, left, right)

    def _evaluate_comparison(
        self, operator: BinaryOperator, left: int, right: int
    ) -> int:
        if operator == "==":
            return _bool_to_int(left == right)
        if operator == "!=":
            return _bool_to_int(left != right)
        if operator == "<":
            return _bool_to_int(left < right)
        if operator == "<=":
            return _bool_to_int(left <= right)
        if operator == ">":
            return _bool_to_int(left > right)
        if operator == ">=":
            return _bool_to_int(left >= right)

        raise EvaluationError(f"Unknown operator: {operator}", None, self._source)

    def _evaluate_ternary_op(self, node: TernaryOpNode) -> int:
        if self.evaluate(node.condition) != 0:
            return self.evaluate(node.consequent)
        return self.evaluate(node.alternate)

    def _checked(self, value: int, node: Union[UnaryOpNode, BinaryOpNode]) -> int:
        if not is_in_integer_range(value):
            raise ArithmeticOverflowError(
                f"Integer overflow in '{ast_to_source(node)}'",
                node.position,
                self._source,
                operator=node.operator,
                subexpression=ast_to_source(node),
            )
        return value


def evaluate(
    ast: AstNode, context: Union[EvaluationContext, int]
) -> EvaluationResult:
    """
    Evaluates an AST for a quantity and returns the result.

    Args:
        ast: The AST to evaluate
        context: The evaluation context, or the bare quantity ``n``

    Returns:
        The evaluation result with value and success status. Formula errors
        (division by zero, overflow) are reported in the result, not raised.
    """
    if not isinstance(context, EvaluationContext):
        context = EvaluationContext(n=context)

    try:
        evaluator = Evaluator(context)
        value = evaluator.evaluate(ast)
        return EvaluationResult(value=value, success=True)
    except ExpressionError as error:
        return EvaluationResult(
            value=None, success=False, error=error.message, error_kind=error.kind
        )
