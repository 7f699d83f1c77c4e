"""
Error types for the plural formula engine.

All formula errors extend ExpressionError for consistent handling. Each
class carries a ``kind`` string so callers can tell failures apart without
matching on class names.
"""

from typing import ClassVar, Optional


class ExpressionError(Exception):
    """
    Base error class for all formula-related errors.
    """

    kind: ClassVar[str] = "expression-error"

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class TokenizerError(ExpressionError):
    """
    Error thrown during tokenization (unrecognized character or word).
    """

    kind: ClassVar[str] = "lexical-error"


class ParseError(ExpressionError):
    """
    Error thrown during parsing (malformed token sequence).
    """

    kind: ClassVar[str] = "syntax-error"

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ):
        super().__init__(message, position, expression)
        self.expected = expected
        self.found = found


class LiteralOverflowError(ParseError):
    """
    Error thrown when an integer literal does not fit in a signed 64-bit integer.
    """

    kind: ClassVar[str] = "literal-overflow"

    def __init__(
        self,
        literal: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        message = f"Integer literal out of range: {literal}"
        super().__init__(message, position, expression, found=literal)
        self.literal = literal


class LimitExceededError(ExpressionError):
    """
    Error thrown when formula limits are exceeded.
    """

    kind: ClassVar[str] = "limit-exceeded"

    def __init__(self, limit_name: str, limit: int, actual: int):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual


class EvaluationError(ExpressionError):
    """
    Error thrown during evaluation (runtime error).
    """

    kind: ClassVar[str] = "evaluation-error"

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
        operator: Optional[str] = None,
        subexpression: Optional[str] = None,
    ):
        super().__init__(message, position, expression)
        self.operator = operator
        self.subexpression = subexpression


class DivisionByZeroError(EvaluationError):
    """Error thrown when the right operand of `/` evaluates to zero."""

    kind: ClassVar[str] = "division-by-zero"


class ModuloByZeroError(EvaluationError):
    """Error thrown when the right operand of `%` evaluates to zero."""

    kind: ClassVar[str] = "modulo-by-zero"


class ArithmeticOverflowError(EvaluationError):
    """
    Error thrown when an intermediate result leaves the signed 64-bit range.
    """

    kind: ClassVar[str] = "arithmetic-overflow"
