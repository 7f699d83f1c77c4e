"""
Plural formula engine.

This package parses and evaluates the C-like formulas found in the
``Plural-Forms`` header of Gettext catalogs, mapping a quantity to the
index of the plural form to use.
"""

# Core types and utilities
from .ast import (
    AstNode,
    AstNodeBase,
    BinaryOperator,
    BinaryOpNode,
    NumberLiteralNode,
    TernaryOpNode,
    UnaryOperator,
    UnaryOpNode,
    VariableNode,
    ast_to_source,
    ast_to_string,
    calculate_ast_depth,
    count_ast_nodes,
)

# Configuration
from .config import PluralFormsConfig, create_plural_forms, limits_from_mapping
from .errors import (
    ArithmeticOverflowError,
    DivisionByZeroError,
    EvaluationError,
    ExpressionError,
    LimitExceededError,
    LiteralOverflowError,
    ModuloByZeroError,
    ParseError,
    TokenizerError,
)

# Evaluator
from .evaluator import (
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    evaluate,
)
from .forms import PluralForms
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    MAX_INTEGER,
    MIN_INTEGER,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_expression_length,
)

# Parser
from .parser import (
    Parser,
    parse,
)

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    tokenize,
)

__all__ = [
    # AST types
    "AstNode",
    "AstNodeBase",
    "NumberLiteralNode",
    "VariableNode",
    "UnaryOpNode",
    "BinaryOpNode",
    "TernaryOpNode",
    "UnaryOperator",
    "BinaryOperator",
    "count_ast_nodes",
    "calculate_ast_depth",
    "ast_to_string",
    "ast_to_source",
    # Errors
    "ExpressionError",
    "TokenizerError",
    "ParseError",
    "LiteralOverflowError",
    "LimitExceededError",
    "EvaluationError",
    "DivisionByZeroError",
    "ModuloByZeroError",
    "ArithmeticOverflowError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "MIN_INTEGER",
    "MAX_INTEGER",
    "check_expression_length",
    "check_ast_depth",
    "check_ast_node_count",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    # Evaluator
    "EvaluationContext",
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    # Plural forms
    "PluralForms",
    "PluralFormsConfig",
    "create_plural_forms",
    "limits_from_mapping",
]
