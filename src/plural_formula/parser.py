"""
Parser for plural formulas.

Parses a stream of tokens into an Abstract Syntax Tree (AST).
Uses recursive descent parsing with operator precedence.

Precedence (lowest to highest):
1. Ternary: ? :            (condition at OR level, branches are full formulas)
2. Logical OR: ||, or
3. Logical AND: &&, and
4. Comparison: ==, !=, <, <=, >, >=   (one level, chains fold left)
5. Logical NOT: !, not     (looser than arithmetic: !n+1 is !(n+1))
6. Additive: +, -
7. Multiplicative: *, /, %
8. Unary minus and primary: -, literals, n, parentheses

This ordering differs from C, where `!` binds tighter than arithmetic and
equality is looser than relational comparison. Existing catalog formulas
are written against it, so it must not be "corrected".
"""

from typing import Callable, Dict, List, NoReturn

from .ast import (
    AstNode,
    BinaryOperator,
    BinaryOpNode,
    NumberLiteralNode,
    TernaryOpNode,
    UnaryOpNode,
    VariableNode,
    calculate_ast_depth,
    count_ast_nodes,
)
from .errors import LiteralOverflowError, ParseError
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    MAX_INTEGER,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
)
from .tokenizer import Token, TokenType, tokenize

COMPARISON_OPERATORS: Dict[TokenType, BinaryOperator] = {
    TokenType.EQ: "==",
    TokenType.NE: "!=",
    TokenType.LT: "<",
    TokenType.LE: "<=",
    TokenType.GT: ">",
    TokenType.GE: ">=",
}

MULTIPLICATIVE_OPERATORS: Dict[TokenType, BinaryOperator] = {
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.PERCENT: "%",
}

# Longest decimal literal that can still be a signed 64-bit value
_MAX_LITERAL_DIGITS = len(str(MAX_INTEGER))


def _describe(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of expression"
    return f"'{token.value}'"


class Parser:
    """Parser for formula strings."""

    def __init__(
        self,
        tokens: List[Token],
        source: str,
        limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
    ):
        self._tokens = tokens
        self._source = source
        self._limits = limits
        self._current = 0
        self._depth = 0

    def parse(self) -> AstNode:
        """Parses the token stream into an AST."""
        ast = self._parse_ternary()

        if not self._is_at_end():
            self._error("end of expression")

        # Validate AST limits
        node_count = count_ast_nodes(ast)
        check_ast_node_count(node_count, self._limits)

        depth = calculate_ast_depth(ast)
        check_ast_depth(depth, self._limits)

        return ast

    # ============================================================
    # Token Helpers
    # ============================================================

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self._tokens[self._current]

    def _previous(self) -> Token:
        return self._tokens[self._current - 1]

    def _advance(self) -> Token:
        if not self._is_at_end():
            self._current += 1
        return self._previous()

    def _check(self, token_type: TokenType) -> bool:
        if self._is_at_end():
            return False
        return self._peek().type == token_type

    def _match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self._check(token_type):
                self._advance()
                return True
        return False

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _error(self, expected: str) -> NoReturn:
        token = self._peek()
        found = _describe(token)
        raise ParseError(
            f"Expected {expected} but found {found}",
            token.position,
            self._source,
            expected=expected,
            found=found,
        )

    def _parse_nested(self, parse: Callable[[], AstNode]) -> AstNode:
        """Runs a recursive sub-parse, bounding the nesting depth."""
        self._depth += 1
        try:
            check_ast_depth(self._depth, self._limits)
            return parse()
        finally:
            self._depth -= 1

    # ============================================================
    # Formula Parsing (by precedence, lowest to highest)
    # ============================================================

    def _parse_ternary(self) -> AstNode:
        """Parses ternary expressions: condition ? consequent : alternate"""
        position = self._peek().position
        node = self._parse_or()

        if self._match(TokenType.QUESTION):
            consequent = self._parse_nested(self._parse_ternary)
            self._consume(TokenType.COLON, "':' in ternary expression")
            alternate = self._parse_nested(self._parse_ternary)

            node = TernaryOpNode(
                position=position,
                condition=node,
                consequent=consequent,
                alternate=alternate,
            )

        return node

    def _parse_or(self) -> AstNode:
        """Parses logical OR: ||, or"""
        node = self._parse_and()

        while self._match(TokenType.OR):
            position = self._previous().position
            right = self._parse_and()
            node = BinaryOpNode(
                position=position,
                operator="||",
                left=node,
                right=right,
            )

        return node

    def _parse_and(self) -> AstNode:
        """Parses logical AND: &&, and"""
        node = self._parse_comparison()

        while self._match(TokenType.AND):
            position = self._previous().position
            right = self._parse_comparison()
            node = BinaryOpNode(
                position=position,
                operator="&&",
                left=node,
                right=right,
            )

        return node

    def _parse_comparison(self) -> AstNode:
        """Parses comparison and equality: ==, !=, <, <=, >, >="""
        node = self._parse_not()

        while self._match(*COMPARISON_OPERATORS):
            token = self._previous()
            right = self._parse_not()
            node = BinaryOpNode(
                position=token.position,
                operator=COMPARISON_OPERATORS[token.type],
                left=node,
                right=right,
            )

        return node

    def _parse_not(self) -> AstNode:
        """Parses logical NOT: !, not"""
        if self._match(TokenType.NOT):
            position = self._previous().position
            operand = self._parse_nested(self._parse_not)
            return UnaryOpNode(position=position, operator="!", operand=operand)

        return self._parse_additive()

    def _parse_additive(self) -> AstNode:
        """Parses additive: +, -"""
        node = self._parse_multiplicative()

        while self._match(TokenType.PLUS, TokenType.MINUS):
            operator: BinaryOperator = "+" if self._previous().type == TokenType.PLUS else "-"
            position = self._previous().position
            right = self._parse_multiplicative()
            node = BinaryOpNode(
                position=position,
                operator=operator,
                left=node,
                right=right,
            )

        return node

    def _parse_multiplicative(self) -> AstNode:
        """Parses multiplicative: *, /, %"""
        node = self._parse_unary()

        while self._match(*MULTIPLICATIVE_OPERATORS):
            token = self._previous()
            right = self._parse_unary()
            node = BinaryOpNode(
                position=token.position,
                operator=MULTIPLICATIVE_OPERATORS[token.type],
                left=node,
                right=right,
            )

        return node

    def _parse_unary(self) -> AstNode:
        """Parses unary minus"""
        if self._match(TokenType.MINUS):
            position = self._previous().position
            operand = self._parse_nested(self._parse_unary)
            return UnaryOpNode(position=position, operator="-", operand=operand)

        return self._parse_primary()

    def _parse_primary(self) -> AstNode:
        """Parses primary expressions: literals, n, parentheses."""
        token = self._peek()
        position = token.position

        if self._match(TokenType.NUMBER):
            return NumberLiteralNode(position=position, value=self._parse_literal(token))

        if self._match(TokenType.VARIABLE):
            return VariableNode(position=position)

        # Parenthesized expression
        if self._match(TokenType.LPAREN):
            expr = self._parse_nested(self._parse_ternary)
            self._consume(TokenType.RPAREN, "')' after expression")
            return expr

        self._error("expression")

    def _parse_literal(self, token: Token) -> int:
        digits = token.value.lstrip("0") or "0"
        if len(digits) > _MAX_LITERAL_DIGITS or int(digits) > MAX_INTEGER:
            raise LiteralOverflowError(token.value, token.position, self._source)
        return int(digits)


def parse(
    source: str, limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS
) -> AstNode:
    """
    Parses a formula string into an AST.

    Args:
        source: The formula string to parse, e.g. ``"n != 1"``
        limits: Optional formula limits

    Returns:
        The parsed AST

    Raises:
        TokenizerError: If tokenization fails
        ParseError: If parsing fails
        LiteralOverflowError: If an integer literal is out of range
        LimitExceededError: If the formula exceeds the configured limits
    """
    tokens = tokenize(source, limits)
    parser = Parser(tokens, source, limits)
    return parser.parse()
