"""
Tokenizer (lexer) for plural formulas.

Converts formula strings into a stream of tokens for the parser.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .errors import TokenizerError
from .limits import ExpressionLimits, check_expression_length


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    # Literals
    NUMBER = "NUMBER"

    # The quantity
    VARIABLE = "VARIABLE"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    PERCENT = "PERCENT"
    LT = "LT"
    LE = "LE"
    GT = "GT"
    GE = "GE"
    EQ = "EQ"
    NE = "NE"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    QUESTION = "QUESTION"
    COLON = "COLON"

    # Delimiters
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"

    # Special
    EOF = "EOF"


@dataclass
class Token:
    """A token produced by the tokenizer."""

    type: TokenType
    value: str
    position: int


# Words recognized by the tokenizer
KEYWORDS: Dict[str, TokenType] = {
    "n": TokenType.VARIABLE,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
}

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "!": TokenType.NOT,
}

TWO_CHAR_TOKENS: Dict[str, TokenType] = {
    "==": TokenType.EQ,
    "!=": TokenType.NE,
    "<=": TokenType.LE,
    ">=": TokenType.GE,
    "&&": TokenType.AND,
    "||": TokenType.OR,
}

# Characters that only appear doubled
HALF_OPERATORS = "=&|"


def _is_digit(ch: str) -> bool:
    """Checks if a character is a digit."""
    return "0" <= ch <= "9"


def _is_word_start(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_word_part(ch: str) -> bool:
    return _is_word_start(ch) or _is_digit(ch)


class Tokenizer:
    """Tokenizer for formula strings."""

    def __init__(self, source: str, limits: Optional[ExpressionLimits] = None):
        self._source = source
        self._limits = limits
        self._position = 0
        self._tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """Tokenizes the source formula and returns all tokens."""
        check_expression_length(self._source, self._limits)

        while not self._is_at_end():
            self._scan_token()

        self._tokens.append(Token(TokenType.EOF, "", self._position))
        return self._tokens

    def _is_at_end(self) -> bool:
        return self._position >= len(self._source)

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self._source[self._position]

    def _advance(self) -> str:
        ch = self._source[self._position]
        self._position += 1
        return ch

    def _add_token(self, token_type: TokenType, value: str, position: int) -> None:
        self._tokens.append(Token(token_type, value, position))

    def _scan_token(self) -> None:
        start_position = self._position
        ch = self._advance()

        if ch.isspace():
            return

        # Longest match first: "<=" before "<", "!=" before "!"
        pair = ch + self._peek()
        if pair in TWO_CHAR_TOKENS:
            self._advance()
            self._add_token(TWO_CHAR_TOKENS[pair], pair, start_position)
            return

        if ch in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[ch], ch, start_position)
            return

        if ch in HALF_OPERATORS:
            raise TokenizerError(
                f"Unexpected '{ch}'. Did you mean '{ch * 2}'?",
                start_position,
                self._source,
            )

        if _is_digit(ch):
            self._scan_number(start_position)
        elif _is_word_start(ch):
            self._scan_word(start_position)
        else:
            raise TokenizerError(
                f"Unexpected character: '{ch}'", start_position, self._source
            )

    def _scan_number(self, start_position: int) -> None:
        # Back up to include the first digit
        self._position -= 1

        value = ""
        while _is_digit(self._peek()):
            value += self._advance()

        # Range checking happens in the parser, which owns literal conversion
        self._add_token(TokenType.NUMBER, value, start_position)

    def _scan_word(self, start_position: int) -> None:
        # Back up to include the first character
        self._position -= 1

        value = ""
        while _is_word_part(self._peek()):
            value += self._advance()

        keyword_type = KEYWORDS.get(value)
        if keyword_type is None:
            raise TokenizerError(
                f"Unexpected identifier: '{value}'. Only 'n' may be used as a variable",
                start_position,
                self._source,
            )
        self._add_token(keyword_type, value, start_position)


def tokenize(source: str, limits: Optional[ExpressionLimits] = None) -> List[Token]:
    """
    Tokenizes a formula string into tokens.

    Args:
        source: The formula string to tokenize
        limits: Optional formula limits

    Returns:
        List of tokens, always terminated by an EOF token

    Raises:
        TokenizerError: If the formula contains invalid characters or words
        LimitExceededError: If the formula is longer than allowed
    """
    tokenizer = Tokenizer(source, limits)
    return tokenizer.tokenize()
