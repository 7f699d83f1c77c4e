"""
Compiled Plural-Forms: a parsed formula paired with its plural count.

The formula engine itself has no notion of how many plural forms a catalog
declares. PluralForms adds that, and only hands out indexes that are valid
for the catalog's ``nplurals``.
"""

import logging
from typing import Optional

from .ast import AstNode, VariableNode
from .evaluator import EvaluationContext, EvaluationResult, evaluate
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .parser import parse

logger = logging.getLogger("plural_formula.forms")

DEFAULT_NPLURALS = 2


class PluralForms:
    """A Plural-Forms rule ready to select plural indexes."""

    def __init__(self, formula: str, count: int, ast: AstNode):
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValueError(f"nplurals must be a positive integer, got {count!r}")
        self._formula = formula
        self._count = count
        self._ast = ast

    @classmethod
    def parse(
        cls,
        formula: str,
        nplurals: int = DEFAULT_NPLURALS,
        limits: Optional[ExpressionLimits] = None,
    ) -> "PluralForms":
        """
        Compiles a formula for a catalog declaring ``nplurals`` forms.

        An empty formula selects the form whose index equals the quantity.

        Raises:
            ValueError: If nplurals is not a positive integer
            ExpressionError: If the formula does not parse
        """
        source = formula.strip()
        if source:
            ast = parse(source, limits or DEFAULT_EXPRESSION_LIMITS)
        else:
            ast = VariableNode(position=0)

        forms = cls(source, nplurals, ast)
        logger.debug(
            "plural_forms_compiled",
            extra={"formula": source, "nplurals": nplurals},
        )
        return forms

    @property
    def count(self) -> int:
        """Number of plural forms (nplurals)."""
        return self._count

    @property
    def formula(self) -> str:
        return self._formula

    @property
    def ast(self) -> AstNode:
        return self._ast

    def evaluate(self, quantity: int) -> EvaluationResult:
        """Evaluates the raw formula, without any bounds check."""
        return evaluate(self._ast, EvaluationContext(n=quantity, source=self._formula))

    def get_value(self, quantity: int) -> Optional[int]:
        """
        Returns the plural form index for a quantity.

        Returns None when the formula fails for this quantity or produces
        an index outside ``[0, nplurals)``.
        """
        result = self.evaluate(quantity)

        if not result.success:
            logger.warning(
                "plural_evaluation_failed",
                extra={
                    "formula": self._formula,
                    "quantity": quantity,
                    "error": result.error,
                    "error_kind": result.error_kind,
                },
            )
            return None

        index = result.value
        if index is None or not 0 <= index < self._count:
            logger.warning(
                "plural_index_out_of_range",
                extra={
                    "formula": self._formula,
                    "quantity": quantity,
                    "index": index,
                    "nplurals": self._count,
                },
            )
            return None

        return index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PluralForms):
            return NotImplemented
        return self._count == other._count and self._ast == other._ast

    def __hash__(self) -> int:
        return hash((self._count, self._ast))

    def __repr__(self) -> str:
        return f"PluralForms(nplurals={self._count}, plural={self._formula!r})"
