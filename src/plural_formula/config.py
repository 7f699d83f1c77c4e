"""
Configuration model for building PluralForms from plain data.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .forms import DEFAULT_NPLURALS, PluralForms
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits

# Limit field names and their camelCase aliases
_LIMIT_ALIASES = {
    "max_expression_length": "maxExpressionLength",
    "max_ast_depth": "maxAstDepth",
    "max_ast_nodes": "maxAstNodes",
}


def limits_from_mapping(data: Mapping[str, Any]) -> ExpressionLimits:
    """
    Builds ExpressionLimits from a mapping with camelCase or snake_case keys.

    Missing keys fall back to the defaults.
    """
    values = {}
    for name, alias in _LIMIT_ALIASES.items():
        value = data.get(alias, data.get(name, getattr(DEFAULT_EXPRESSION_LIMITS, name)))
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"{alias} must be a positive integer")
        values[name] = value
    return ExpressionLimits(**values)


class PluralFormsConfig(BaseModel):
    """Configuration for creating PluralForms."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Formula source, the text after `plural=` without the trailing ';'
    plural: str = ""

    nplurals: int = Field(default=DEFAULT_NPLURALS, ge=1)

    expression_limits: Optional[ExpressionLimits] = Field(
        default=None, alias="expressionLimits"
    )

    @field_validator("expression_limits", mode="before")
    @classmethod
    def _normalize_limits(cls, value: Any) -> Optional[ExpressionLimits]:
        if value is None or isinstance(value, ExpressionLimits):
            return value
        if isinstance(value, Mapping):
            return limits_from_mapping(value)
        raise ValueError("expressionLimits must be a mapping or ExpressionLimits")


def create_plural_forms(
    config: PluralFormsConfig | Mapping[str, Any] | None = None,
) -> PluralForms:
    """
    Creates PluralForms from the given configuration.

    Args:
        config: A PluralFormsConfig, a mapping of its fields, or None for
            the defaults (two forms, identity formula)

    Returns:
        The compiled plural forms

    Raises:
        pydantic.ValidationError: If the configuration is invalid
        ExpressionError: If the formula does not parse
    """
    if config is None:
        config = PluralFormsConfig()
    elif not isinstance(config, PluralFormsConfig):
        config = PluralFormsConfig.model_validate(dict(config))

    return PluralForms.parse(
        config.plural,
        nplurals=config.nplurals,
        limits=config.expression_limits,
    )
