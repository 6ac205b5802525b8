from __future__ import annotations

from typing import Any

from ...common.values import to_number
from ...fields.model import FieldConfig, ValidationRule
from .base import RuleCheck, rule_number


class MinValueCheck(RuleCheck):
    """Non-numeric values cannot satisfy a bound."""

    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        bound = rule_number(rule)
        if bound is None:
            return True
        n = to_number(value)
        return n is not None and n >= bound


class MaxValueCheck(RuleCheck):
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        bound = rule_number(rule)
        if bound is None:
            return True
        n = to_number(value)
        return n is not None and n <= bound
