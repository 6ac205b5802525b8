from __future__ import annotations

from typing import Any

from ...common.values import to_text
from ...fields.model import FieldConfig, ValidationRule
from .base import RuleCheck, rule_number


class MinLengthCheck(RuleCheck):
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        limit = rule_number(rule)
        if limit is None:
            return True
        return len(to_text(value)) >= limit


class MaxLengthCheck(RuleCheck):
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        limit = rule_number(rule)
        if limit is None:
            return True
        return len(to_text(value)) <= limit
