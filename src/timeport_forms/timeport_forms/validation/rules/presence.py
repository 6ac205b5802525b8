from __future__ import annotations

from typing import Any

from ...common.values import is_empty
from ...core.enums import FieldType
from ...fields.model import FieldConfig, ValidationRule
from .base import RuleCheck


class RequiredCheck(RuleCheck):
    """Fails on None, blank strings and empty collections."""

    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        if field.type == FieldType.CHECKBOX and value is False:
            # An unticked single checkbox counts as not answered.
            return False
        return not is_empty(value)
