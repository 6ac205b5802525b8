from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ...common.values import Number, to_number
from ...fields.model import FieldConfig, ValidationRule


class RuleCheck(ABC):
    """Strategy Pattern: one check per validation rule type."""

    @abstractmethod
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        raise NotImplementedError


def rule_number(rule: ValidationRule) -> Optional[Number]:
    return to_number(rule.value)
