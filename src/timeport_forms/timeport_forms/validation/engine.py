from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from ..core.constants import DEFAULT_REQUIRED_MESSAGE, DEFAULT_VALIDATION_MESSAGE
from ..core.enums import ValidationRuleType
from ..fields.model import FieldConfig, FieldState, ValidationRule
from .factory import ValidationRuleFactory


@dataclass(frozen=True)
class ValidationFailure:
    field_id: str
    rule_type: ValidationRuleType
    message: str


class ValidationEngine:
    """Runs every rule of a field independently; one failure per failing rule."""

    def __init__(self, factory: Optional[ValidationRuleFactory] = None):
        self._factory = factory or ValidationRuleFactory()

    def validate(self, field: FieldConfig, value: Any, *, state: Optional[FieldState] = None) -> List[ValidationFailure]:
        """Validate ``value`` against ``field``.

        ``state`` is the field's conditional-logic state; hidden fields are
        never validated and ``state.required`` replaces ``field.required``.
        """
        if state is not None and not state.visible:
            return []

        required = state.required if state is not None else field.required
        rules = list(field.validation_rules)
        if required and not any(r.type == ValidationRuleType.REQUIRED for r in rules):
            rules.insert(0, ValidationRule(type=ValidationRuleType.REQUIRED, message=DEFAULT_REQUIRED_MESSAGE))

        failures: List[ValidationFailure] = []
        for rule in rules:
            check = self._factory.for_rule(rule.type)
            if check.passes(value=value, rule=rule, field=field):
                continue
            failures.append(ValidationFailure(field_id=field.id, rule_type=rule.type, message=_message_for(rule)))
        return failures


def _message_for(rule: ValidationRule) -> str:
    if rule.message and rule.message.strip():
        return rule.message
    if rule.type == ValidationRuleType.REQUIRED:
        return DEFAULT_REQUIRED_MESSAGE
    return DEFAULT_VALIDATION_MESSAGE
