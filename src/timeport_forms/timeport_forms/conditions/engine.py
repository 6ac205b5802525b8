"""Cross-field show/hide/require/disable rules.

Accumulation policy: every rule whose condition holds contributes its action,
and actions never cancel each other. ``hide`` therefore wins over ``show``: once
any hide rule matches the field stays hidden, whatever the other rules say.
``show`` only restates the default and never un-hides.
"""
from __future__ import annotations

import logging
from typing import Any, Collection, Mapping, Optional

from ..core.enums import ConditionAction
from ..fields.model import ConditionalRule, FieldConfig, FieldState
from .operators import OPERATORS

logger = logging.getLogger(__name__)


class ConditionalLogicEngine:
    def condition_holds(
        self,
        rule: ConditionalRule,
        values: Mapping[str, Any],
        *,
        known_fields: Optional[Collection[str]] = None,
    ) -> bool:
        """Test one rule; a rule pointing at a missing field never holds."""
        if not rule.field or (known_fields is not None and rule.field not in known_fields):
            logger.debug("Conditional rule references unknown field %r; treated as inactive", rule.field)
            return False
        return OPERATORS[rule.operator](values.get(rule.field), rule.value)

    def evaluate(
        self,
        field: FieldConfig,
        values: Mapping[str, Any],
        *,
        known_fields: Optional[Collection[str]] = None,
    ) -> FieldState:
        hidden = False
        required = field.required
        disabled = False

        for rule in field.conditional_logic:
            if not self.condition_holds(rule, values, known_fields=known_fields):
                continue
            if rule.action == ConditionAction.HIDE:
                hidden = True
            elif rule.action == ConditionAction.REQUIRE:
                required = True
            elif rule.action == ConditionAction.DISABLE:
                disabled = True

        return FieldState(visible=not hidden, required=required, disabled=disabled)
