from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..calculation.engine import CalculationEngine
from ..conditions.engine import ConditionalLogicEngine
from ..fields.model import FieldConfig, FieldState
from ..fields.schema import field_ids
from ..validation.engine import ValidationEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    valid: bool
    errors: Dict[str, List[str]]
    values: Dict[str, Any]
    states: Dict[str, FieldState] = field(default_factory=dict)

    def payload(self, fields: Sequence[FieldConfig]) -> Dict[str, Any]:
        """``values`` re-keyed by field name, the shape stored with a submission."""
        return {f.name: self.values[f.id] for f in fields if f.id in self.values}

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": {k: list(v) for k, v in self.errors.items()},
            "values": dict(self.values),
            "states": {k: s.to_dict() for k, s in self.states.items()},
        }


class FormSubmissionEvaluator:
    """Pure function of (schema, values); safe to re-run on every change.

    Values are keyed by field id. Conditional logic reads the raw values;
    calculations run once, also over the raw values, and their results are
    overlaid before validation.
    """

    def __init__(
        self,
        *,
        conditions: Optional[ConditionalLogicEngine] = None,
        calculations: Optional[CalculationEngine] = None,
        validation: Optional[ValidationEngine] = None,
    ):
        self._conditions = conditions or ConditionalLogicEngine()
        self._calculations = calculations or CalculationEngine(conditions=self._conditions)
        self._validation = validation or ValidationEngine()

    def field_states(self, fields: Sequence[FieldConfig], values: Mapping[str, Any]) -> Dict[str, FieldState]:
        known = field_ids(fields)
        return {f.id: self._conditions.evaluate(f, values, known_fields=known) for f in fields}

    def derive_values(self, fields: Sequence[FieldConfig], values: Mapping[str, Any]) -> Dict[str, Any]:
        known = field_ids(fields)
        derived = dict(values)
        for f in fields:
            calc = f.calculation_config
            if not calc:
                continue
            if calc.result_field not in known:
                logger.debug("Calculation on %s writes to unknown field %s; skipped", f.id, calc.result_field)
                continue
            result = self._calculations.compute(calc, values, known_fields=known)
            if result is not None:
                derived[calc.result_field] = result
        return derived

    def evaluate(self, fields: Sequence[FieldConfig], values: Mapping[str, Any]) -> SubmissionResult:
        states = self.field_states(fields, values)
        derived = self.derive_values(fields, values)

        errors: Dict[str, List[str]] = {}
        for f in fields:
            state = states[f.id]
            if not state.visible or state.disabled:
                continue
            failures = self._validation.validate(f, derived.get(f.id), state=state)
            if failures:
                errors[f.id] = [x.message for x in failures]

        out_values = {f.id: derived[f.id] for f in fields if f.id in derived and states[f.id].visible}
        return SubmissionResult(valid=not errors, errors=errors, values=out_values, states=states)
