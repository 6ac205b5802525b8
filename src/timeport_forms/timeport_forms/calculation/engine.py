from __future__ import annotations

import logging
from typing import Any, Collection, Mapping, Optional

from ..common.values import is_empty
from ..conditions.engine import ConditionalLogicEngine
from ..fields.model import CalculationConfig
from .calculators.base import Result
from .factory import CalculatorFactory

logger = logging.getLogger(__name__)


class CalculationEngine:
    def __init__(
        self,
        factory: Optional[CalculatorFactory] = None,
        conditions: Optional[ConditionalLogicEngine] = None,
    ):
        self._factory = factory or CalculatorFactory()
        self._conditions = conditions or ConditionalLogicEngine()

    def compute(
        self,
        config: CalculationConfig,
        values: Mapping[str, Any],
        *,
        known_fields: Optional[Collection[str]] = None,
    ) -> Optional[Result]:
        """Compute the derived value, or None when it cannot be resolved yet.

        Targets that no longer exist in the schema (``known_fields``) are
        dropped from the operand list; a target that exists but has no usable
        value leaves the whole calculation unresolved.
        """
        for cond in config.conditions:
            if not self._conditions.condition_holds(cond, values, known_fields=known_fields):
                return None

        operands = []
        for target in config.target_fields:
            if known_fields is not None and target not in known_fields:
                logger.debug("Calculation for %s skips missing target %s", config.result_field, target)
                continue
            value = values.get(target)
            if is_empty(value):
                logger.debug("Calculation for %s waiting on %s", config.result_field, target)
                return None
            operands.append(value)

        if not operands and config.target_fields:
            return None

        def resolve(field_id: str) -> Any:
            if known_fields is not None and field_id not in known_fields:
                return None
            return values.get(field_id)

        return self._factory.for_type(config.type).compute(config, operands, resolve)
