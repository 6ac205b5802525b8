from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ...common.values import normalize_number, to_number
from ...core.exceptions import FormulaError
from ...fields.model import CalculationConfig
from .. import formula
from .base import Calculator, Resolver, Result

logger = logging.getLogger(__name__)


class FormulaCalculator(Calculator):
    """Evaluates ``config.formula`` with field ids bound to their numeric values."""

    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        try:
            tree = formula.parse(config.formula or "")
            result = formula.evaluate(tree, lambda name: to_number(resolve(name)))
        except FormulaError as e:
            logger.debug("Formula for %s unresolved: %s", config.result_field, e)
            return None
        return normalize_number(result)
