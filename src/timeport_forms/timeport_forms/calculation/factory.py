from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import CalculationType
from .calculators.arithmetic import DivideCalculator, MultiplyCalculator, SubtractCalculator, SumCalculator
from .calculators.base import Calculator
from .calculators.formula_calculator import FormulaCalculator
from .calculators.temporal import DateDiffCalculator, TimeDiffCalculator


@dataclass
class CalculatorFactory:
    """Factory Pattern: choose the calculator for a calculation type."""

    def for_type(self, calc_type: CalculationType) -> Calculator:
        calc_type = CalculationType(calc_type)
        if calc_type == CalculationType.SUM:
            return SumCalculator()
        if calc_type == CalculationType.MULTIPLY:
            return MultiplyCalculator()
        if calc_type == CalculationType.SUBTRACT:
            return SubtractCalculator()
        if calc_type == CalculationType.DIVIDE:
            return DivideCalculator()
        if calc_type == CalculationType.DATE_DIFF:
            return DateDiffCalculator()
        if calc_type == CalculationType.TIME_DIFF:
            return TimeDiffCalculator()
        return FormulaCalculator()
