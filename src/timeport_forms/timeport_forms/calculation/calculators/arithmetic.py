from __future__ import annotations

import math
from functools import reduce
from typing import Any, List, Optional, Sequence

from ...common.values import Number, normalize_number, to_number
from ...fields.model import CalculationConfig
from .base import Calculator, Resolver, Result


def _numbers(operands: Sequence[Any]) -> Optional[List[Number]]:
    nums = [to_number(v) for v in operands]
    if not nums or any(n is None for n in nums):
        return None
    return nums


def _finite(n: Number) -> Optional[Result]:
    if isinstance(n, float) and not math.isfinite(n):
        return None
    return normalize_number(n)


class SumCalculator(Calculator):
    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        nums = _numbers(operands)
        return _finite(sum(nums)) if nums is not None else None


class MultiplyCalculator(Calculator):
    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        nums = _numbers(operands)
        return _finite(reduce(lambda a, b: a * b, nums)) if nums is not None else None


class SubtractCalculator(Calculator):
    """targets[0] - targets[1] - ..."""

    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        nums = _numbers(operands)
        return _finite(reduce(lambda a, b: a - b, nums)) if nums is not None else None


class DivideCalculator(Calculator):
    """targets[0] / targets[1] / ...; any zero divisor leaves the result unresolved."""

    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        nums = _numbers(operands)
        if nums is None or any(n == 0 for n in nums[1:]):
            return None
        return _finite(reduce(lambda a, b: a / b, nums))
