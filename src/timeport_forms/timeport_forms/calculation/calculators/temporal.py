from __future__ import annotations

from typing import Any, Optional, Sequence

from ...common.datetime_utils import coerce_date, coerce_datetime, minutes_of_day, parse_time_of_day
from ...core.constants import MINUTES_PER_DAY
from ...fields.model import CalculationConfig
from .base import Calculator, Resolver, Result


class DateDiffCalculator(Calculator):
    """Whole days from targets[0] to targets[1] (negative if the end comes first)."""

    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        if len(operands) != 2:
            return None
        start, end = coerce_date(operands[0]), coerce_date(operands[1])
        if start is None or end is None:
            return None
        return (end - start).days


class TimeDiffCalculator(Calculator):
    """Whole minutes from targets[0] to targets[1].

    Plain times of day wrap past midnight (22:00 -> 06:00 is 480); full
    datetimes are subtracted as they are.
    """

    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        if len(operands) != 2:
            return None

        start_dt, end_dt = coerce_datetime(operands[0]), coerce_datetime(operands[1])
        if start_dt is not None and end_dt is not None:
            try:
                return int((end_dt - start_dt).total_seconds() / 60)
            except TypeError:
                # naive vs aware datetimes
                return None

        start_t, end_t = parse_time_of_day(operands[0]), parse_time_of_day(operands[1])
        if start_t is None or end_t is None:
            return None
        minutes = minutes_of_day(end_t) - minutes_of_day(start_t)
        if minutes < 0:
            minutes += MINUTES_PER_DAY
        return minutes
