"""Named predicates for ``custom`` validation rules.

``rule.value`` holds the predicate name. Predicates receive the raw value and
the field and return True when the value is acceptable. Empty values pass:
emptiness is the ``required`` rule's concern.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ...common.datetime_utils import coerce_date, coerce_datetime, today_local
from ...common.values import is_empty, to_number
from ...fields.model import FieldConfig, ValidationRule
from .base import RuleCheck

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, FieldConfig], bool]


def _past_date(value: Any, field: FieldConfig) -> bool:
    d = coerce_date(value)
    return d is not None and d <= today_local()


def _future_date(value: Any, field: FieldConfig) -> bool:
    d = coerce_date(value)
    return d is not None and d >= today_local()


def _integer(value: Any, field: FieldConfig) -> bool:
    n = to_number(value)
    return n is not None and float(n).is_integer()


def _clock_records(value: Any, field: FieldConfig) -> bool:
    """Work sessions ``[{in_time, out_time, breaks: [{break_start, break_end}]}]``.

    Sessions must be closed and in order without overlapping. Breaks must sit
    inside their session and must not overlap each other.
    """
    if not isinstance(value, list) or not value:
        return False

    prev_out = None
    for session in value:
        if not isinstance(session, dict):
            return False
        start = coerce_datetime(session.get("in_time"))
        end = coerce_datetime(session.get("out_time"))
        if start is None or end is None or start >= end:
            return False
        if prev_out is not None and start <= prev_out:
            return False

        last_break_end = None
        for brk in sorted(session.get("breaks") or [], key=lambda b: str(b.get("break_start", ""))):
            b_start = coerce_datetime(brk.get("break_start"))
            b_end = coerce_datetime(brk.get("break_end"))
            if b_start is None or b_end is None or b_start >= b_end:
                return False
            if b_start < start or b_end > end:
                return False
            if last_break_end is not None and b_start < last_break_end:
                return False
            last_break_end = b_end

        prev_out = end
    return True


class CustomValidatorRegistry:
    def __init__(self):
        self._predicates: Dict[str, Predicate] = {
            "past_date": _past_date,
            "future_date": _future_date,
            "integer": _integer,
            "clock_records": _clock_records,
        }

    def register(self, name: str, predicate: Predicate) -> None:
        self._predicates[str(name)] = predicate

    def get(self, name: str) -> Optional[Predicate]:
        return self._predicates.get(str(name))

    def names(self) -> list[str]:
        return sorted(self._predicates)


class CustomCheck(RuleCheck):
    def __init__(self, registry: CustomValidatorRegistry):
        self._registry = registry

    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        predicate = self._registry.get(rule.value)
        if predicate is None:
            logger.warning("Unknown custom validator %r on field %s; rule ignored", rule.value, field.id)
            return True
        if is_empty(value):
            return True
        return bool(predicate(value, field))
