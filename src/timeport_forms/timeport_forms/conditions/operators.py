from __future__ import annotations

from typing import Any, Callable, Dict

from ..common.values import to_number, to_text
from ..core.enums import ConditionOperator

OperatorFn = Callable[[Any, Any], bool]


def equals(observed: Any, expected: Any) -> bool:
    return to_text(observed) == to_text(expected)


def not_equals(observed: Any, expected: Any) -> bool:
    return not equals(observed, expected)


def contains(observed: Any, expected: Any) -> bool:
    needle = to_text(expected)
    if isinstance(observed, (list, tuple, set)):
        return needle in {to_text(v) for v in observed}
    return needle in to_text(observed)


def not_contains(observed: Any, expected: Any) -> bool:
    return not contains(observed, expected)


def greater_than(observed: Any, expected: Any) -> bool:
    a, b = to_number(observed), to_number(expected)
    return a is not None and b is not None and a > b


def less_than(observed: Any, expected: Any) -> bool:
    a, b = to_number(observed), to_number(expected)
    return a is not None and b is not None and a < b


OPERATORS: Dict[ConditionOperator, OperatorFn] = {
    ConditionOperator.EQUALS: equals,
    ConditionOperator.NOT_EQUALS: not_equals,
    ConditionOperator.CONTAINS: contains,
    ConditionOperator.NOT_CONTAINS: not_contains,
    ConditionOperator.GREATER_THAN: greater_than,
    ConditionOperator.LESS_THAN: less_than,
}
