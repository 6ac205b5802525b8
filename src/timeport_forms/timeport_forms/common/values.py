"""Helpers for the loosely typed values that arrive from form inputs."""
from __future__ import annotations

import math
from typing import Any, Optional, Union

Number = Union[int, float]


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def to_number(value: Any) -> Optional[Number]:
    """Return a finite int/float, or None when the value is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        n = value
    elif isinstance(value, str):
        v = value.strip()
        if not v:
            return None
        try:
            n = int(v)
        except ValueError:
            try:
                n = float(v)
            except ValueError:
                return None
    else:
        return None
    if isinstance(n, float) and not math.isfinite(n):
        return None
    return n


def normalize_number(n: Number) -> Number:
    """Report integral floats as ints (5.0 -> 5)."""
    if isinstance(n, float) and n.is_integer():
        return int(n)
    return n


def to_text(value: Any) -> str:
    """String form used for length checks and equality comparisons."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(normalize_number(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(v) for v in value)
    return str(value)
