from __future__ import annotations

from typing import Iterable, List

from ..core.exceptions import SchemaIntegrityError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise SchemaIntegrityError(f"{field_name} must not be empty")
    return str(value).strip()


def find_duplicates(values: Iterable[str]) -> List[str]:
    """Return values that occur more than once, in first-seen order."""
    seen: set[str] = set()
    dupes: List[str] = []
    for v in values:
        if v in seen and v not in dupes:
            dupes.append(v)
        seen.add(v)
    return dupes
