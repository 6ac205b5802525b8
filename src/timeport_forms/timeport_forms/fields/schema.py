"""Operations over an ordered form schema.

A schema is an immutable tuple of ``FieldConfig``; its position in the tuple is
the display sequence and every operation returns a new tuple whose ``order``
values are the dense range 1..N.
"""
from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Sequence, Set, Tuple

from ..core.constants import COPY_SUFFIX, FIELD_ID_PREFIX
from ..core.enums import FieldType
from ..core.exceptions import FieldNotFoundError, SchemaIntegrityError
from .model import FieldConfig
from .options import default_options

logger = logging.getLogger(__name__)

FormSchema = Tuple[FieldConfig, ...]


def new_field_id(existing: Iterable[str] = ()) -> str:
    taken = set(existing)
    while True:
        candidate = f"{FIELD_ID_PREFIX}{uuid.uuid4().hex[:12]}"
        if candidate not in taken:
            return candidate


def resequence(fields: Sequence[FieldConfig]) -> FormSchema:
    return tuple(f if f.order == i else replace(f, order=i) for i, f in enumerate(fields, start=1))


def sort_by_order(fields: Iterable[FieldConfig]) -> FormSchema:
    """Normalise a schema loaded from storage (stable on equal ``order``)."""
    return resequence(sorted(fields, key=lambda f: f.order))


def field_ids(fields: Sequence[FieldConfig]) -> Set[str]:
    return {f.id for f in fields}


def find_field(fields: Sequence[FieldConfig], field_id: str) -> Optional[FieldConfig]:
    for f in fields:
        if f.id == field_id:
            return f
    return None


def index_of(fields: Sequence[FieldConfig], field_id: str) -> int:
    for i, f in enumerate(fields):
        if f.id == field_id:
            return i
    raise FieldNotFoundError(field_id)


def referenced_ids(field: FieldConfig) -> List[str]:
    """Ids of other fields this field's rules and calculation point at."""
    refs = [rule.field for rule in field.conditional_logic]
    calc = field.calculation_config
    if calc:
        refs.extend(calc.target_fields)
        refs.append(calc.result_field)
        refs.extend(rule.field for rule in calc.conditions)
    return refs


def dangling_references(fields: Sequence[FieldConfig]) -> List[Tuple[str, str]]:
    """(owner id, missing id) pairs for references to fields not in the schema."""
    known = field_ids(fields)
    out: List[Tuple[str, str]] = []
    for f in fields:
        for ref in referenced_ids(f):
            if ref and ref not in known and (f.id, ref) not in out:
                out.append((f.id, ref))
    return out


def add_field(fields: Sequence[FieldConfig], field_type: FieldType) -> Tuple[FormSchema, FieldConfig]:
    field_type = FieldType.parse(field_type)
    new = FieldConfig(
        id=new_field_id(field_ids(fields)),
        name="",
        type=field_type,
        label="",
        required=False,
        order=len(fields) + 1,
        options=default_options(field_type),
    )
    return resequence([*fields, new]), new


def remove_field(fields: Sequence[FieldConfig], field_id: str) -> FormSchema:
    idx = index_of(fields, field_id)
    remaining = [f for i, f in enumerate(fields) if i != idx]

    users = [f.id for f in remaining if field_id in referenced_ids(f)]
    if users:
        logger.debug("Removed field %s is still referenced by %s", field_id, ", ".join(users))
    return resequence(remaining)


def move(fields: Sequence[FieldConfig], source_index: int, destination_index: int) -> FormSchema:
    """Drag-and-drop move: fields between source and destination shift by one."""
    items = list(fields)
    if not items:
        return ()
    if not 0 <= source_index < len(items):
        raise IndexError(f"source index out of range: {source_index}")
    destination_index = max(0, min(int(destination_index), len(items) - 1))
    moved = items.pop(source_index)
    items.insert(destination_index, moved)
    return resequence(items)


def reorder(fields: Sequence[FieldConfig], field_id: str, new_index: int) -> FormSchema:
    return move(fields, index_of(fields, field_id), new_index)


def move_up(fields: Sequence[FieldConfig], field_id: str) -> FormSchema:
    idx = index_of(fields, field_id)
    if idx == 0:
        return resequence(fields)
    return move(fields, idx, idx - 1)


def move_down(fields: Sequence[FieldConfig], field_id: str) -> FormSchema:
    idx = index_of(fields, field_id)
    if idx == len(fields) - 1:
        return resequence(fields)
    return move(fields, idx, idx + 1)


def duplicate_field(fields: Sequence[FieldConfig], field_id: str) -> Tuple[FormSchema, FieldConfig]:
    source = fields[index_of(fields, field_id)]
    clone = replace(
        copy.deepcopy(source),
        id=new_field_id(field_ids(fields)),
        name=f"{source.name}{COPY_SUFFIX}",
        order=len(fields) + 1,
    )
    return resequence([*fields, clone]), clone


def replace_field(fields: Sequence[FieldConfig], updated: FieldConfig) -> FormSchema:
    idx = index_of(fields, updated.id)
    items = list(fields)
    items[idx] = updated
    return resequence(items)


def schema_from_records(records: Any) -> FormSchema:
    """Parse the JSON array the persistence layer stores."""
    if not isinstance(records, (list, tuple)):
        raise SchemaIntegrityError("Form fields must be a list")
    try:
        return sort_by_order(FieldConfig.from_dict(r) for r in records)
    except (AttributeError, KeyError, ValueError, TypeError) as e:
        raise SchemaIntegrityError(f"Malformed field record: {e}") from e


def schema_to_records(fields: Sequence[FieldConfig]) -> List[dict]:
    return [f.to_dict() for f in resequence(fields)]
