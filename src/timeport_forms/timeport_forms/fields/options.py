"""Type-specific field options.

Each field kind carries its own options shape; ``FieldOptions`` is the union of
all variants. Engines dispatch on the variant class rather than the type string.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from ..common.values import Number, to_number
from ..core.constants import (
    DEFAULT_CHOICE_COUNT,
    DEFAULT_NUMBER_MAX,
    DEFAULT_NUMBER_MIN,
    DEFAULT_NUMBER_STEP,
    DEFAULT_TEXTAREA_ROWS,
)
from ..core.enums import FieldType


@dataclass(frozen=True)
class Choice:
    value: str
    label: str
    disabled: bool = False


@dataclass(frozen=True)
class TextOptions:
    """Single-line inputs (text, email, tel, url, date/time pickers, hidden)."""


@dataclass(frozen=True)
class TextareaOptions:
    rows: int = DEFAULT_TEXTAREA_ROWS
    markdown: bool = True
    preview: bool = True


@dataclass(frozen=True)
class NumberOptions:
    min: Optional[Number] = DEFAULT_NUMBER_MIN
    max: Optional[Number] = DEFAULT_NUMBER_MAX
    step: Optional[Number] = DEFAULT_NUMBER_STEP


@dataclass(frozen=True)
class ChoiceOptions:
    choices: Tuple[Choice, ...] = ()

    def values(self) -> Tuple[str, ...]:
        return tuple(c.value for c in self.choices)


@dataclass(frozen=True)
class FileOptions:
    accept: Optional[str] = None
    multiple: bool = False


@dataclass(frozen=True)
class ObjectOptions:
    object_type: Optional[str] = None
    field_type: Optional[str] = None


FieldOptions = Union[TextOptions, TextareaOptions, NumberOptions, ChoiceOptions, FileOptions, ObjectOptions]

_CHOICE_TYPES = {FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX}


def options_class_for(field_type: FieldType) -> type:
    if field_type == FieldType.TEXTAREA:
        return TextareaOptions
    if field_type == FieldType.NUMBER:
        return NumberOptions
    if field_type in _CHOICE_TYPES:
        return ChoiceOptions
    if field_type == FieldType.FILE:
        return FileOptions
    if field_type == FieldType.OBJECT:
        return ObjectOptions
    return TextOptions


def default_options(field_type: FieldType) -> FieldOptions:
    """Options a freshly added field of ``field_type`` starts with."""
    cls = options_class_for(field_type)
    if cls is ChoiceOptions:
        return ChoiceOptions(
            choices=tuple(
                Choice(value=f"option{i}", label=f"Option {i}") for i in range(1, DEFAULT_CHOICE_COUNT + 1)
            )
        )
    return cls()


def _parse_choice(raw: Any) -> Choice:
    if isinstance(raw, Mapping):
        value = str(raw.get("value", raw.get("label", "")))
        label = str(raw.get("label", value))
        return Choice(value=value, label=label, disabled=bool(raw.get("disabled", False)))
    return Choice(value=str(raw), label=str(raw))


def options_from_dict(field_type: FieldType, raw: Any, metadata: Optional[Mapping] = None) -> FieldOptions:
    """Build the options variant for ``field_type`` from a stored record.

    Accepts the legacy shapes as well: a plain list of choice strings, or
    ``{"options": [...]}`` for choice fields.
    """
    cls = options_class_for(field_type)

    if cls is ChoiceOptions:
        items: Any = raw
        if isinstance(raw, Mapping):
            items = raw.get("choices", raw.get("options", []))
        return ChoiceOptions(choices=tuple(_parse_choice(c) for c in (items or [])))

    data: Mapping = raw if isinstance(raw, Mapping) else {}

    if cls is TextareaOptions:
        rows = to_number(data.get("rows"))
        return TextareaOptions(
            rows=int(rows) if rows is not None else DEFAULT_TEXTAREA_ROWS,
            markdown=bool(data.get("markdown", True)),
            preview=bool(data.get("preview", True)),
        )
    if cls is NumberOptions:
        return NumberOptions(
            min=to_number(data["min"]) if "min" in data else DEFAULT_NUMBER_MIN,
            max=to_number(data["max"]) if "max" in data else DEFAULT_NUMBER_MAX,
            step=to_number(data["step"]) if "step" in data else DEFAULT_NUMBER_STEP,
        )
    if cls is FileOptions:
        accept = data.get("accept")
        return FileOptions(accept=str(accept) if accept else None, multiple=bool(data.get("multiple", False)))
    if cls is ObjectOptions:
        meta = metadata or {}
        return ObjectOptions(
            object_type=data.get("object_type", meta.get("object_type")),
            field_type=data.get("field_type", meta.get("field_type")),
        )
    return TextOptions()


def options_to_dict(options: FieldOptions) -> dict:
    if isinstance(options, ChoiceOptions):
        return {
            "choices": [
                {"value": c.value, "label": c.label, **({"disabled": True} if c.disabled else {})}
                for c in options.choices
            ]
        }
    if isinstance(options, TextareaOptions):
        return {"rows": options.rows, "markdown": options.markdown, "preview": options.preview}
    if isinstance(options, NumberOptions):
        return {"min": options.min, "max": options.max, "step": options.step}
    if isinstance(options, FileOptions):
        return {"accept": options.accept, "multiple": options.multiple}
    if isinstance(options, ObjectOptions):
        return {"object_type": options.object_type, "field_type": options.field_type}
    return {}
