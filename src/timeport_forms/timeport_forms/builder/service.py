from __future__ import annotations

import logging
from dataclasses import fields as dataclass_fields, replace
from typing import Any, Callable, Mapping, Sequence, Tuple, Union

from ..common.validators import require_non_empty
from ..core.enums import FieldType
from ..core.exceptions import SchemaIntegrityError
from ..fields import schema as ops
from ..fields.model import CalculationConfig, ConditionalRule, FieldConfig, ValidationRule
from ..fields.options import default_options
from ..fields.schema import FormSchema
from .integrity import check_integrity

logger = logging.getLogger(__name__)

RuleInput = Union[ValidationRule, Mapping[str, Any]]
ConditionInput = Union[ConditionalRule, Mapping[str, Any]]
CalculationInput = Union[CalculationConfig, Mapping[str, Any]]

_FIELD_KEYS = {f.name for f in dataclass_fields(FieldConfig)}


def _plain(value: Any) -> Any:
    """Turn typed sub-objects back into the record shape ``from_dict`` reads."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _parse(factory: Callable[[Mapping[str, Any]], Any], data: Any, what: str) -> Any:
    try:
        return factory(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise SchemaIntegrityError(f"Invalid {what}: {e}") from e


def _as_rule(rule: RuleInput) -> ValidationRule:
    return rule if isinstance(rule, ValidationRule) else _parse(ValidationRule.from_dict, rule, "validation rule")


def _as_condition(rule: ConditionInput) -> ConditionalRule:
    return rule if isinstance(rule, ConditionalRule) else _parse(ConditionalRule.from_dict, rule, "conditional rule")


def _as_calculation(config: CalculationInput) -> CalculationConfig:
    if isinstance(config, CalculationConfig):
        return config
    return _parse(CalculationConfig.from_dict, config, "calculation")


def _check_index(items: Sequence[Any], index: int, what: str) -> int:
    if not 0 <= int(index) < len(items):
        raise SchemaIntegrityError(f"{what} index out of range: {index}")
    return int(index)


class FormBuilder:
    """Schema editor.

    Every operation takes the current schema and returns a new one with
    ``order`` re-derived as 1..N; the input is never modified.
    """

    # Field collection

    def add_field(self, fields: Sequence[FieldConfig], field_type: Union[FieldType, str]) -> Tuple[FormSchema, FieldConfig]:
        return ops.add_field(fields, FieldType.parse(field_type))

    def remove_field(self, fields: Sequence[FieldConfig], field_id: str) -> FormSchema:
        return ops.remove_field(fields, field_id)

    def duplicate_field(self, fields: Sequence[FieldConfig], field_id: str) -> Tuple[FormSchema, FieldConfig]:
        return ops.duplicate_field(fields, field_id)

    def reorder(self, fields: Sequence[FieldConfig], field_id: str, new_index: int) -> FormSchema:
        return ops.reorder(fields, field_id, new_index)

    def move(self, fields: Sequence[FieldConfig], source_index: int, destination_index: int) -> FormSchema:
        return ops.move(fields, source_index, destination_index)

    def move_field_up(self, fields: Sequence[FieldConfig], field_id: str) -> FormSchema:
        return ops.move_up(fields, field_id)

    def move_field_down(self, fields: Sequence[FieldConfig], field_id: str) -> FormSchema:
        return ops.move_down(fields, field_id)

    # Single field

    def update_field(self, fields: Sequence[FieldConfig], field_id: str, changes: Mapping[str, Any]) -> FormSchema:
        """Shallow-merge ``changes`` into the field; unspecified keys keep their values."""
        current = fields[ops.index_of(fields, field_id)]

        unknown = set(changes) - _FIELD_KEYS
        if unknown:
            raise SchemaIntegrityError("Unknown field attributes: " + ", ".join(sorted(unknown)))
        if "id" in changes and changes["id"] != current.id:
            raise SchemaIntegrityError("Field id cannot be changed")

        merged = current.to_dict()
        merged.update({k: _plain(v) for k, v in changes.items() if k != "options"})

        updated = _parse(FieldConfig.from_dict, merged, "field")
        if "options" in changes:
            raw = changes["options"]
            if raw is None or isinstance(raw, (Mapping, list, tuple)):
                reparsed = _parse(FieldConfig.from_dict, {**merged, "options": raw}, "field options")
                updated = replace(updated, options=reparsed.options)
            else:
                updated = replace(updated, options=raw)
        elif updated.type != current.type:
            updated = replace(updated, options=default_options(updated.type))
        else:
            updated = replace(updated, options=current.options)

        return ops.replace_field(fields, replace(updated, order=current.order))

    def validate_field_for_save(self, field: FieldConfig) -> FieldConfig:
        require_non_empty(field.name, "Field name")
        require_non_empty(field.label, "Field label")
        return field

    def save_field(self, fields: Sequence[FieldConfig], draft: FieldConfig) -> FormSchema:
        """Commit a whole-field edit session; blocked while name or label is blank."""
        self.validate_field_for_save(draft)
        others = [f.name.strip() for f in fields if f.id != draft.id]
        if draft.name.strip() in others:
            raise SchemaIntegrityError(f"Field name already used: {draft.name.strip()}")
        current = fields[ops.index_of(fields, draft.id)]
        return ops.replace_field(fields, replace(draft, order=current.order))

    # Validation rules

    def add_validation_rule(self, fields: Sequence[FieldConfig], field_id: str, rule: RuleInput) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        return ops.replace_field(fields, replace(f, validation_rules=(*f.validation_rules, _as_rule(rule))))

    def update_validation_rule(
        self, fields: Sequence[FieldConfig], field_id: str, index: int, changes: Mapping[str, Any]
    ) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        i = _check_index(f.validation_rules, index, "Validation rule")
        rules = list(f.validation_rules)
        rules[i] = _as_rule({**rules[i].to_dict(), **changes})
        return ops.replace_field(fields, replace(f, validation_rules=tuple(rules)))

    def remove_validation_rule(self, fields: Sequence[FieldConfig], field_id: str, index: int) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        i = _check_index(f.validation_rules, index, "Validation rule")
        rules = f.validation_rules[:i] + f.validation_rules[i + 1:]
        return ops.replace_field(fields, replace(f, validation_rules=rules))

    # Conditional logic

    def add_conditional_logic(self, fields: Sequence[FieldConfig], field_id: str, rule: ConditionInput) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        cond = _as_condition(rule)
        if cond.field == f.id:
            raise SchemaIntegrityError("Conditional logic must not reference the field itself")
        return ops.replace_field(fields, replace(f, conditional_logic=(*f.conditional_logic, cond)))

    def update_conditional_logic(
        self, fields: Sequence[FieldConfig], field_id: str, index: int, changes: Mapping[str, Any]
    ) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        i = _check_index(f.conditional_logic, index, "Conditional rule")
        rules = list(f.conditional_logic)
        rules[i] = _as_condition({**rules[i].to_dict(), **changes})
        if rules[i].field == f.id:
            raise SchemaIntegrityError("Conditional logic must not reference the field itself")
        return ops.replace_field(fields, replace(f, conditional_logic=tuple(rules)))

    def remove_conditional_logic(self, fields: Sequence[FieldConfig], field_id: str, index: int) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        i = _check_index(f.conditional_logic, index, "Conditional rule")
        rules = f.conditional_logic[:i] + f.conditional_logic[i + 1:]
        return ops.replace_field(fields, replace(f, conditional_logic=rules))

    # Calculation

    def set_calculation(self, fields: Sequence[FieldConfig], field_id: str, config: CalculationInput) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        calc = _as_calculation(config)
        if f.id in calc.target_fields:
            raise SchemaIntegrityError("Calculation must not use the field itself as a target")
        if calc.result_field in calc.target_fields:
            raise SchemaIntegrityError("Calculation result field must differ from every target")
        return ops.replace_field(fields, replace(f, calculation_config=calc))

    def clear_calculation(self, fields: Sequence[FieldConfig], field_id: str) -> FormSchema:
        f = fields[ops.index_of(fields, field_id)]
        return ops.replace_field(fields, replace(f, calculation_config=None))

    # Publishing

    def check_integrity(self, fields: Sequence[FieldConfig]) -> list[str]:
        return check_integrity(fields)

    def publish(self, fields: Sequence[FieldConfig]) -> FormSchema:
        errors = check_integrity(fields)
        if errors:
            logger.info("Schema rejected with %d problem(s)", len(errors))
            raise SchemaIntegrityError("Form schema is not publishable", errors)
        return ops.resequence(fields)
