from __future__ import annotations

import pytest

from src.timeport_forms.timeport_forms.builder.service import FormBuilder
from src.timeport_forms.timeport_forms.core.enums import (
    CalculationType,
    ConditionAction,
    ConditionOperator,
    FieldType,
    FieldWidth,
    ValidationRuleType,
)
from src.timeport_forms.timeport_forms.core.exceptions import FieldNotFoundError, SchemaIntegrityError
from src.timeport_forms.timeport_forms.fields.model import CalculationConfig, ConditionalRule, FieldConfig, ValidationRule
from src.timeport_forms.timeport_forms.fields.options import ChoiceOptions, NumberOptions, TextareaOptions
from src.timeport_forms.timeport_forms.fields.schema import find_field, resequence


def _schema():
    return resequence(
        [
            FieldConfig(id="a", name="a", type=FieldType.NUMBER, label="A"),
            FieldConfig(id="b", name="b", type=FieldType.NUMBER, label="B"),
            FieldConfig(
                id="notes",
                name="notes",
                type=FieldType.TEXTAREA,
                label="Notes",
                options=TextareaOptions(rows=6),
                validation_rules=(ValidationRule(type=ValidationRuleType.MAX_LENGTH, value=200),),
            ),
        ]
    )


def test_every_operation_returns_dense_order():
    builder = FormBuilder()
    fields = _schema()

    fields, added = builder.add_field(fields, "text")
    fields = builder.move_field_up(fields, added.id)
    fields, copy = builder.duplicate_field(fields, "a")
    fields = builder.move(fields, 0, 3)
    fields = builder.remove_field(fields, "b")

    assert [f.order for f in fields] == list(range(1, len(fields) + 1))
    assert copy.name == "a_copy"


def test_update_field_shallow_merges():
    builder = FormBuilder()

    fields = builder.update_field(_schema(), "notes", {"label": "Remarks", "width": "half"})
    notes = find_field(fields, "notes")

    assert notes.label == "Remarks"
    assert notes.width == FieldWidth.HALF
    assert notes.options == TextareaOptions(rows=6)
    assert notes.validation_rules == (ValidationRule(type=ValidationRuleType.MAX_LENGTH, value=200),)
    assert notes.order == 3


def test_update_field_accepts_typed_sub_objects():
    rule = ValidationRule(type=ValidationRuleType.REQUIRED, message="req")

    fields = FormBuilder().update_field(_schema(), "a", {"validation_rules": [rule], "options": {"max": 8}})
    a = find_field(fields, "a")

    assert a.validation_rules == (rule,)
    assert a.options == NumberOptions(min=0, max=8, step=1)


def test_type_change_reseeds_options():
    fields = FormBuilder().update_field(_schema(), "notes", {"type": "select"})

    assert isinstance(find_field(fields, "notes").options, ChoiceOptions)


def test_update_field_rejects_unknown_keys_and_id_change():
    builder = FormBuilder()

    with pytest.raises(SchemaIntegrityError):
        builder.update_field(_schema(), "a", {"colour": "red"})
    with pytest.raises(SchemaIntegrityError):
        builder.update_field(_schema(), "a", {"id": "z"})
    with pytest.raises(FieldNotFoundError):
        builder.update_field(_schema(), "nope", {"label": "x"})


def test_malformed_builder_input_raises_schema_integrity_error():
    builder = FormBuilder()

    with pytest.raises(SchemaIntegrityError, match="Invalid field"):
        builder.update_field(_schema(), "a", {"width": "enormous"})
    with pytest.raises(SchemaIntegrityError, match="Invalid validation rule"):
        builder.add_validation_rule(_schema(), "a", {"type": "telepathy"})
    with pytest.raises(SchemaIntegrityError, match="Invalid conditional rule"):
        builder.add_conditional_logic(_schema(), "notes", {"field": "a", "operator": "resembles"})
    with pytest.raises(SchemaIntegrityError, match="Invalid calculation"):
        builder.set_calculation(_schema(), "b", {"target_fields": ["a"], "result_field": "b"})
    with pytest.raises(SchemaIntegrityError, match="Invalid calculation"):
        builder.set_calculation(
            _schema(), "b", {"type": "custom", "target_fields": ["a"], "result_field": "b", "formula": 5}
        )


def test_save_field_requires_name_and_label():
    builder = FormBuilder()
    fields = _schema()
    a = find_field(fields, "a")

    with pytest.raises(SchemaIntegrityError):
        builder.save_field(fields, FieldConfig(id="a", name="", type=FieldType.NUMBER, label="A"))
    with pytest.raises(SchemaIntegrityError):
        builder.save_field(fields, FieldConfig(id="a", name="a", type=FieldType.NUMBER, label="  "))
    with pytest.raises(SchemaIntegrityError, match="already used"):
        builder.save_field(fields, FieldConfig(id="a", name="b", type=FieldType.NUMBER, label="A"))

    saved = builder.save_field(fields, FieldConfig(id="a", name="hours", type=FieldType.NUMBER, label="Hours"))
    assert find_field(saved, "a").name == "hours"
    assert find_field(saved, "a").order == a.order


def test_validation_rule_crud_by_index():
    builder = FormBuilder()

    fields = builder.add_validation_rule(_schema(), "a", {"type": "min", "value": 1, "message": "low"})
    fields = builder.add_validation_rule(fields, "a", ValidationRule(type=ValidationRuleType.MAX, value=9))
    fields = builder.update_validation_rule(fields, "a", 1, {"message": "high"})
    assert [r.message for r in find_field(fields, "a").validation_rules] == ["low", "high"]

    fields = builder.remove_validation_rule(fields, "a", 0)
    assert [r.type for r in find_field(fields, "a").validation_rules] == [ValidationRuleType.MAX]

    with pytest.raises(SchemaIntegrityError):
        builder.remove_validation_rule(fields, "a", 5)


def test_conditional_logic_crud():
    builder = FormBuilder()
    rule = {"field": "a", "operator": "greater_than", "value": 8, "action": "require"}

    fields = builder.add_conditional_logic(_schema(), "notes", rule)
    fields = builder.update_conditional_logic(fields, "notes", 0, {"action": "hide"})
    assert find_field(fields, "notes").conditional_logic == (
        ConditionalRule(field="a", operator=ConditionOperator.GREATER_THAN, value=8, action=ConditionAction.HIDE),
    )

    fields = builder.remove_conditional_logic(fields, "notes", 0)
    assert find_field(fields, "notes").conditional_logic == ()

    with pytest.raises(SchemaIntegrityError):
        builder.add_conditional_logic(fields, "notes", {**rule, "field": "notes"})


def test_calculation_config_crud():
    builder = FormBuilder()
    fields, total = builder.add_field(_schema(), "number")
    config = {"type": "sum", "target_fields": ["a", "b"], "result_field": total.id}

    fields = builder.set_calculation(fields, total.id, config)
    assert find_field(fields, total.id).calculation_config == CalculationConfig(
        type=CalculationType.SUM, target_fields=("a", "b"), result_field=total.id
    )

    with pytest.raises(SchemaIntegrityError):
        builder.set_calculation(fields, total.id, {**config, "target_fields": ["a", total.id]})
    with pytest.raises(SchemaIntegrityError):
        builder.set_calculation(fields, "notes", {**config, "result_field": "a"})

    fields = builder.clear_calculation(fields, total.id)
    assert find_field(fields, total.id).calculation_config is None


def test_builder_never_mutates_input():
    builder = FormBuilder()
    fields = _schema()
    before = [f.to_dict() for f in fields]

    builder.update_field(fields, "a", {"label": "Changed"})
    builder.remove_field(fields, "b")
    builder.add_validation_rule(fields, "a", {"type": "required"})

    assert [f.to_dict() for f in fields] == before


def test_publish_returns_schema_when_clean():
    fields = _schema()

    assert FormBuilder().publish(fields) == fields


def test_publish_collects_every_problem():
    builder = FormBuilder()
    fields, blank = builder.add_field(_schema(), "text")

    with pytest.raises(SchemaIntegrityError) as excinfo:
        builder.publish(fields)

    assert any("name and label are required" in e for e in excinfo.value.errors)
