from __future__ import annotations

import pytest

from src.timeport_forms.timeport_forms.conditions.engine import ConditionalLogicEngine
from src.timeport_forms.timeport_forms.conditions.operators import contains, equals, greater_than, less_than
from src.timeport_forms.timeport_forms.core.enums import ConditionAction, ConditionOperator, FieldType
from src.timeport_forms.timeport_forms.fields.model import ConditionalRule, FieldConfig


def _rule(field, operator, value, action):
    return ConditionalRule(
        field=field, operator=ConditionOperator(operator), value=value, action=ConditionAction(action)
    )


def _field(*rules, required=False) -> FieldConfig:
    return FieldConfig(
        id="target",
        name="target",
        type=FieldType.TEXT,
        label="Target",
        required=required,
        conditional_logic=tuple(rules),
    )


def test_hide_when_equals():
    field = _field(_rule("A", "equals", "x", "hide"))
    engine = ConditionalLogicEngine()

    assert engine.evaluate(field, {"A": "x"}).visible is False
    assert engine.evaluate(field, {"A": "y"}).visible is True
    assert engine.evaluate(field, {}).visible is True


def test_defaults_without_rules():
    state = ConditionalLogicEngine().evaluate(_field(required=True), {})

    assert (state.visible, state.required, state.disabled) == (True, True, False)


def test_require_and_disable_actions():
    field = _field(
        _rule("type", "equals", "other", "require"),
        _rule("locked", "equals", True, "disable"),
    )
    engine = ConditionalLogicEngine()

    state = engine.evaluate(field, {"type": "other", "locked": True})
    assert state.required is True and state.disabled is True

    state = engine.evaluate(field, {"type": "leave", "locked": False})
    assert state.required is False and state.disabled is False


def test_hide_wins_over_show_in_any_order():
    engine = ConditionalLogicEngine()
    values = {"A": "x", "B": "y"}

    hide_then_show = _field(_rule("A", "equals", "x", "hide"), _rule("B", "equals", "y", "show"))
    show_then_hide = _field(_rule("B", "equals", "y", "show"), _rule("A", "equals", "x", "hide"))

    assert engine.evaluate(hide_then_show, values).visible is False
    assert engine.evaluate(show_then_hide, values).visible is False


def test_dangling_reference_is_inactive():
    field = _field(_rule("deleted", "not_equals", "x", "hide"))
    engine = ConditionalLogicEngine()

    # without schema knowledge the missing value simply differs from "x"
    assert engine.evaluate(field, {}).visible is False
    assert engine.evaluate(field, {}, known_fields={"target"}).visible is True


def test_equals_coerces_to_string():
    assert equals(5, "5")
    assert equals(2.0, "2")
    assert equals(True, "true")
    assert equals(None, "")
    assert not equals("5", "05")


def test_contains_substring_and_membership():
    assert contains("overtime request", "time")
    assert contains(["a", "b"], "b")
    assert not contains(["ab"], "a")
    assert contains([1, 2], "2")


@pytest.mark.parametrize(
    "observed, expected, gt, lt",
    [
        ("10", 5, True, False),
        (3, "3.5", False, True),
        ("abc", 1, False, False),
        (None, 1, False, False),
    ],
)
def test_numeric_comparisons(observed, expected, gt, lt):
    assert greater_than(observed, expected) is gt
    assert less_than(observed, expected) is lt
