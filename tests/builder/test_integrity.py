from __future__ import annotations

from src.timeport_forms.timeport_forms.builder.integrity import check_integrity
from src.timeport_forms.timeport_forms.core.enums import (
    CalculationType,
    ConditionAction,
    ConditionOperator,
    FieldType,
    ValidationRuleType,
)
from src.timeport_forms.timeport_forms.fields.model import CalculationConfig, ConditionalRule, FieldConfig, ValidationRule


def _num(fid, **kwargs):
    return FieldConfig(id=fid, name=fid, type=FieldType.NUMBER, label=fid.upper(), **kwargs)


def _sum(targets, result, **kwargs):
    return CalculationConfig(type=CalculationType.SUM, target_fields=tuple(targets), result_field=result, **kwargs)


def _has(errors, text):
    return any(text in e for e in errors)


def test_clean_schema_has_no_errors():
    fields = (_num("a"), _num("b"), _num("c", calculation_config=_sum(["a", "b"], "c")))

    assert check_integrity(fields) == []


def test_result_field_may_be_the_owner_but_not_a_target():
    ok = (_num("a"), _num("b"), _num("c", calculation_config=_sum(["a", "b"], "c")))
    bad = (_num("a"), _num("b", calculation_config=_sum(["a", "b"], "b")))

    assert check_integrity(ok) == []
    assert _has(check_integrity(bad), "itself as a target")
    assert _has(check_integrity(bad), "must differ from every target")


def test_duplicates_and_blank_names():
    fields = (_num("a"), _num("a"), FieldConfig(id="x", name="a", type=FieldType.TEXT, label=""))

    errors = check_integrity(fields)

    assert _has(errors, "Duplicate field ids: a")
    assert _has(errors, "Duplicate field names: a")
    assert _has(errors, "Field 3 (a): name and label are required")


def test_dangling_references_are_reported():
    cond = ConditionalRule(field="gone", operator=ConditionOperator.EQUALS, value="x", action=ConditionAction.HIDE)
    fields = (
        _num("a", conditional_logic=(cond,)),
        _num("c", calculation_config=_sum(["a", "missing"], "nowhere")),
    )

    errors = check_integrity(fields)

    assert _has(errors, "Field 1 (a): references unknown field 'gone'")
    assert _has(errors, "Field 2 (c): references unknown field 'missing'")
    assert _has(errors, "result field 'nowhere' does not exist")
    assert not _has(errors, "unknown field 'nowhere'")


def test_calculation_condition_on_unknown_field_is_reported():
    cond = ConditionalRule(field="ghost", operator=ConditionOperator.EQUALS, value="x", action=ConditionAction.SHOW)
    fields = (_num("a"), _num("c", calculation_config=_sum(["a"], "c", conditions=(cond,))))

    assert _has(check_integrity(fields), "Field 2 (c): references unknown field 'ghost'")


def test_result_field_must_be_numeric():
    fields = (
        _num("a"),
        FieldConfig(
            id="t", name="t", type=FieldType.TEXT, label="T", calculation_config=_sum(["a"], "t")
        ),
    )

    assert _has(check_integrity(fields), "must be a number field")


def test_chained_and_competing_calculations_are_rejected():
    chained = (
        _num("a"),
        _num("b", calculation_config=_sum(["a"], "b")),
        _num("c", calculation_config=_sum(["b"], "c")),
    )
    competing = (
        _num("a"),
        _num("b"),
        _num("c", calculation_config=_sum(["a"], "c")),
        _num("d", calculation_config=_sum(["b"], "c")),
    )

    assert _has(check_integrity(chained), "feeds another calculation")
    assert _has(check_integrity(competing), "written by several calculations")


def test_custom_formula_is_checked():
    def custom(formula):
        return _num(
            "c",
            calculation_config=CalculationConfig(
                type=CalculationType.CUSTOM, target_fields=("a",), result_field="c", formula=formula
            ),
        )

    assert check_integrity((_num("a"), custom("a * 2"))) == []
    assert _has(check_integrity((_num("a"), custom(None))), "needs a formula")
    assert _has(check_integrity((_num("a"), custom("a *"))), "formula is invalid")
    assert _has(check_integrity((_num("a"), custom("a + zz"))), "unknown fields: zz")


def test_invalid_pattern_is_reported():
    fields = (_num("a", validation_rules=(ValidationRule(type=ValidationRuleType.PATTERN, value="(["),)),)

    assert _has(check_integrity(fields), "invalid pattern")


def test_deeply_nested_formula_is_reported_not_raised():
    calc = CalculationConfig(
        type=CalculationType.CUSTOM,
        target_fields=("a",),
        result_field="c",
        formula="(" * 200 + "a" + ")" * 200,
    )
    fields = (_num("a"), _num("c", calculation_config=calc))

    assert _has(check_integrity(fields), "formula is invalid (Formula is nested too deeply)")
