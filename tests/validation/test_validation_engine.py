from __future__ import annotations

import pytest

from src.timeport_forms.timeport_forms.core.enums import FieldType, ValidationRuleType
from src.timeport_forms.timeport_forms.fields.model import FieldConfig, FieldState, ValidationRule
from src.timeport_forms.timeport_forms.validation.engine import ValidationEngine


def _field(field_type=FieldType.TEXT, *rules, required=False) -> FieldConfig:
    return FieldConfig(
        id="f",
        name="f",
        type=field_type,
        label="F",
        required=required,
        validation_rules=tuple(rules),
    )


def _rule(rule_type, value=None, message=""):
    return ValidationRule(type=ValidationRuleType(rule_type), value=value, message=message)


def _messages(field, value, **kwargs):
    return [f.message for f in ValidationEngine().validate(field, value, **kwargs)]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", ["Email is required", "Enter a valid email"]),
        ("not-an-email", ["Enter a valid email"]),
        ("a@b.com", []),
    ],
)
def test_required_email_field(value, expected):
    field = _field(
        FieldType.EMAIL,
        _rule("required", message="Email is required"),
        _rule("email", message="Enter a valid email"),
    )

    assert _messages(field, value) == expected


def test_validation_is_deterministic():
    field = _field(FieldType.TEXT, _rule("minLength", 5, "short"), _rule("pattern", r"^\d+$", "digits"))

    first = ValidationEngine().validate(field, "ab")
    second = ValidationEngine().validate(field, "ab")

    assert first == second
    assert [f.message for f in first] == ["short", "digits"]


def test_same_rule_type_can_repeat():
    field = _field(FieldType.TEXT, _rule("maxLength", 10, "under 10"), _rule("maxLength", 3, "under 3"))

    assert _messages(field, "abcdef") == ["under 3"]


def test_empty_message_falls_back_to_generic_text():
    field = _field(FieldType.TEXT, _rule("required"), _rule("minLength", 3))

    assert _messages(field, "") == ["This field is required", "This field is invalid"]


def test_required_flag_adds_implicit_rule():
    field = _field(FieldType.TEXT, required=True)

    assert _messages(field, "   ") == ["This field is required"]
    assert _messages(field, "x") == []


@pytest.mark.parametrize("value", [None, "", [], {}])
def test_required_rejects_empty_values(value):
    field = _field(FieldType.TEXT, _rule("required", message="req"))

    assert _messages(field, value) == ["req"]


def test_unticked_checkbox_fails_required():
    field = _field(FieldType.CHECKBOX, _rule("required", message="tick it"))

    assert _messages(field, False) == ["tick it"]
    assert _messages(field, True) == []


def test_length_rules_coerce_non_strings():
    field = _field(FieldType.NUMBER, _rule("minLength", 3, "min3"), _rule("maxLength", 4, "max4"))

    assert _messages(field, 12) == ["min3"]
    assert _messages(field, 12345) == ["max4"]
    assert _messages(field, 1234) == []


def test_min_max_compare_numerically():
    field = _field(FieldType.NUMBER, _rule("min", 1, "too small"), _rule("max", "10", "too big"))

    assert _messages(field, "0") == ["too small"]
    assert _messages(field, 11) == ["too big"]
    assert _messages(field, "7.5") == []
    assert _messages(field, "seven") == ["too small", "too big"]


def test_pattern_uses_search_semantics():
    field = _field(FieldType.TEXT, _rule("pattern", r"[A-Z]{3}", "code"))

    assert _messages(field, "ref ABC-1") == []
    assert _messages(field, "abc") == ["code"]


def test_invalid_pattern_never_fails_a_value():
    field = _field(FieldType.TEXT, _rule("pattern", "([", "bad"))

    assert _messages(field, "anything") == []


@pytest.mark.parametrize(
    "value, ok",
    [
        ("090-1234-5678", True),
        ("+81 (90) 1234 5678", True),
        ("12345", False),
        ("call me", False),
    ],
)
def test_tel_format(value, ok):
    field = _field(FieldType.TEL, _rule("tel", message="tel"))

    assert (_messages(field, value) == []) is ok


@pytest.mark.parametrize(
    "value, ok",
    [
        ("https://example.com/path", True),
        ("http://localhost:5000", True),
        ("ftp://example.com", False),
        ("example.com", False),
        ("https://exa mple.com", False),
    ],
)
def test_url_format(value, ok):
    field = _field(FieldType.URL, _rule("url", message="url"))

    assert (_messages(field, value) == []) is ok


def test_hidden_state_skips_all_rules():
    field = _field(FieldType.TEXT, _rule("required", message="req"), required=True)

    assert _messages(field, "", state=FieldState(visible=False, required=True)) == []


def test_state_required_overrides_field_flag():
    field = _field(FieldType.TEXT)

    assert _messages(field, "", state=FieldState(visible=True, required=True)) == ["This field is required"]
