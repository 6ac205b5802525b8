from __future__ import annotations

import pytest

from src.timeport_forms.timeport_forms.calculation import formula
from src.timeport_forms.timeport_forms.core.exceptions import FormulaError


def _run(text, **values):
    return formula.evaluate(formula.parse(text), values.get)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1 + 2 * 3", 7),
        ("(1 + 2) * 3", 9),
        ("10 - 4 - 3", 3),
        ("2 ^ 3 ^ 2", 512),
        ("-2 ^ 2", -4),
        ("7 % 4", 3),
        (".5 + 1e1", 10.5),
        ("max(1, 4, 2) - min(3, 9)", 1),
        ("abs(-3) + round(2.567, 2)", 5.57),
        ("round(2.5)", 2),
    ],
)
def test_arithmetic(text, expected):
    assert _run(text) == pytest.approx(expected)


def test_identifiers_resolve_through_callback():
    assert _run("a * b + {overtime rate}", a=2, b=3, **{"overtime rate": 1.5}) == 7.5


def test_identifiers_are_collected():
    tree = formula.parse("max(a, {b-1}) + c * 2")

    assert formula.identifiers(tree) == {"a", "b-1", "c"}


def test_unknown_function_names_are_plain_identifiers():
    with pytest.raises(FormulaError):
        formula.parse("exec(1)")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "1 +",
        "(1 + 2",
        "1 2",
        "__import__('os')",
        "a.b",
        "a; b",
        "abs(1, 2)",
        "round()",
        "x" * 501,
    ],
)
def test_rejects_malformed_formulas(text):
    with pytest.raises(FormulaError):
        formula.parse(text)


@pytest.mark.parametrize(
    "text, values",
    [
        ("a / 0", {"a": 1}),
        ("a % b", {"a": 1, "b": 0}),
        ("missing + 1", {}),
        ("(-8) ^ 0.5", {}),
        ("10 ^ 400", {}),
    ],
)
def test_runtime_failures_raise_formula_error(text, values):
    with pytest.raises(FormulaError):
        _run(text, **values)


@pytest.mark.parametrize(
    "text",
    [
        "(" * 200 + "a" + ")" * 200,
        "-" * 400 + "a",
        "^".join(["2"] * 200),
        "abs(" * 60 + "a" + ")" * 60,
    ],
)
def test_deep_nesting_is_rejected(text):
    with pytest.raises(FormulaError, match="nested too deeply"):
        formula.parse(text)


def test_moderate_nesting_still_parses():
    assert _run("(" * 10 + "a + 1" + ")" * 10, a=2) == 3


def test_non_text_formula_is_rejected():
    with pytest.raises(FormulaError):
        formula.parse(5)
