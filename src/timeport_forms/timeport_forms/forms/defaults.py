"""Starter fields for the built-in request categories."""
from __future__ import annotations

from ..core.enums import CalculationType, FieldType, FieldWidth, ValidationRuleType
from ..fields.model import CalculationConfig, FieldConfig, ValidationRule
from ..fields.options import Choice, ChoiceOptions, NumberOptions, TextareaOptions
from ..fields.schema import FormSchema, resequence


def _required(message: str) -> tuple:
    return (ValidationRule(type=ValidationRuleType.REQUIRED, message=message),)


def _choices(*labels: str) -> ChoiceOptions:
    return ChoiceOptions(choices=tuple(Choice(value=label, label=label) for label in labels))


def _leave() -> list[FieldConfig]:
    return [
        FieldConfig(
            id="leave_type",
            name="leave_type",
            type=FieldType.SELECT,
            label="Leave type",
            required=True,
            validation_rules=_required("Please select a leave type"),
            options=_choices("Annual paid leave", "Special leave", "Sick leave", "Other"),
        ),
        FieldConfig(
            id="start_date",
            name="start_date",
            type=FieldType.DATE,
            label="Start date",
            required=True,
            width=FieldWidth.HALF,
            validation_rules=_required("Please enter a start date"),
        ),
        FieldConfig(
            id="end_date",
            name="end_date",
            type=FieldType.DATE,
            label="End date",
            required=True,
            width=FieldWidth.HALF,
            validation_rules=_required("Please enter an end date"),
        ),
        FieldConfig(
            id="days",
            name="days",
            type=FieldType.NUMBER,
            label="Days",
            options=NumberOptions(min=0, max=None, step=1),
            calculation_config=CalculationConfig(
                type=CalculationType.DATE_DIFF,
                target_fields=("start_date", "end_date"),
                result_field="days",
            ),
        ),
        FieldConfig(id="reason", name="reason", type=FieldType.TEXTAREA, label="Reason", options=TextareaOptions()),
    ]


def _overtime() -> list[FieldConfig]:
    return [
        FieldConfig(
            id="overtime_date",
            name="overtime_date",
            type=FieldType.DATE,
            label="Overtime date",
            required=True,
            validation_rules=_required("Please enter the overtime date"),
        ),
        FieldConfig(
            id="start_time",
            name="start_time",
            type=FieldType.TIME,
            label="Start time",
            required=True,
            width=FieldWidth.HALF,
            validation_rules=_required("Please enter a start time"),
        ),
        FieldConfig(
            id="end_time",
            name="end_time",
            type=FieldType.TIME,
            label="End time",
            required=True,
            width=FieldWidth.HALF,
            validation_rules=_required("Please enter an end time"),
        ),
        FieldConfig(
            id="minutes",
            name="minutes",
            type=FieldType.NUMBER,
            label="Minutes",
            options=NumberOptions(min=0, max=None, step=1),
            calculation_config=CalculationConfig(
                type=CalculationType.TIME_DIFF,
                target_fields=("start_time", "end_time"),
                result_field="minutes",
            ),
        ),
        FieldConfig(
            id="reason",
            name="reason",
            type=FieldType.TEXTAREA,
            label="Reason",
            required=True,
            options=TextareaOptions(),
            validation_rules=_required("Please enter a reason"),
        ),
    ]


def _attendance_correction() -> list[FieldConfig]:
    return [
        FieldConfig(
            id="correction_date",
            name="correction_date",
            type=FieldType.DATE,
            label="Date to correct",
            required=True,
            validation_rules=(
                *_required("Please enter the date to correct"),
                ValidationRule(
                    type=ValidationRuleType.CUSTOM,
                    value="past_date",
                    message="Only past dates can be corrected",
                ),
            ),
        ),
        FieldConfig(
            id="correction_type",
            name="correction_type",
            type=FieldType.SELECT,
            label="Correction type",
            required=True,
            validation_rules=_required("Please select a correction type"),
            options=_choices("Clock-in time", "Clock-out time", "Break time", "Other"),
        ),
        FieldConfig(
            id="corrected_time",
            name="corrected_time",
            type=FieldType.TIME,
            label="Corrected time",
            required=True,
            width=FieldWidth.HALF,
            validation_rules=_required("Please enter the corrected time"),
        ),
        FieldConfig(
            id="reason",
            name="reason",
            type=FieldType.TEXTAREA,
            label="Reason for correction",
            required=True,
            options=TextareaOptions(),
            validation_rules=_required("Please enter a reason for the correction"),
        ),
    ]


_DEFAULTS = {
    "leave": _leave,
    "overtime": _overtime,
    "attendance_correction": _attendance_correction,
}


def default_categories() -> list[str]:
    return list(_DEFAULTS)


def default_fields(category: str) -> FormSchema:
    """Fields a new form of ``category`` starts with; unknown categories start empty."""
    build = _DEFAULTS.get(str(category or "").strip().lower())
    return resequence(build()) if build else ()
