from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Portal roles used for permission checks."""

    ADMIN = "admin"
    MEMBER = "member"
    SYSTEM_ADMIN = "system_admin"


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    EMAIL = "email"
    TEL = "tel"
    URL = "url"
    PASSWORD = "password"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    FILE = "file"
    HIDDEN = "hidden"
    OBJECT = "object"

    @classmethod
    def parse(cls, value: str) -> "FieldType":
        """Accept the spellings stored by older form records."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        return cls(_FIELD_TYPE_ALIASES.get(key, key))


_FIELD_TYPE_ALIASES = {
    "phone": "tel",
    "datetime-local": "datetime",
}


class FieldWidth(str, Enum):
    FULL = "full"
    HALF = "half"
    THIRD = "third"
    QUARTER = "quarter"


class ValidationRuleType(str, Enum):
    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MIN = "min"
    MAX = "max"
    PATTERN = "pattern"
    EMAIL = "email"
    TEL = "tel"
    URL = "url"
    CUSTOM = "custom"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class ConditionAction(str, Enum):
    SHOW = "show"
    HIDE = "hide"
    REQUIRE = "require"
    DISABLE = "disable"


class CalculationType(str, Enum):
    SUM = "sum"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    SUBTRACT = "subtract"
    DATE_DIFF = "date_diff"
    TIME_DIFF = "time_diff"
    CUSTOM = "custom"


class FormKind(str, Enum):
    """Where a form template is used."""

    REPORT = "report"
    REQUEST = "request"
