from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlparse

from ...common.values import to_text
from ...fields.model import FieldConfig, ValidationRule
from .base import RuleCheck

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TEL_RE = re.compile(r"^\+?[\d\s\-()]+$")
TEL_MIN_DIGITS = 10
TEL_MAX_DIGITS = 15


class EmailCheck(RuleCheck):
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        return EMAIL_RE.match(to_text(value).strip()) is not None


class TelCheck(RuleCheck):
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        text = to_text(value).strip()
        if not TEL_RE.match(text):
            return False
        digits = sum(ch.isdigit() for ch in text)
        return TEL_MIN_DIGITS <= digits <= TEL_MAX_DIGITS


class UrlCheck(RuleCheck):
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        text = to_text(value).strip()
        if not text or any(ch.isspace() for ch in text):
            return False
        parsed = urlparse(text)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)
