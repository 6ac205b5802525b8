from __future__ import annotations

import logging
import re
from typing import Any

from ...common.values import to_text
from ...fields.model import FieldConfig, ValidationRule
from .base import RuleCheck

logger = logging.getLogger(__name__)


class PatternCheck(RuleCheck):
    def passes(self, *, value: Any, rule: ValidationRule, field: FieldConfig) -> bool:
        if rule.value is None or rule.value == "":
            return True
        try:
            regex = re.compile(str(rule.value))
        except re.error:
            logger.warning("Ignoring invalid pattern on field %s: %r", field.id, rule.value)
            return True
        return regex.search(to_text(value)) is not None
