from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import ValidationRuleType
from .rules.base import RuleCheck
from .rules.bounds import MaxValueCheck, MinValueCheck
from .rules.custom import CustomCheck, CustomValidatorRegistry
from .rules.formats import EmailCheck, TelCheck, UrlCheck
from .rules.length import MaxLengthCheck, MinLengthCheck
from .rules.pattern import PatternCheck
from .rules.presence import RequiredCheck


@dataclass
class ValidationRuleFactory:
    """Factory Pattern: pick the check for a rule type."""

    custom_validators: CustomValidatorRegistry = field(default_factory=CustomValidatorRegistry)

    def __post_init__(self):
        self._checks: dict[ValidationRuleType, RuleCheck] = {
            ValidationRuleType.REQUIRED: RequiredCheck(),
            ValidationRuleType.MIN_LENGTH: MinLengthCheck(),
            ValidationRuleType.MAX_LENGTH: MaxLengthCheck(),
            ValidationRuleType.MIN: MinValueCheck(),
            ValidationRuleType.MAX: MaxValueCheck(),
            ValidationRuleType.PATTERN: PatternCheck(),
            ValidationRuleType.EMAIL: EmailCheck(),
            ValidationRuleType.TEL: TelCheck(),
            ValidationRuleType.URL: UrlCheck(),
            ValidationRuleType.CUSTOM: CustomCheck(self.custom_validators),
        }

    def for_rule(self, rule_type: ValidationRuleType) -> RuleCheck:
        return self._checks[ValidationRuleType(rule_type)]
