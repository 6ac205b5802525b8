from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..core.enums import (
    CalculationType,
    ConditionAction,
    ConditionOperator,
    FieldType,
    FieldWidth,
    ValidationRuleType,
)
from .options import FieldOptions, TextOptions, options_from_dict, options_to_dict


@dataclass(frozen=True)
class ValidationRule:
    type: ValidationRuleType
    value: Any = None
    message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "ValidationRule":
        return cls(
            type=ValidationRuleType(data["type"]),
            value=data.get("value"),
            message=str(data.get("message") or ""),
        )

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value, "message": self.message}


@dataclass(frozen=True)
class ConditionalRule:
    """When ``field`` (another field's id) satisfies the test, apply ``action`` to the owner."""

    field: str
    operator: ConditionOperator
    value: Any
    action: ConditionAction

    @classmethod
    def from_dict(cls, data: Mapping) -> "ConditionalRule":
        return cls(
            field=str(data.get("field") or ""),
            operator=ConditionOperator(data["operator"]),
            value=data.get("value"),
            action=ConditionAction(data.get("action", ConditionAction.SHOW.value)),
        )

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "operator": self.operator.value,
            "value": self.value,
            "action": self.action.value,
        }


@dataclass(frozen=True)
class CalculationConfig:
    type: CalculationType
    target_fields: Tuple[str, ...]
    result_field: str
    formula: Optional[str] = None
    conditions: Tuple[ConditionalRule, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping) -> "CalculationConfig":
        formula = data.get("formula") or None
        if formula is not None and not isinstance(formula, str):
            raise ValueError(f"formula must be a string, got {type(formula).__name__}")
        return cls(
            type=CalculationType(data["type"]),
            target_fields=tuple(str(t) for t in (data.get("target_fields") or [])),
            result_field=str(data.get("result_field") or ""),
            formula=formula,
            conditions=tuple(ConditionalRule.from_dict(c) for c in (data.get("conditions") or [])),
        )

    def to_dict(self) -> dict:
        out = {
            "type": self.type.value,
            "target_fields": list(self.target_fields),
            "result_field": self.result_field,
        }
        if self.formula is not None:
            out["formula"] = self.formula
        if self.conditions:
            out["conditions"] = [c.to_dict() for c in self.conditions]
        return out


@dataclass(frozen=True)
class FieldConfig:
    id: str
    name: str
    type: FieldType
    label: str
    required: bool = False
    order: int = 0
    width: FieldWidth = FieldWidth.FULL
    options: FieldOptions = field(default_factory=TextOptions)
    validation_rules: Tuple[ValidationRule, ...] = ()
    conditional_logic: Tuple[ConditionalRule, ...] = ()
    calculation_config: Optional[CalculationConfig] = None
    placeholder: str = ""
    description: str = ""
    default_value: Any = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_numeric(self) -> bool:
        return self.type in (FieldType.NUMBER, FieldType.HIDDEN)

    @classmethod
    def from_dict(cls, data: Mapping) -> "FieldConfig":
        field_type = FieldType.parse(data.get("type", FieldType.TEXT.value))
        metadata = dict(data.get("metadata") or {})
        calc = data.get("calculation_config")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            type=field_type,
            label=str(data.get("label") or ""),
            required=bool(data.get("required", False)),
            order=int(data.get("order") or 0),
            width=FieldWidth(data.get("width") or FieldWidth.FULL.value),
            options=options_from_dict(field_type, data.get("options"), metadata),
            validation_rules=tuple(ValidationRule.from_dict(r) for r in (data.get("validation_rules") or [])),
            conditional_logic=tuple(ConditionalRule.from_dict(r) for r in (data.get("conditional_logic") or [])),
            calculation_config=CalculationConfig.from_dict(calc) if calc else None,
            placeholder=str(data.get("placeholder") or ""),
            description=str(data.get("description") or ""),
            default_value=copy.deepcopy(data.get("default_value")),
            metadata=metadata,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "label": self.label,
            "required": self.required,
            "order": self.order,
            "width": self.width.value,
            "options": options_to_dict(self.options),
            "validation_rules": [r.to_dict() for r in self.validation_rules],
            "conditional_logic": [r.to_dict() for r in self.conditional_logic],
            "calculation_config": self.calculation_config.to_dict() if self.calculation_config else None,
            "placeholder": self.placeholder,
            "description": self.description,
            "default_value": copy.deepcopy(self.default_value),
            "metadata": copy.deepcopy(self.metadata),
        }


@dataclass(frozen=True)
class FieldState:
    """Runtime state the renderer needs for one field."""

    visible: bool = True
    required: bool = False
    disabled: bool = False

    def to_dict(self) -> dict:
        return {"visible": self.visible, "required": self.required, "disabled": self.disabled}
