"""Publish-time checks over a whole schema.

Chained calculations are not supported: a field written by one calculation
may not feed another calculation, so a single pass over the schema is always
enough and cycles cannot occur.
"""
from __future__ import annotations

import re
from collections import Counter, defaultdict
from typing import List, Sequence

from ..calculation import formula
from ..common.validators import find_duplicates
from ..core.enums import CalculationType, ValidationRuleType
from ..core.exceptions import FormulaError
from ..fields.model import FieldConfig
from ..fields.schema import dangling_references, field_ids, find_field


def _label(index: int, field: FieldConfig) -> str:
    return f"Field {index} ({field.name or field.id})"


def check_integrity(fields: Sequence[FieldConfig]) -> List[str]:
    errors: List[str] = []
    known = field_ids(fields)

    dup_ids = find_duplicates(f.id for f in fields)
    if dup_ids:
        errors.append("Duplicate field ids: " + ", ".join(dup_ids))

    dup_names = find_duplicates(f.name.strip() for f in fields if f.name.strip())
    if dup_names:
        errors.append("Duplicate field names: " + ", ".join(dup_names))

    missing = defaultdict(list)
    for owner, ref in dangling_references(fields):
        missing[owner].append(ref)

    all_targets = set()
    result_writers: Counter = Counter()
    for f in fields:
        if f.calculation_config:
            all_targets.update(f.calculation_config.target_fields)
            result_writers[f.calculation_config.result_field] += 1

    for i, f in enumerate(fields, start=1):
        label = _label(i, f)
        if not f.name.strip() or not f.label.strip():
            errors.append(f"{label}: name and label are required")

        for rule in f.conditional_logic:
            if rule.field == f.id:
                errors.append(f"{label}: conditional logic must not reference the field itself")

        result_ref = f.calculation_config.result_field if f.calculation_config else None
        for ref in missing[f.id]:
            if ref != result_ref:
                errors.append(f"{label}: references unknown field {ref!r}")

        for rule in f.validation_rules:
            if rule.type == ValidationRuleType.PATTERN:
                try:
                    re.compile(str(rule.value or ""))
                except re.error:
                    errors.append(f"{label}: invalid pattern {rule.value!r}")

        calc = f.calculation_config
        if not calc:
            continue

        if not calc.target_fields:
            errors.append(f"{label}: calculation has no target fields")
        if not calc.result_field:
            errors.append(f"{label}: calculation has no result field")
        if f.id in calc.target_fields:
            errors.append(f"{label}: calculation must not use the field itself as a target")

        if calc.result_field:
            result = find_field(fields, calc.result_field)
            if result is None:
                errors.append(f"{label}: result field {calc.result_field!r} does not exist")
            elif not result.is_numeric:
                errors.append(f"{label}: result field {calc.result_field!r} must be a number field")
            if calc.result_field in calc.target_fields:
                errors.append(f"{label}: result field must differ from every target")
            elif calc.result_field in all_targets:
                errors.append(f"{label}: result field {calc.result_field!r} feeds another calculation")
            if result_writers[calc.result_field] > 1:
                errors.append(f"{label}: result field {calc.result_field!r} is written by several calculations")

        if calc.type == CalculationType.CUSTOM:
            if not calc.formula:
                errors.append(f"{label}: custom calculation needs a formula")
            else:
                try:
                    unknown = sorted(formula.identifiers(formula.parse(calc.formula)) - known)
                except FormulaError as e:
                    errors.append(f"{label}: formula is invalid ({e})")
                else:
                    if unknown:
                        errors.append(f"{label}: formula references unknown fields: " + ", ".join(unknown))

    return errors
