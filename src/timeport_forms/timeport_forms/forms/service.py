from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from ..builder.service import FormBuilder
from ..common.validators import require_non_empty
from ..core.enums import FieldType, FormKind, Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError
from ..fields.model import FieldConfig
from ..fields.schema import FormSchema, schema_from_records
from ..submission.evaluator import FormSubmissionEvaluator, SubmissionResult
from .defaults import default_fields
from .model import FormTemplate
from .repository import FormTemplateRepository

logger = logging.getLogger(__name__)

EDITOR_ROLES = frozenset({Role.ADMIN, Role.SYSTEM_ADMIN})

FieldsInput = Union[Sequence[FieldConfig], Sequence[Mapping[str, Any]]]
OperationResult = Tuple[FormSchema, Optional[FieldConfig]]


def _as_schema(fields: FieldsInput) -> FormSchema:
    items = list(fields)
    if items and all(isinstance(f, FieldConfig) for f in items):
        return tuple(items)
    return schema_from_records(items)


def _arg(args: Mapping[str, Any], name: str) -> Any:
    if name not in args:
        raise DomainError(f"Missing argument: {name}")
    return args[name]


def _int_arg(args: Mapping[str, Any], name: str) -> int:
    value = _arg(args, name)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DomainError(f"Argument {name} must be an integer")


class FormTemplateService:
    def __init__(
        self,
        templates: FormTemplateRepository,
        *,
        builder: Optional[FormBuilder] = None,
        evaluator: Optional[FormSubmissionEvaluator] = None,
    ):
        self._templates = templates
        self._builder = builder or FormBuilder()
        self._evaluator = evaluator or FormSubmissionEvaluator()
        self._operations = self._build_operations()

    @staticmethod
    def _require_editor(current_role: Role) -> None:
        if current_role not in EDITOR_ROLES:
            raise AuthorizationError("Only administrators can edit forms")

    def _load(self, template_id: int) -> FormTemplate:
        template = self._templates.get(template_id=int(template_id))
        if not template:
            raise NotFoundError(f"Form template {template_id} not found")
        return template

    # Templates

    def create_template(
        self,
        *,
        current_role: Role,
        name: str,
        kind: Union[FormKind, str],
        category: Optional[str] = None,
        description: Optional[str] = None,
        use_defaults: bool = True,
    ) -> int:
        self._require_editor(current_role)
        require_non_empty(name, "name")
        try:
            kind = FormKind(kind)
        except ValueError:
            raise DomainError(f"Unknown form kind: {kind}")
        category = (category or "").strip() or None
        fields = default_fields(category) if (use_defaults and category) else ()

        template_id = self._templates.create(
            name=name.strip(),
            kind=kind,
            category=category,
            description=(description or "").strip() or None,
            fields=fields,
        )
        logger.info("Created form template %s (%s, %d fields)", template_id, kind.value, len(fields))
        return template_id

    def get_template(self, *, template_id: int) -> FormTemplate:
        return self._load(template_id)

    def list_templates(
        self, *, kind: Optional[Union[FormKind, str]] = None, active_only: bool = False
    ) -> Sequence[FormTemplate]:
        try:
            kind = FormKind(kind) if kind else None
        except ValueError:
            raise DomainError(f"Unknown form kind: {kind}")
        return self._templates.list_all(kind=kind, active_only=active_only)

    def save_fields(self, *, current_role: Role, template_id: int, fields: FieldsInput) -> FormSchema:
        """Publish ``fields`` as the template's schema; rejects schemas that fail the integrity check."""
        self._require_editor(current_role)
        self._load(template_id)
        published = self._builder.publish(_as_schema(fields))
        self._templates.update_fields(template_id=int(template_id), fields=published)
        logger.info("Published %d field(s) to form template %s", len(published), template_id)
        return published

    def set_active(self, *, current_role: Role, template_id: int, is_active: bool) -> None:
        self._require_editor(current_role)
        if not self._templates.set_active(template_id=int(template_id), is_active=bool(is_active)):
            raise NotFoundError(f"Form template {template_id} not found")

    def deactivate(self, *, current_role: Role, template_id: int) -> None:
        self.set_active(current_role=current_role, template_id=template_id, is_active=False)

    def delete(self, *, current_role: Role, template_id: int) -> None:
        self._require_editor(current_role)
        if not self._templates.delete(template_id=int(template_id)):
            raise NotFoundError(f"Form template {template_id} not found")
        logger.info("Deleted form template %s", template_id)

    # Builder

    def _build_operations(self) -> Dict[str, Callable[[FormSchema, Mapping[str, Any]], OperationResult]]:
        b = self._builder

        def schema_only(fn: Callable[[FormSchema, Mapping[str, Any]], FormSchema]):
            return lambda fields, args: (fn(fields, args), None)

        def save_field(fields: FormSchema, args: Mapping[str, Any]) -> OperationResult:
            draft = _arg(args, "field")
            if not isinstance(draft, FieldConfig):
                draft = schema_from_records([draft])[0]
            return b.save_field(fields, draft), None

        return {
            "add_field": lambda fields, args: b.add_field(fields, FieldType.parse(_arg(args, "type"))),
            "duplicate_field": lambda fields, args: b.duplicate_field(fields, _arg(args, "field_id")),
            "remove_field": schema_only(lambda fields, args: b.remove_field(fields, _arg(args, "field_id"))),
            "reorder": schema_only(
                lambda fields, args: b.reorder(fields, _arg(args, "field_id"), _int_arg(args, "new_index"))
            ),
            "move": schema_only(
                lambda fields, args: b.move(
                    fields, _int_arg(args, "source_index"), _int_arg(args, "destination_index")
                )
            ),
            "move_field_up": schema_only(lambda fields, args: b.move_field_up(fields, _arg(args, "field_id"))),
            "move_field_down": schema_only(lambda fields, args: b.move_field_down(fields, _arg(args, "field_id"))),
            "update_field": schema_only(
                lambda fields, args: b.update_field(fields, _arg(args, "field_id"), _arg(args, "changes"))
            ),
            "save_field": save_field,
            "add_validation_rule": schema_only(
                lambda fields, args: b.add_validation_rule(fields, _arg(args, "field_id"), _arg(args, "rule"))
            ),
            "update_validation_rule": schema_only(
                lambda fields, args: b.update_validation_rule(
                    fields, _arg(args, "field_id"), _int_arg(args, "index"), _arg(args, "changes")
                )
            ),
            "remove_validation_rule": schema_only(
                lambda fields, args: b.remove_validation_rule(fields, _arg(args, "field_id"), _int_arg(args, "index"))
            ),
            "add_conditional_logic": schema_only(
                lambda fields, args: b.add_conditional_logic(fields, _arg(args, "field_id"), _arg(args, "rule"))
            ),
            "update_conditional_logic": schema_only(
                lambda fields, args: b.update_conditional_logic(
                    fields, _arg(args, "field_id"), _int_arg(args, "index"), _arg(args, "changes")
                )
            ),
            "remove_conditional_logic": schema_only(
                lambda fields, args: b.remove_conditional_logic(
                    fields, _arg(args, "field_id"), _int_arg(args, "index")
                )
            ),
            "set_calculation": schema_only(
                lambda fields, args: b.set_calculation(fields, _arg(args, "field_id"), _arg(args, "config"))
            ),
            "clear_calculation": schema_only(
                lambda fields, args: b.clear_calculation(fields, _arg(args, "field_id"))
            ),
        }

    def operation_names(self) -> Sequence[str]:
        return sorted(self._operations)

    def apply(
        self,
        *,
        current_role: Role,
        fields: FieldsInput,
        operation: str,
        args: Optional[Mapping[str, Any]] = None,
    ) -> OperationResult:
        """Run one builder operation on a draft schema and return the new draft.

        Nothing is persisted; the draft becomes the template's schema through
        ``save_fields``. The second element is the field the operation created,
        if any.
        """
        self._require_editor(current_role)
        op = self._operations.get(operation)
        if op is None:
            raise DomainError(f"Unknown builder operation: {operation}")
        try:
            return op(_as_schema(fields), args or {})
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            raise DomainError(f"Invalid arguments for {operation}: {e}") from e

    def check_integrity(self, *, fields: FieldsInput) -> list[str]:
        return self._builder.check_integrity(_as_schema(fields))

    # Submission

    def evaluate_submission(self, *, template_id: int, values: Mapping[str, Any]) -> SubmissionResult:
        template = self._load(template_id)
        if not template.is_active:
            raise NotFoundError(f"Form template {template_id} is not active")
        return self._evaluator.evaluate(template.fields, values or {})
