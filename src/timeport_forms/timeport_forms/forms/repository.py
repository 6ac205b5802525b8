from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import FormKind
from ..fields.model import FieldConfig
from .model import FormTemplate


class FormTemplateRepository(Protocol):
    def create(
        self,
        *,
        name: str,
        kind: FormKind,
        category: Optional[str],
        description: Optional[str],
        fields: Sequence[FieldConfig],
    ) -> int:
        raise NotImplementedError

    def get(self, *, template_id: int) -> Optional[FormTemplate]:
        raise NotImplementedError

    def list_all(self, *, kind: Optional[FormKind] = None, active_only: bool = False) -> Sequence[FormTemplate]:
        raise NotImplementedError

    def update_fields(self, *, template_id: int, fields: Sequence[FieldConfig]) -> bool:
        """Replace the stored schema. Returns False when the template does not exist."""

        raise NotImplementedError

    def set_active(self, *, template_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    def delete(self, *, template_id: int) -> bool:
        raise NotImplementedError
