from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..core.enums import FormKind
from ..fields.model import FieldConfig
from ..fields.schema import schema_to_records


@dataclass(frozen=True)
class FormTemplate:
    template_id: int
    name: str
    kind: FormKind
    category: Optional[str]
    description: Optional[str]
    fields: Tuple[FieldConfig, ...]
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "template_id": self.template_id,
            "name": self.name,
            "kind": self.kind.value,
            "category": self.category,
            "description": self.description,
            "fields": schema_to_records(self.fields),
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
