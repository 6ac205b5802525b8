from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from src.timeport_forms.timeport_forms.builder.service import FormBuilder
from src.timeport_forms.timeport_forms.container import build_evaluator
from src.timeport_forms.timeport_forms.fields.schema import resequence
from src.timeport_forms.timeport_forms.forms.service import FormTemplateService
from src.timeport_forms.timeport_forms.forms.model import FormTemplate


class FakeFormTemplateRepo:
    def __init__(self):
        self._next_id = 1
        self._items: dict[int, FormTemplate] = {}

    def create(self, *, name, kind, category, description, fields):
        tid = self._next_id
        self._next_id += 1
        self._items[tid] = FormTemplate(
            template_id=tid,
            name=name,
            kind=kind,
            category=category,
            description=description,
            fields=resequence(fields),
            created_at=datetime(2026, 2, 1, 10, 0, 0),
            updated_at=datetime(2026, 2, 1, 10, 0, 0),
        )
        return tid

    def get(self, *, template_id):
        return self._items.get(int(template_id))

    def list_all(self, *, kind=None, active_only=False):
        return [
            t
            for t in self._items.values()
            if (kind is None or t.kind == kind) and (not active_only or t.is_active)
        ]

    def update_fields(self, *, template_id, fields):
        t = self._items.get(int(template_id))
        if not t:
            return False
        self._items[t.template_id] = replace(t, fields=tuple(fields))
        return True

    def set_active(self, *, template_id, is_active):
        t = self._items.get(int(template_id))
        if not t:
            return False
        self._items[t.template_id] = replace(t, is_active=bool(is_active))
        return True

    def delete(self, *, template_id):
        return self._items.pop(int(template_id), None) is not None


@pytest.fixture
def repo():
    return FakeFormTemplateRepo()


@pytest.fixture
def service(repo):
    return FormTemplateService(repo, builder=FormBuilder(), evaluator=build_evaluator())
