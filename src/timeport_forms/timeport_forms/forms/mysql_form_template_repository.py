from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence

from ..core.enums import FormKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..fields.model import FieldConfig
from ..fields.schema import schema_from_records, schema_to_records
from .model import FormTemplate
from .repository import FormTemplateRepository

_COLUMNS = "template_id, name, kind, category, description, fields_json, is_active, created_at, updated_at"


def _row_to_template(r: Dict[str, Any]) -> FormTemplate:
    raw = r.get("fields_json") or "[]"
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    records = json.loads(raw) if isinstance(raw, str) else raw
    return FormTemplate(
        template_id=int(r["template_id"]),
        name=r["name"],
        kind=FormKind(r["kind"]),
        category=r.get("category"),
        description=r.get("description"),
        fields=schema_from_records(records),
        is_active=bool(r.get("is_active", 1)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _dump_fields(fields: Sequence[FieldConfig]) -> str:
    return json.dumps(schema_to_records(fields), ensure_ascii=False)


class MySQLFormTemplateRepository(FormTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        name: str,
        kind: FormKind,
        category: Optional[str],
        description: Optional[str],
        fields: Sequence[FieldConfig],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO form_templates(name, kind, category, description, fields_json)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, kind.value, category, description, _dump_fields(fields)),
            )
            return int(cur.lastrowid)

    def get(self, *, template_id: int) -> Optional[FormTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM form_templates WHERE template_id=%s", (int(template_id),))
            r = fetchone(cur)
            return _row_to_template(r) if r else None

    def list_all(self, *, kind: Optional[FormKind] = None, active_only: bool = False) -> Sequence[FormTemplate]:
        clauses = []
        params: list[object] = []
        if kind is not None:
            clauses.append("kind=%s")
            params.append(kind.value)
        if active_only:
            clauses.append("is_active=1")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM form_templates
                {where}
                ORDER BY kind ASC, name ASC, template_id ASC
                """,
                tuple(params),
            )
            return [_row_to_template(r) for r in fetchall(cur)]

    def update_fields(self, *, template_id: int, fields: Sequence[FieldConfig]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE form_templates SET fields_json=%s WHERE template_id=%s",
                (_dump_fields(fields), int(template_id)),
            )
            if cur.rowcount > 0:
                return True
            # rowcount is 0 when the stored JSON is unchanged; distinguish that from a missing row.
            cur.execute("SELECT 1 AS found FROM form_templates WHERE template_id=%s", (int(template_id),))
            return fetchone(cur) is not None

    def set_active(self, *, template_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE form_templates SET is_active=%s WHERE template_id=%s",
                (1 if is_active else 0, int(template_id)),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM form_templates WHERE template_id=%s", (int(template_id),))
            return fetchone(cur) is not None

    def delete(self, *, template_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM form_templates WHERE template_id=%s", (int(template_id),))
            return cur.rowcount > 0
