from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterable

from ..core.enums import FormKind
from ..forms.defaults import default_categories, default_fields
from ..fields.schema import schema_to_records
from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATE_NAMES = {
    "leave": "Leave request",
    "overtime": "Overtime request",
    "attendance_correction": "Attendance correction request",
}


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql may pin a database name; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Splits on ';' outside quoted strings. Line comments are dropped first.
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config)), dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Applied schema from %s", schema_path)


def seed_default_templates(db_config: dict) -> list[str]:
    """Insert the built-in request forms whose category has no template yet.

    Returns the categories that were created.
    """
    created: list[str] = []
    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config))) as (_, cur):
        for category in default_categories():
            cur.execute("SELECT template_id FROM form_templates WHERE category=%s LIMIT 1", (category,))
            if cur.fetchone():
                continue
            cur.execute(
                """
                INSERT INTO form_templates(name, kind, category, description, fields_json)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    _DEFAULT_TEMPLATE_NAMES.get(category, category),
                    FormKind.REQUEST.value,
                    category,
                    None,
                    json.dumps(schema_to_records(default_fields(category)), ensure_ascii=False),
                ),
            )
            created.append(category)
    if created:
        logger.info("Seeded default form templates: %s", ", ".join(created))
    return created


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_mapping(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
