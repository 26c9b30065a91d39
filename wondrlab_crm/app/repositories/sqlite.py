"""
SQLite-backed repository.

Each repository maps one pydantic model onto one table whose columns
carry the model's field names.  Records are validated through the
model before they are written, so defaults are filled in the same
way as in the in-memory backend.  Enums are stored by value, booleans
as integers, dates as ISO strings and dict payloads as JSON text.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type

from ..core.db import get_connection
from .base import EntityNotFound, M, Repository


def _to_column(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return value


class SQLiteRepository(Repository[M]):

    def __init__(self, model: Type[M], entity: str, table: str, db_path: Optional[str] = None) -> None:
        super().__init__(model, entity)
        self.table = table
        self.db_path = db_path
        self.columns: Tuple[str, ...] = tuple(name for name in model.model_fields if name != "id")

    def _select(self) -> str:
        return f"SELECT id, {', '.join(self.columns)} FROM {self.table}"

    def _row_values(self, record: M) -> List[Any]:
        return [_to_column(getattr(record, name)) for name in self.columns]

    def list(self) -> List[M]:
        conn = get_connection(self.db_path)
        try:
            rows = conn.execute(f"{self._select()} ORDER BY id").fetchall()
            return [self.model.model_validate(dict(row)) for row in rows]
        finally:
            conn.close()

    def get(self, record_id: int) -> M:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute(f"{self._select()} WHERE id = ?", (record_id,)).fetchone()
            if not row:
                raise EntityNotFound(self.entity, record_id)
            return self.model.model_validate(dict(row))
        finally:
            conn.close()

    def create(self, data: Dict[str, Any]) -> M:
        # Validate with a placeholder id so defaults are applied before insert.
        record = self.model.model_validate({**data, "id": 0})
        placeholders = ", ".join("?" for _ in self.columns)
        conn = get_connection(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})",
                tuple(self._row_values(record)),
            )
            record_id = cursor.lastrowid
            conn.commit()
        finally:
            conn.close()
        return record.model_copy(update={"id": record_id})

    def update(self, record_id: int, changes: Dict[str, Any]) -> M:
        current = self.get(record_id)
        record = self.model.model_validate({**current.model_dump(), **changes, "id": record_id})
        assignments = ", ".join(f"{name} = ?" for name in self.columns)
        conn = get_connection(self.db_path)
        try:
            conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                (*self._row_values(record), record_id),
            )
            conn.commit()
        finally:
            conn.close()
        return record

    def delete(self, record_id: int) -> None:
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            if cursor.rowcount == 0:
                raise EntityNotFound(self.entity, record_id)
            conn.commit()
        finally:
            conn.close()
