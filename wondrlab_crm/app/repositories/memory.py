"""
In-memory repository.

Records live in an insertion-ordered dict keyed by id.  Used by the
test suite and by ``STORAGE_BACKEND=memory`` for throwaway demos.
"""

from __future__ import annotations

from typing import Any, Dict, List, Type

from .base import EntityNotFound, M, Repository


class InMemoryRepository(Repository[M]):

    def __init__(self, model: Type[M], entity: str) -> None:
        super().__init__(model, entity)
        self._records: Dict[int, M] = {}
        self._next_id = 1

    def list(self) -> List[M]:
        return list(self._records.values())

    def get(self, record_id: int) -> M:
        record = self._records.get(record_id)
        if record is None:
            raise EntityNotFound(self.entity, record_id)
        return record

    def create(self, data: Dict[str, Any]) -> M:
        payload = dict(data)
        record_id = payload.pop("id", None) or self._next_id
        record = self.model.model_validate({**payload, "id": record_id})
        self._records[record_id] = record
        self._next_id = max(self._next_id, record_id + 1)
        return record

    def update(self, record_id: int, changes: Dict[str, Any]) -> M:
        current = self.get(record_id)
        merged = {**current.model_dump(), **changes, "id": record_id}
        record = self.model.model_validate(merged)
        self._records[record_id] = record
        return record

    def delete(self, record_id: int) -> None:
        if record_id not in self._records:
            raise EntityNotFound(self.entity, record_id)
        del self._records[record_id]
