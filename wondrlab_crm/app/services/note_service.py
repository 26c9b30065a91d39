"""
Notes on clients and opportunities.

Notes are append-only free text: they can be added, listed newest
first and deleted, but not edited.
"""

import logging
from datetime import datetime
from typing import List

from ..repositories import Store
from ..schemas.note import NoteCreate, NoteParentType, NoteRead
from .activity_service import ActivityService

logger = logging.getLogger(__name__)


class NoteService:
    """Service class for notes attached to clients and opportunities."""

    def __init__(self, store: Store) -> None:
        self.store = store
        self.activity = ActivityService(store)

    def _check_parent(self, parent_type: NoteParentType, parent_id: int) -> None:
        # Raises EntityNotFound for a missing parent.
        if NoteParentType(parent_type) is NoteParentType.CLIENT:
            self.store.clients.get(parent_id)
        else:
            self.store.opportunities.get(parent_id)

    async def list_notes(self, parent_type: NoteParentType, parent_id: int) -> List[NoteRead]:
        """Notes of one client or opportunity, newest first."""
        self._check_parent(parent_type, parent_id)
        notes = [
            note for note in self.store.notes.list()
            if note.parent_type == parent_type and note.parent_id == parent_id
        ]
        notes.sort(key=lambda note: (note.timestamp, note.id), reverse=True)
        return notes

    async def add_note(self, parent_type: NoteParentType, parent_id: int, data: NoteCreate) -> NoteRead:
        self._check_parent(parent_type, parent_id)
        note = self.store.notes.create(
            {
                **data.model_dump(),
                "parent_type": parent_type,
                "parent_id": parent_id,
                "timestamp": datetime.utcnow(),
            }
        )
        logger.info("Added note %s to %s %s", note.id, note.parent_type.value, parent_id)
        await self.activity.log(
            "note_added", note.parent_type.value.lower(), parent_id,
            summary=data.content[:80], actor=data.author, details={"note_id": note.id},
        )
        return note

    async def delete_note(self, note_id: int) -> None:
        self.store.notes.delete(note_id)
        logger.info("Deleted note %s", note_id)
