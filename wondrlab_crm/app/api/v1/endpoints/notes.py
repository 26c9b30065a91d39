"""
Note endpoints for API v1.

Notes are created and listed under their client or opportunity; this
router only removes them by id.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from ....repositories import EntityNotFound
from ....services.note_service import NoteService
from ...dependencies import get_note_service


router = APIRouter()


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: int,
    notes: NoteService = Depends(get_note_service),
) -> None:
    try:
        await notes.delete_note(note_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None
