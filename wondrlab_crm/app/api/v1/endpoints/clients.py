"""
Client endpoints for API v1.

Clients can be created, listed, read and edited.  There is no delete
route; a client that is no longer served is marked inactive instead.
Contacts and notes are nested under their client.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....core.config import settings
from ....repositories import EntityNotFound
from ....schemas.client import (
    ClientCreate,
    ClientDetail,
    ClientFilter,
    ClientFilterField,
    ClientRead,
    ClientSortField,
    ClientUpdate,
)
from ....schemas.contact import ContactCreate, ContactRead, ContactUpdate
from ....schemas.listing import Page, SortOrder
from ....schemas.note import NoteCreate, NoteParentType, NoteRead
from ....services.client_service import ClientService
from ....services.contact_service import ContactService
from ....services.note_service import NoteService
from ...dependencies import get_client_service, get_contact_service, get_note_service


router = APIRouter()


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    client: ClientCreate,
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """Create a new client.

    Responds with 400 if another client already uses the same name.
    """
    try:
        return await service.create_client(client)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/", response_model=Page[ClientRead])
async def list_clients(
    search: Optional[str] = Query(None, description="Matches name, industry, region, primary BU or contact"),
    industry: Optional[str] = Query(None),
    region: Optional[str] = Query(None),
    primary_bu: Optional[str] = Query(None),
    primary_account_manager: Optional[str] = Query(None),
    sort_by: ClientSortField = Query(ClientSortField.NAME),
    order: SortOrder = Query(SortOrder.ASC),
    page: int = Query(0, ge=0),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    service: ClientService = Depends(get_client_service),
) -> Page[ClientRead]:
    """List clients with search, filters, sorting and pagination.

    - **search**: case-insensitive substring over the searchable fields.
    - **industry**, **region**, **primary_bu**, **primary_account_manager**: exact-match filters.
    - **sort_by**, **order**: sort field and direction.
    - **page**, **page_size**: zero-based page and its length.
    """
    filters = [
        ClientFilter(field=ClientFilterField.INDUSTRY, value=industry),
        ClientFilter(field=ClientFilterField.REGION, value=region),
        ClientFilter(field=ClientFilterField.PRIMARY_BU, value=primary_bu),
        ClientFilter(field=ClientFilterField.PRIMARY_ACCOUNT_MANAGER, value=primary_account_manager),
    ]
    return await service.list_clients(
        search=search,
        filters=filters,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
    )


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(
    client_id: int,
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    try:
        return await service.get_client(client_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: int,
    updates: ClientUpdate,
    service: ClientService = Depends(get_client_service),
) -> ClientRead:
    """Update an existing client.

    Partial updates are supported; any unspecified fields remain
    unchanged.
    """
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await service.update_client(client_id, update_dict)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/{client_id}/detail", response_model=ClientDetail)
async def get_client_detail(
    client_id: int,
    service: ClientService = Depends(get_client_service),
) -> ClientDetail:
    """Client with its engagements, opportunities and the matrix
    status of every service."""
    try:
        return await service.get_client_detail(client_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{client_id}/contacts", response_model=List[ContactRead])
async def list_contacts(
    client_id: int,
    contacts: ContactService = Depends(get_contact_service),
) -> List[ContactRead]:
    """Contacts of a client, primary contact first."""
    try:
        return await contacts.list_contacts(client_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{client_id}/contacts", response_model=ContactRead, status_code=status.HTTP_201_CREATED)
async def create_contact(
    client_id: int,
    contact: ContactCreate,
    contacts: ContactService = Depends(get_contact_service),
) -> ContactRead:
    try:
        return await contacts.create_contact(client_id, contact)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{client_id}/contacts/{contact_id}", response_model=ContactRead)
async def update_contact(
    client_id: int,
    contact_id: int,
    updates: ContactUpdate,
    contacts: ContactService = Depends(get_contact_service),
) -> ContactRead:
    update_dict = {k: v for k, v in updates.model_dump().items() if v is not None}
    try:
        return await contacts.update_contact(client_id, contact_id, update_dict)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.delete("/{client_id}/contacts/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    client_id: int,
    contact_id: int,
    contacts: ContactService = Depends(get_contact_service),
) -> None:
    try:
        await contacts.delete_contact(client_id, contact_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return None


@router.get("/{client_id}/notes", response_model=List[NoteRead])
async def list_client_notes(
    client_id: int,
    notes: NoteService = Depends(get_note_service),
) -> List[NoteRead]:
    try:
        return await notes.list_notes(NoteParentType.CLIENT, client_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{client_id}/notes", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def add_client_note(
    client_id: int,
    note: NoteCreate,
    notes: NoteService = Depends(get_note_service),
) -> NoteRead:
    try:
        return await notes.add_note(NoteParentType.CLIENT, client_id, note)
    except EntityNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
