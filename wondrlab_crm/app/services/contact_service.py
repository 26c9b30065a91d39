"""
Business logic for client contacts.

Contacts always belong to one client and are addressed through it.
Flagging a contact as primary clears the flag on the client's other
contacts.
"""

import logging
from typing import List, Sequence

from ..repositories import EntityNotFound, Store
from ..schemas.contact import ContactCreate, ContactRead
from .activity_service import ActivityService

logger = logging.getLogger(__name__)


class ContactService:

    def __init__(self, store: Store) -> None:
        self.store = store
        self.activity = ActivityService(store)

    @staticmethod
    def ordered(contacts: Sequence[ContactRead]) -> List[ContactRead]:
        """Primary contact first, then by name."""
        return sorted(contacts, key=lambda c: (not c.is_primary, c.name.lower()))

    def _for_client(self, client_id: int) -> List[ContactRead]:
        return [c for c in self.store.contacts.list() if c.client_id == client_id]

    def _get_for_client(self, client_id: int, contact_id: int) -> ContactRead:
        self.store.clients.get(client_id)
        contact = self.store.contacts.get(contact_id)
        if contact.client_id != client_id:
            raise EntityNotFound("Contact", contact_id)
        return contact

    def _clear_primary(self, client_id: int, keep_id: int = 0) -> None:
        for contact in self._for_client(client_id):
            if contact.is_primary and contact.id != keep_id:
                self.store.contacts.update(contact.id, {"is_primary": False})

    async def list_contacts(self, client_id: int) -> List[ContactRead]:
        self.store.clients.get(client_id)
        return self.ordered(self._for_client(client_id))

    async def create_contact(self, client_id: int, data: ContactCreate) -> ContactRead:
        client = self.store.clients.get(client_id)
        if data.is_primary:
            self._clear_primary(client_id)
        contact = self.store.contacts.create({**data.model_dump(), "client_id": client_id})
        logger.info("Added contact %s to client %s", contact.id, client_id)
        await self.activity.log(
            "created", "contact", contact.id,
            summary=f"Contact {contact.name} added to {client.name}",
        )
        return contact

    async def update_contact(self, client_id: int, contact_id: int, updates: dict) -> ContactRead:
        self._get_for_client(client_id, contact_id)
        if updates.get("is_primary"):
            self._clear_primary(client_id, keep_id=contact_id)
        contact = self.store.contacts.update(contact_id, updates)
        logger.info("Updated contact %s: %s", contact_id, sorted(updates))
        await self.activity.log("updated", "contact", contact_id, details=updates)
        return contact

    async def delete_contact(self, client_id: int, contact_id: int) -> None:
        contact = self._get_for_client(client_id, contact_id)
        self.store.contacts.delete(contact_id)
        logger.info("Deleted contact %s from client %s", contact_id, client_id)
        await self.activity.log(
            "deleted", "contact", contact_id, summary=f"Contact {contact.name} removed",
        )
