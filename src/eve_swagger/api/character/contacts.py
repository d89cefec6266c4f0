"""
Character contacts API.

    contacts = api.characters(char_id, token).contacts
    everyone = await contacts()                 # every contact, all pages
    async for contact in contacts.stream():     # lazily, page by page
        ...
    await contacts.add([2, 3], standing=5.0, label=1)
    await contacts(2).update(-10.0)
    await contacts(2).delete()
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Iterable
from typing import Optional, Union

from ...core.agent import SSOAgent
from ...core.logging import get_logger
from ...internal.resource import (
    PageResult,
    SimpleResource,
    dedupe,
    fetch_all,
    make_page_based_streamer,
)
from ...models.esi import Contact as ContactRow
from ...models.esi import ContactLabel, ContactStanding
from ..market import expect_list

logger = get_logger(__name__)


class Contact(SimpleResource):
    """One contact in the character's contact list."""

    def __init__(self, agent: SSOAgent, id: int) -> None:
        super().__init__(id)
        self.agent = agent

    async def delete(self) -> None:
        """Remove the contact."""
        await self.agent.request(
            "delete_characters_character_id_contacts",
            {"path": self.agent.character_path(), "query": {"contact_ids": [self.id_]}},
        )

    async def _edit(self, standing: float, label: Optional[int], watched: bool) -> None:
        update = ContactStanding(standing=standing, label_id=label, watched=watched)
        await self.agent.request(
            "put_characters_character_id_contacts",
            {
                "path": self.agent.character_path(),
                "query": update.to_query(),
                "body": [self.id_],
            },
        )

    async def update(self, standing: float, label: Optional[int] = None) -> None:
        """Set the contact's standing and label, clearing the watch flag."""
        await self._edit(standing, label, watched=False)

    async def update_watched(self, standing: float, label: Optional[int] = None) -> None:
        """Set the contact's standing and label, and watch the contact."""
        await self._edit(standing, label, watched=True)


class Contacts:
    """Functional entry point for a character's contacts."""

    def __init__(self, agent: SSOAgent) -> None:
        self.agent = agent

    def __call__(self, id: Optional[int] = None) -> Union[Contact, Awaitable[list[ContactRow]]]:
        """
        ``contacts(id)`` returns a Contact; ``await contacts()`` loads every
        contact across all pages.
        """
        if id is None:
            return self.all()
        return Contact(self.agent, id)

    async def _load_page(self, page: int) -> PageResult[ContactRow]:
        operation_id = "get_characters_character_id_contacts"
        response = await self.agent.request_page(
            operation_id, {"path": self.agent.character_path(), "query": {"page": page}}
        )
        return PageResult(expect_list(response.data, operation_id), response.x_pages)

    def stream(self) -> AsyncIterator[ContactRow]:
        """Stream every contact, fetching pages as needed."""
        return make_page_based_streamer(self._load_page)()

    async def all(self) -> list[ContactRow]:
        return await fetch_all(self.stream())

    async def _add(
        self, ids: Iterable[int], standing: float, label: Optional[int], watched: bool
    ) -> list[int]:
        update = ContactStanding(standing=standing, label_id=label, watched=watched)
        contact_ids = dedupe(ids)
        operation_id = "post_characters_character_id_contacts"
        result = await self.agent.request(
            operation_id,
            {
                "path": self.agent.character_path(),
                "query": update.to_query(),
                "body": contact_ids,
            },
        )
        logger.info(
            "Added %d contact(s) for character %d", len(contact_ids), self.agent.character_id
        )
        return expect_list(result, operation_id)

    async def add(
        self, ids: Iterable[int], standing: float, label: Optional[int] = None
    ) -> list[int]:
        """
        Add contacts with the given standing.

        Returns:
            The contact ids ESI accepted
        """
        return await self._add(ids, standing, label, watched=False)

    async def add_watched(
        self, ids: Iterable[int], standing: float, label: Optional[int] = None
    ) -> list[int]:
        """Add contacts with the given standing and watch them."""
        return await self._add(ids, standing, label, watched=True)

    async def labels(self) -> list[ContactLabel]:
        operation_id = "get_characters_character_id_contacts_labels"
        result = await self.agent.request(operation_id, {"path": self.agent.character_path()})
        return expect_list(result, operation_id)
