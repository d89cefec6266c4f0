"""
Character API.

    character = api.characters(12345, token)
    info = await character.info()
    labels = await character.contacts.labels()
    orders = await character.structures(1021975535893).orders()
"""

from __future__ import annotations

from typing import Any, Optional

from ...core.agent import ESIAgent, SSOAgent
from ...internal.resource import SimpleResource
from ...internal.search import make_character_search
from ...models.esi import SearchCategory
from ..market import expect_dict
from .contacts import Contact, Contacts
from .structures import Structure, Structures


class Character(SimpleResource):
    """A character, optionally authenticated with an SSO access token."""

    def __init__(self, agent: SSOAgent) -> None:
        super().__init__(agent.character_id)
        self.agent = agent
        self._contacts: Optional[Contacts] = None
        self._structures: Optional[Structures] = None

    async def info(self) -> dict[str, Any]:
        """Public information about the character."""
        operation_id = "get_characters_character_id"
        result = await self.agent.request(operation_id, {"path": self.agent.character_path()})
        return expect_dict(result, operation_id)

    @property
    def contacts(self) -> Contacts:
        if self._contacts is None:
            self._contacts = Contacts(self.agent)
        return self._contacts

    @property
    def structures(self) -> Structures:
        if self._structures is None:
            self._structures = Structures(self.agent)
        return self._structures

    async def search(
        self, query: str, category: SearchCategory, strict: bool = False
    ) -> list[int]:
        """Search any category with the character's access rights."""
        return await make_character_search(self.agent, category)(query, strict)


class Characters:
    """Functional entry point: ``characters(id, token=None)``."""

    def __init__(self, agent: ESIAgent) -> None:
        self.agent = agent

    def __call__(self, id: int, token: Optional[str] = None) -> Character:
        if isinstance(id, bool) or not isinstance(id, int):
            raise TypeError(f"Expected a character id, got {type(id).__name__}")
        return Character(self.agent.for_character(id, token or self.agent.token))


def make_characters(agent: ESIAgent) -> Characters:
    return Characters(agent)


__all__ = [
    "Character",
    "Characters",
    "Contact",
    "Contacts",
    "Structure",
    "Structures",
    "make_characters",
]
