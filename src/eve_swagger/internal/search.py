"""
Search helpers.

A Search is a callable bound to one category:

    search = make_default_search(agent, "region")
    ids = await search("Forge", strict=False)
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol

from ..core.agent import ESIAgent, SSOAgent
from ..core.client import ESIError
from ..models.esi import SearchCategory


class Search(Protocol):
    def __call__(self, query: str, strict: bool = False) -> Awaitable[list[int]]: ...


def _extract_ids(result: object, category: SearchCategory) -> list[int]:
    if result is None:
        return []
    if not isinstance(result, dict):
        raise ESIError(f"Expected dict from search, got {type(result).__name__}")
    return list(result.get(category, []))


def make_default_search(agent: ESIAgent, category: SearchCategory) -> Search:
    """Create a public search over one category (get_search)."""

    async def search(query: str, strict: bool = False) -> list[int]:
        result = await agent.request(
            "get_search",
            {"query": {"categories": [category], "search": query, "strict": strict}},
        )
        return _extract_ids(result, category)

    return search


def make_character_search(agent: SSOAgent, category: SearchCategory) -> Search:
    """
    Create an authenticated search over one category, scoped to the
    agent's character (get_characters_character_id_search). Required for
    categories such as structures that the public search does not expose.
    """

    async def search(query: str, strict: bool = False) -> list[int]:
        result = await agent.request(
            "get_characters_character_id_search",
            {
                "path": agent.character_path(),
                "query": {"categories": [category], "search": query, "strict": strict},
            },
        )
        return _extract_ids(result, category)

    return search
