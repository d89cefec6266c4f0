"""
Id to name resolution through post_universe_names.

ESI accepts at most NAMES_CHUNK_SIZE ids per call, so larger requests are
split into chunks. Mapped lookups send their chunks concurrently; streamed
lookups send one chunk at a time as ids arrive.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from typing import Optional

from ..core.agent import ESIAgent
from ..core.client import ESIError
from ..core.constants import NAMES_CHUNK_SIZE
from ..core.logging import get_logger
from ..models.esi import NameCategory, NameEntry
from .resource import dedupe, gather_mapped

logger = get_logger(__name__)


def _chunks(ids: list[int], size: int = NAMES_CHUNK_SIZE) -> list[list[int]]:
    return [ids[i : i + size] for i in range(0, len(ids), size)]


async def _resolve_chunk(
    agent: ESIAgent, category: Optional[NameCategory], ids: list[int]
) -> list[NameEntry]:
    result = await agent.request("post_universe_names", {"body": ids})
    if not isinstance(result, list):
        raise ESIError(f"Expected list from post_universe_names, got {type(result).__name__}")
    if category is None:
        return result
    return [entry for entry in result if entry.get("category") == category]


async def get_names(
    agent: ESIAgent,
    category: Optional[NameCategory],
    ids: Iterable[int],
) -> dict[int, str]:
    """
    Resolve ids to names.

    Args:
        agent: Agent making the requests
        category: Only keep names of this category (None keeps everything)
        ids: Ids to resolve; duplicates are ignored

    Returns:
        Dict from id to name. Ids ESI does not know are absent.
    """
    unique = dedupe(ids)
    if not unique:
        return {}

    chunks = _chunks(unique)
    logger.debug("Resolving %d names in %d chunk(s)", len(unique), len(chunks))
    resolved = await gather_mapped(
        range(len(chunks)), lambda index: _resolve_chunk(agent, category, chunks[index])
    )

    names: dict[int, str] = {}
    for index in range(len(chunks)):
        for entry in resolved[index]:
            names[entry["id"]] = entry["name"]
    return names


async def get_iterated_names(
    agent: ESIAgent,
    category: Optional[NameCategory],
    ids: AsyncIterator[int],
) -> AsyncIterator[tuple[int, str]]:
    """Stream ``(id, name)`` pairs for an async stream of ids."""
    pending: list[int] = []

    async for item_id in ids:
        pending.append(item_id)
        if len(pending) >= NAMES_CHUNK_SIZE:
            for entry in await _resolve_chunk(agent, category, pending):
                yield entry["id"], entry["name"]
            pending = []

    if pending:
        for entry in await _resolve_chunk(agent, category, pending):
            yield entry["id"], entry["name"]
