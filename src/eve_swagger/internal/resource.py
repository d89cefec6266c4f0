"""
Resource streaming and the single / mapped / iterated resource shapes.

Every resource family in the API (regions, constellations, ...) is exposed
in three shapes that share one set of method names:

- single:   ``Region(agent, id).details()``  -> one value
- mapped:   ``MappedRegions(agent, ids).details()``  -> ``{id: value}``
- iterated: ``IteratedRegions(agent).details()``  -> async ``(id, value)`` pairs

The helpers here implement the id bookkeeping and fan-out for those shapes,
plus the streamers that turn list and paged ESI endpoints into lazy async
sequences.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from ..core.config import get_settings
from ..core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
V = TypeVar("V")
K = TypeVar("K", bound=Hashable)

ResourceStreamer = Callable[[], AsyncIterator[T]]
"""A zero-argument callable; each call starts a fresh async stream."""

IDSetProvider = Callable[[], Awaitable[Iterable[int]]]
"""A coroutine function that resolves the ids of a mapped resource."""

IDSource = Union[list[int], tuple[int, ...], set[int], frozenset[int], IDSetProvider]


# =============================================================================
# Streamers
# =============================================================================


@dataclass
class PageResult(Generic[T]):
    """One page of a paged endpoint."""

    result: list[T]
    max_pages: Optional[int] = None
    """Total page count when the endpoint reports it (X-Pages)."""


def make_array_streamer(loader: Callable[[], Awaitable[list[T]]]) -> ResourceStreamer[T]:
    """
    Stream the elements of a list-returning endpoint.

    The loader runs once per stream, when the stream is first advanced.
    """

    async def stream() -> AsyncIterator[T]:
        for item in await loader():
            yield item

    return stream


def make_page_based_streamer(
    page_loader: Callable[[int], Awaitable[PageResult[T]]],
    max_page_size: Optional[int] = None,
) -> ResourceStreamer[T]:
    """
    Stream every row of a paged endpoint, fetching pages lazily.

    Pages are requested one at a time starting at 1. The stream ends after
    the last page the endpoint reports or after an empty page. Only when
    no page count is reported does a page holding fewer than
    ``max_page_size`` rows end the stream.

    Args:
        page_loader: Coroutine function loading one page by number
        max_page_size: Rows in a full page, if the endpoint has a fixed size

    Returns:
        A streamer yielding rows in page order
    """

    async def stream() -> AsyncIterator[T]:
        page = 1
        max_pages: Optional[int] = None

        while max_pages is None or page <= max_pages:
            loaded = await page_loader(page)
            if loaded.max_pages is not None:
                max_pages = loaded.max_pages

            logger.debug("Loaded page %d/%s (%d rows)", page, max_pages or "?", len(loaded.result))

            for item in loaded.result:
                yield item

            if not loaded.result:
                break
            # A reported page count overrides the short-page guess
            if (
                max_pages is None
                and max_page_size is not None
                and len(loaded.result) < max_page_size
            ):
                break
            page += 1

    return stream


async def fetch_all(stream: AsyncIterator[T]) -> list[T]:
    """Collect an async stream into a list."""
    return [item async for item in stream]


async def gather_mapped(
    keys: Iterable[K],
    loader: Callable[[K], Awaitable[V]],
    max_concurrency: Optional[int] = None,
) -> dict[K, V]:
    """
    Run ``loader`` for every key concurrently and map the results by key.

    At most ``max_concurrency`` loads are in flight at once. If any load
    fails the exception propagates and the remaining loads are cancelled.
    """
    limit = max_concurrency or get_settings().max_concurrency
    semaphore = asyncio.Semaphore(limit)
    key_list = list(keys)

    async def load(key: K) -> V:
        async with semaphore:
            return await loader(key)

    tasks = [asyncio.ensure_future(load(key)) for key in key_list]
    try:
        values = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return dict(zip(key_list, values))


def dedupe(ids: Iterable[int]) -> list[int]:
    """Drop duplicate ids, keeping first-seen order, without touching the input."""
    return list(dict.fromkeys(ids))


# =============================================================================
# Resource Shapes
# =============================================================================


class SimpleResource:
    """Base for a resource wrapper bound to exactly one id."""

    def __init__(self, id: int) -> None:
        self.id_ = id

    async def id(self) -> int:
        return self.id_

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id_})"


class SimpleMappedResource:
    """
    Base for a resource wrapper bound to a known set of ids.

    The ids may be given directly or produced lazily by an IDSetProvider
    (for example the results of a search, or the constellation list of a
    region). A provider is called again on every access.
    """

    def __init__(self, ids: IDSource) -> None:
        if callable(ids):
            self._provider: Optional[IDSetProvider] = ids
            self._ids: Optional[list[int]] = None
        else:
            self._provider = None
            self._ids = dedupe(ids)

    async def array_ids(self) -> list[int]:
        """The ids as a de-duplicated list, in first-seen order."""
        if self._ids is not None:
            return list(self._ids)
        assert self._provider is not None
        return dedupe(await self._provider())

    async def ids(self) -> set[int]:
        return set(await self.array_ids())

    async def get_resource(
        self,
        loader: Callable[[int], Awaitable[V]],
        max_concurrency: Optional[int] = None,
    ) -> dict[int, V]:
        """Load a value for every id concurrently, keyed by id."""
        return await gather_mapped(await self.array_ids(), loader, max_concurrency)

    def __repr__(self) -> str:
        ids = self._ids if self._ids is not None else "<lazy>"
        return f"{type(self).__name__}({ids})"


class SimpleIteratedResource(Generic[T]):
    """
    Base for a resource wrapper over every id of a kind.

    Wraps a streamer of items together with a function that extracts the
    id from each item. For id-list endpoints the items are the ids
    themselves and ``id_getter`` is the identity.
    """

    def __init__(self, streamer: ResourceStreamer[T], id_getter: Callable[[T], int]) -> None:
        self._streamer = streamer
        self._id_getter = id_getter

    async def ids(self) -> AsyncIterator[int]:
        """Stream the id of every item."""
        async for item in self._streamer():
            yield self._id_getter(item)

    async def get_resource(
        self,
        loader: Optional[Callable[[int], Awaitable[V]]] = None,
    ) -> AsyncIterator[tuple[int, Union[T, V]]]:
        """
        Stream ``(id, value)`` pairs.

        Without a loader the streamed item itself is the value. With one,
        each value is loaded one at a time in stream order.
        """
        async for item in self._streamer():
            item_id = self._id_getter(item)
            if loader is None:
                yield item_id, item
            else:
                yield item_id, await loader(item_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<all>)"
