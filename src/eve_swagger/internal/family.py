"""
Dispatch from a call signature to the single, mapped or iterated shape.

    regions()                  -> IteratedRegions (every region)
    regions(10000002)          -> Region
    regions([1, 2, 2])         -> MappedRegions over {1, 2}
    regions("Forge")           -> MappedRegions over the search results
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar, Union

from ..core.agent import ESIAgent
from ..models.esi import SearchCategory
from .resource import IDSource
from .search import Search, make_default_search

S = TypeVar("S")
M = TypeVar("M")
I = TypeVar("I")  # noqa: E741


class ResourceFamily(ABC, Generic[S, M, I]):
    """
    Callable entry point for one kind of resource.

    Subclasses name the search category and build each of the three shapes.
    """

    category: SearchCategory

    def __init__(self, agent: ESIAgent) -> None:
        self.agent = agent
        self.search: Search = make_default_search(agent, self.category)

    @abstractmethod
    def single(self, id: int) -> S: ...

    @abstractmethod
    def mapped(self, ids: IDSource) -> M: ...

    @abstractmethod
    def iterated(self) -> I: ...

    def __call__(
        self,
        ids: Optional[Union[int, str, IDSource]] = None,
        strict: bool = False,
    ) -> Union[S, M, I]:
        """
        Args:
            ids: Nothing for every id, one id, a list/set of ids, or a
                search query
            strict: Whether a search query must match exactly

        Raises:
            TypeError: For any other argument type
        """
        if ids is None:
            return self.iterated()
        if isinstance(ids, bool):
            raise TypeError(f"Expected an id, ids or a query, got {ids!r}")
        if isinstance(ids, int):
            return self.single(ids)
        if isinstance(ids, str):
            query = ids

            async def search_ids() -> list[int]:
                return await self.search(query, strict)

            return self.mapped(search_ids)
        if isinstance(ids, (list, tuple, set, frozenset)) or callable(ids):
            return self.mapped(ids)
        raise TypeError(f"Expected an id, ids or a query, got {type(ids).__name__}")
