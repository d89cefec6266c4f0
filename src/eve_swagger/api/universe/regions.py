"""
Region API.

Wraps the universe region endpoints and the per-region market endpoints.
Every variant exposes the same keys:

    details   region details (name, description, constellation ids)
    names     region name

A single Region returns the value, MappedRegions a dict keyed by region
id, and IteratedRegions an async stream of (region id, value) pairs.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Optional

from ...core.agent import ESIAgent
from ...core.constants import MARKET_ORDERS_PAGE_SIZE, MARKET_TYPES_PAGE_SIZE
from ...internal.family import ResourceFamily
from ...internal.names import get_iterated_names, get_names
from ...internal.resource import (
    IDSource,
    PageResult,
    ResourceStreamer,
    SimpleIteratedResource,
    SimpleMappedResource,
    SimpleResource,
    make_array_streamer,
    make_page_based_streamer,
)
from ...models.esi import Order, RegionDetails
from ..market import expect_dict, expect_list

if TYPE_CHECKING:
    from .constellations import MappedConstellations


async def get_details(agent: ESIAgent, region_id: int) -> RegionDetails:
    operation_id = "get_universe_regions_region_id"
    result = await agent.request(operation_id, {"path": {"region_id": region_id}})
    return expect_dict(result, operation_id)  # type: ignore[return-value]


class Region(SimpleResource):
    """
    A single in-game region.

    Usage:
        forge = api.regions(10000002)
        details = await forge.details()
        async for order in forge.market.orders():
            ...
    """

    def __init__(self, agent: ESIAgent, id: int) -> None:
        super().__init__(id)
        self.agent = agent
        self._constellations: Optional[MappedConstellations] = None
        self._market: Optional[RegionMarket] = None

    @property
    def constellations(self) -> MappedConstellations:
        """The constellations listed in this region's details."""
        if self._constellations is None:
            from .constellations import MappedConstellations

            async def constellation_ids() -> list[int]:
                return list((await self.details()).get("constellations", []))

            self._constellations = MappedConstellations(self.agent, constellation_ids)
        return self._constellations

    @property
    def market(self) -> RegionMarket:
        if self._market is None:
            self._market = RegionMarket(self.agent, self.id_)
        return self._market

    async def details(self) -> RegionDetails:
        return await get_details(self.agent, self.id_)

    async def names(self) -> str:
        """The region name, read from its details."""
        return (await self.details())["name"]


class MappedRegions(SimpleMappedResource):
    """A known set of regions, given as ids or resolved lazily."""

    def __init__(self, agent: ESIAgent, ids: IDSource) -> None:
        super().__init__(ids)
        self.agent = agent

    async def details(self) -> dict[int, RegionDetails]:
        return await self.get_resource(lambda region_id: get_details(self.agent, region_id))

    async def names(self) -> dict[int, str]:
        return await get_names(self.agent, "region", await self.array_ids())


class IteratedRegions(SimpleIteratedResource[int]):
    """Every region in the game, streamed from get_universe_regions."""

    def __init__(self, agent: ESIAgent) -> None:
        async def load_ids() -> list[int]:
            return expect_list(await agent.request("get_universe_regions"), "get_universe_regions")

        super().__init__(make_array_streamer(load_ids), lambda region_id: region_id)
        self.agent = agent

    def details(self) -> AsyncIterator[tuple[int, RegionDetails]]:
        return self.get_resource(lambda region_id: get_details(self.agent, region_id))

    def names(self) -> AsyncIterator[tuple[int, str]]:
        return get_iterated_names(self.agent, "region", self.ids())


class Regions(ResourceFamily[Region, MappedRegions, IteratedRegions]):
    """
    Functional entry point for regions.

        regions()               every region
        regions(id)             one region
        regions([ids])          the given regions, duplicates removed
        regions("query", strict=False)
                                regions matching a search
    """

    category = "region"

    def single(self, id: int) -> Region:
        return Region(self.agent, id)

    def mapped(self, ids: IDSource) -> MappedRegions:
        return MappedRegions(self.agent, ids)

    def iterated(self) -> IteratedRegions:
        return IteratedRegions(self.agent)


def make_regions(agent: ESIAgent) -> Regions:
    return Regions(agent)


class RegionMarket:
    """
    Market endpoints for one region.

    orders() and types() are lazy streams over every page; the *_for
    methods let ESI filter by type and return a single list.
    """

    def __init__(self, agent: ESIAgent, region_id: int) -> None:
        self.agent = agent
        self.region_id = region_id
        self._orders: Optional[ResourceStreamer[Order]] = None
        self._types: Optional[ResourceStreamer[int]] = None

    async def _load_page(self, operation_id: str, query: dict[str, Any]) -> PageResult[Any]:
        response = await self.agent.request_page(
            operation_id, {"path": {"region_id": self.region_id}, "query": query}
        )
        return PageResult(expect_list(response.data, operation_id), response.x_pages)

    async def _orders_with(self, type_id: int, order_type: str) -> list[Order]:
        operation_id = "get_markets_region_id_orders"
        result = await self.agent.request(
            operation_id,
            {
                "path": {"region_id": self.region_id},
                "query": {"type_id": type_id, "order_type": order_type},
            },
        )
        return expect_list(result, operation_id)

    def orders(self) -> AsyncIterator[Order]:
        """Stream every buy and sell order in the region."""
        if self._orders is None:
            self._orders = make_page_based_streamer(
                lambda page: self._load_page(
                    "get_markets_region_id_orders", {"page": page, "order_type": "all"}
                ),
                MARKET_ORDERS_PAGE_SIZE,
            )
        return self._orders()

    async def buy_orders_for(self, type_id: int) -> list[Order]:
        return await self._orders_with(type_id, "buy")

    async def sell_orders_for(self, type_id: int) -> list[Order]:
        return await self._orders_with(type_id, "sell")

    async def orders_for(self, type_id: int) -> list[Order]:
        return await self._orders_with(type_id, "all")

    def types(self) -> AsyncIterator[int]:
        """Stream the ids of every type with active orders in the region."""
        if self._types is None:
            self._types = make_page_based_streamer(
                lambda page: self._load_page("get_markets_region_id_types", {"page": page}),
                MARKET_TYPES_PAGE_SIZE,
            )
        return self._types()

    async def history(self, type_id: int) -> list[dict[str, Any]]:
        """Daily price history for one type in the region."""
        operation_id = "get_markets_region_id_history"
        result = await self.agent.request(
            operation_id, {"path": {"region_id": self.region_id}, "query": {"type_id": type_id}}
        )
        return expect_list(result, operation_id)
