"""
Constellation API.

Same shape as the region API: Constellation, MappedConstellations and
IteratedConstellations share the keys ``details`` and ``names``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from ...core.agent import ESIAgent
from ...internal.family import ResourceFamily
from ...internal.names import get_iterated_names, get_names
from ...internal.resource import (
    IDSource,
    SimpleIteratedResource,
    SimpleMappedResource,
    SimpleResource,
    make_array_streamer,
)
from ...models.esi import ConstellationDetails
from ..market import expect_dict, expect_list

if TYPE_CHECKING:
    from .regions import Region


async def get_details(agent: ESIAgent, constellation_id: int) -> ConstellationDetails:
    operation_id = "get_universe_constellations_constellation_id"
    result = await agent.request(operation_id, {"path": {"constellation_id": constellation_id}})
    return expect_dict(result, operation_id)  # type: ignore[return-value]


class Constellation(SimpleResource):
    def __init__(self, agent: ESIAgent, id: int) -> None:
        super().__init__(id)
        self.agent = agent

    async def details(self) -> ConstellationDetails:
        return await get_details(self.agent, self.id_)

    async def names(self) -> str:
        return (await self.details())["name"]

    async def region(self) -> Region:
        """The region containing this constellation."""
        from .regions import Region

        return Region(self.agent, (await self.details())["region_id"])


class MappedConstellations(SimpleMappedResource):
    def __init__(self, agent: ESIAgent, ids: IDSource) -> None:
        super().__init__(ids)
        self.agent = agent

    async def details(self) -> dict[int, ConstellationDetails]:
        return await self.get_resource(lambda cid: get_details(self.agent, cid))

    async def names(self) -> dict[int, str]:
        return await get_names(self.agent, "constellation", await self.array_ids())


class IteratedConstellations(SimpleIteratedResource[int]):
    def __init__(self, agent: ESIAgent) -> None:
        async def load_ids() -> list[int]:
            operation_id = "get_universe_constellations"
            return expect_list(await agent.request(operation_id), operation_id)

        super().__init__(make_array_streamer(load_ids), lambda cid: cid)
        self.agent = agent

    def details(self) -> AsyncIterator[tuple[int, ConstellationDetails]]:
        return self.get_resource(lambda cid: get_details(self.agent, cid))

    def names(self) -> AsyncIterator[tuple[int, str]]:
        return get_iterated_names(self.agent, "constellation", self.ids())


class Constellations(
    ResourceFamily[Constellation, MappedConstellations, IteratedConstellations]
):
    """Functional entry point for constellations; see Regions for call forms."""

    category = "constellation"

    def single(self, id: int) -> Constellation:
        return Constellation(self.agent, id)

    def mapped(self, ids: IDSource) -> MappedConstellations:
        return MappedConstellations(self.agent, ids)

    def iterated(self) -> IteratedConstellations:
        return IteratedConstellations(self.agent)


def make_constellations(agent: ESIAgent) -> Constellations:
    return Constellations(agent)
