"""
Station API.

Stations only support the single shape; names for many stations are
resolved in one call through ``stations.names(ids)``.
"""

from __future__ import annotations

from collections.abc import Iterable

from ...core.agent import ESIAgent
from ...internal.names import get_names
from ...internal.resource import SimpleResource
from ...internal.search import Search, make_default_search
from ...models.esi import StationInfo
from ..market import expect_dict


class Station(SimpleResource):
    """One NPC station."""

    def __init__(self, agent: ESIAgent, id: int) -> None:
        super().__init__(id)
        self.agent = agent

    async def info(self) -> StationInfo:
        """Public information about the station."""
        operation_id = "get_universe_stations_station_id"
        result = await self.agent.request(operation_id, {"path": {"station_id": self.id_}})
        return expect_dict(result, operation_id)  # type: ignore[return-value]


class Stations:
    """
    Functional entry point for stations.

    Usage:
        info = await api.stations(60003760).info()
        ids = await api.stations.search("Jita IV")
        names = await api.stations.names(ids)
    """

    def __init__(self, agent: ESIAgent) -> None:
        self.agent = agent
        self.search: Search = make_default_search(agent, "station")

    def __call__(self, id: int) -> Station:
        if isinstance(id, bool) or not isinstance(id, int):
            raise TypeError(f"Expected a station id, got {type(id).__name__}")
        return Station(self.agent, id)

    async def names(self, ids: Iterable[int]) -> dict[int, str]:
        """Resolve station ids to names."""
        return await get_names(self.agent, "station", ids)


def make_stations(agent: ESIAgent) -> Stations:
    return Stations(agent)
