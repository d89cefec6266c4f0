"""
eve-swagger - EVE Online ESI API wrapper

Resource-oriented async access to EVE Online's ESI API. Each resource kind
is a callable that can target one id, a set of ids, a search query, or
every id in the game, through the same method names.

Usage:
    from eve_swagger import make_api

    async with make_api() as esi:
        forge = await esi.regions(10000002).details()
        names = await esi.regions([10000002, 10000043]).names()
        async for region_id, details in esi.regions().details():
            ...

        me = esi.characters(12345, "access_token")
        contacts = await me.contacts()

Package structure:
    eve_swagger/
    ├── core/        # Config, logging, retry, httpx transport, agent
    ├── internal/    # Streaming, resource shapes, search, names
    ├── api/         # Characters, universe, market wrappers
    └── models/      # Request/response shapes
"""

from __future__ import annotations

from typing import Any, Optional

from .api.character import Characters, make_characters
from .api.market import MarketAPI
from .api.universe import (
    Constellations,
    Regions,
    Stations,
    make_constellations,
    make_regions,
    make_stations,
)
from .core import ESIAgent, ESIClient, ESIError

__version__ = "1.0.0"


class API:
    """Root of the resource tree, bound to one agent."""

    def __init__(self, agent: ESIAgent) -> None:
        self.agent = agent
        self.characters: Characters = make_characters(agent)
        self.regions: Regions = make_regions(agent)
        self.constellations: Constellations = make_constellations(agent)
        self.stations: Stations = make_stations(agent)
        self.market: MarketAPI = MarketAPI(agent)

    async def aclose(self) -> None:
        await self.agent.aclose()

    async def __aenter__(self) -> API:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def make_api(
    client: Optional[ESIClient] = None,
    token: Optional[str] = None,
    agent: Optional[ESIAgent] = None,
) -> API:
    """
    Create an API instance.

    Args:
        client: Transport to use; a new ESIClient is created if omitted
        token: Default SSO token for character resources
        agent: Fully custom agent (overrides client and token)
    """
    return API(agent if agent is not None else ESIAgent(client, token))


__all__ = [
    "__version__",
    "API",
    "ESIAgent",
    "ESIClient",
    "ESIError",
    "make_api",
]
