"""
eve-swagger Request Agent

The agent is the single collaborator every resource wrapper talks to. It
maps an ESI operation id (e.g. "get_universe_regions_region_id") onto an
HTTP method and path, fills in path parameters and forwards the request to
the ESIClient transport.

Usage:
    agent = ESIAgent()
    region = await agent.request(
        "get_universe_regions_region_id", {"path": {"region_id": 10000002}}
    )

    char_agent = agent.for_character(12345, "access_token")
    labels = await char_agent.request(
        "get_characters_character_id_contacts_labels",
        {"path": {"character_id": 12345}},
    )
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Any, Literal, Optional, TypedDict

from .client import ESIClient, ESIError, ESIResponse, JSONValue
from .logging import get_logger

logger = get_logger(__name__)

HTTPMethod = Literal["GET", "POST", "PUT", "DELETE"]


class RequestParams(TypedDict, total=False):
    """Parameters for one agent request, split the way ESI declares them."""

    path: dict[str, Any]
    query: dict[str, Any]
    body: Any


@dataclass(frozen=True)
class Route:
    """An ESI operation: its id, HTTP method, path template and auth need."""

    operation_id: str
    method: HTTPMethod
    path: str
    auth: bool = False

    @property
    def path_params(self) -> tuple[str, ...]:
        return tuple(
            name for _, name, _, _ in string.Formatter().parse(self.path) if name is not None
        )

    def format_path(self, path_params: Optional[dict[str, Any]] = None) -> str:
        """
        Substitute path parameters into the template.

        Raises:
            ESIError: If a parameter the template needs is missing
        """
        values = path_params or {}
        missing = [name for name in self.path_params if name not in values]
        if missing:
            raise ESIError(
                f"Missing path parameter(s) for {self.operation_id}: {', '.join(missing)}"
            )
        return self.path.format(**{name: values[name] for name in self.path_params})


def _route(operation_id: str, method: HTTPMethod, path: str, auth: bool = False) -> Route:
    return Route(operation_id=operation_id, method=method, path=path, auth=auth)


ROUTES: dict[str, Route] = {
    route.operation_id: route
    for route in (
        # Universe
        _route("get_universe_regions", "GET", "/universe/regions/"),
        _route("get_universe_regions_region_id", "GET", "/universe/regions/{region_id}/"),
        _route("get_universe_constellations", "GET", "/universe/constellations/"),
        _route(
            "get_universe_constellations_constellation_id",
            "GET",
            "/universe/constellations/{constellation_id}/",
        ),
        _route("get_universe_stations_station_id", "GET", "/universe/stations/{station_id}/"),
        _route(
            "get_universe_structures_structure_id",
            "GET",
            "/universe/structures/{structure_id}/",
            auth=True,
        ),
        _route("post_universe_names", "POST", "/universe/names/"),
        # Search
        _route("get_search", "GET", "/search/"),
        _route(
            "get_characters_character_id_search",
            "GET",
            "/characters/{character_id}/search/",
            auth=True,
        ),
        # Market
        _route("get_markets_prices", "GET", "/markets/prices/"),
        _route("get_markets_groups", "GET", "/markets/groups/"),
        _route(
            "get_markets_groups_market_group_id", "GET", "/markets/groups/{market_group_id}/"
        ),
        _route("get_markets_region_id_orders", "GET", "/markets/{region_id}/orders/"),
        _route("get_markets_region_id_types", "GET", "/markets/{region_id}/types/"),
        _route("get_markets_region_id_history", "GET", "/markets/{region_id}/history/"),
        _route(
            "get_markets_structures_structure_id",
            "GET",
            "/markets/structures/{structure_id}/",
            auth=True,
        ),
        # Corporation
        _route(
            "put_corporations_corporation_id_structures_structure_id",
            "PUT",
            "/corporations/{corporation_id}/structures/{structure_id}/",
            auth=True,
        ),
        # Character
        _route("get_characters_character_id", "GET", "/characters/{character_id}/"),
        _route(
            "get_characters_character_id_contacts",
            "GET",
            "/characters/{character_id}/contacts/",
            auth=True,
        ),
        _route(
            "post_characters_character_id_contacts",
            "POST",
            "/characters/{character_id}/contacts/",
            auth=True,
        ),
        _route(
            "put_characters_character_id_contacts",
            "PUT",
            "/characters/{character_id}/contacts/",
            auth=True,
        ),
        _route(
            "delete_characters_character_id_contacts",
            "DELETE",
            "/characters/{character_id}/contacts/",
            auth=True,
        ),
        _route(
            "get_characters_character_id_contacts_labels",
            "GET",
            "/characters/{character_id}/contacts/labels/",
            auth=True,
        ),
    )
}


def get_route(operation_id: str) -> Route:
    """
    Look up a route by ESI operation id.

    Raises:
        ESIError: If the operation is not known
    """
    route = ROUTES.get(operation_id)
    if route is None:
        raise ESIError(f"Unknown ESI route: {operation_id}")
    return route


class ESIAgent:
    """
    Dispatches ESI operations over an ESIClient.

    The agent owns the client it creates; a client passed in by the caller
    is left open on aclose().
    """

    def __init__(self, client: Optional[ESIClient] = None, token: Optional[str] = None) -> None:
        self._owns_client = client is None
        self.client: ESIClient = client if client is not None else ESIClient()
        self.token: Optional[str] = token

    async def request_page(
        self,
        operation_id: str,
        params: Optional[RequestParams] = None,
    ) -> ESIResponse:
        """
        Perform an ESI operation and return the full response.

        Used by paginated streams that need the X-Pages header.

        Raises:
            ESIError: Unknown route, missing path parameter, missing token
                for an authenticated route, or any transport failure
        """
        route = get_route(operation_id)
        params = params or {}
        endpoint = route.format_path(params.get("path"))

        token: Optional[str] = None
        if route.auth:
            if not self.token:
                raise ESIError(
                    f"Authentication required for {operation_id} but no token provided"
                )
            token = self.token

        logger.debug(
            "%s %s (%s) query=%s", route.method, endpoint, operation_id, params.get("query")
        )
        return await self.client.request_with_headers(
            route.method,
            endpoint,
            params=params.get("query"),
            body=params.get("body"),
            token=token,
        )

    async def request(
        self,
        operation_id: str,
        params: Optional[RequestParams] = None,
    ) -> JSONValue:
        """Perform an ESI operation and return the parsed JSON body."""
        response = await self.request_page(operation_id, params)
        return response.data

    def for_character(self, character_id: int, token: Optional[str]) -> SSOAgent:
        """Return an agent bound to a character, sharing this agent's transport."""
        return SSOAgent(self.client, character_id, token)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


class SSOAgent(ESIAgent):
    """An agent acting on behalf of one character with an SSO access token."""

    def __init__(self, client: ESIClient, character_id: int, token: Optional[str]) -> None:
        super().__init__(client, token)
        self._owns_client = False
        self.character_id: int = character_id

    def character_path(self, **extra: Any) -> dict[str, Any]:
        """Path parameters with this agent's character id filled in."""
        return {"character_id": self.character_id, **extra}
