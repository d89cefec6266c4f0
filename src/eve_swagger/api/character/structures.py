"""
Character structure API.

Structures are player-owned citadels; every endpoint needs the SSO token of
a character with docking or management access.

Unlike regions, ESI cannot filter structure markets by type, so the
``*_for`` methods load every page of orders and filter in-library.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional, Union

from ...core.agent import SSOAgent
from ...internal.resource import PageResult, SimpleResource, fetch_all, make_page_based_streamer
from ...internal.search import Search, make_character_search
from ...models.esi import Order, VulnerabilityWindow
from ..market import expect_dict, expect_list, filter_orders

ScheduleEntry = Union[VulnerabilityWindow, dict[str, int]]


class Structure(SimpleResource):
    """One structure accessible to the character."""

    def __init__(self, agent: SSOAgent, id: int) -> None:
        super().__init__(id)
        self.agent = agent

    async def info(self) -> dict[str, Any]:
        operation_id = "get_universe_structures_structure_id"
        result = await self.agent.request(operation_id, {"path": {"structure_id": self.id_}})
        return expect_dict(result, operation_id)

    async def vulnerability(self, schedule: Iterable[ScheduleEntry]) -> None:
        """
        Replace the structure's weekly vulnerability schedule.

        The character's corporation is looked up first, since ESI addresses
        the schedule through the owning corporation.

        Args:
            schedule: Day/hour windows, as VulnerabilityWindow or plain dicts

        Raises:
            pydantic.ValidationError: If a window is out of range
        """
        windows = [
            entry if isinstance(entry, VulnerabilityWindow) else VulnerabilityWindow(**entry)
            for entry in schedule
        ]
        operation_id = "get_characters_character_id"
        character = expect_dict(
            await self.agent.request(operation_id, {"path": self.agent.character_path()}),
            operation_id,
        )
        await self.agent.request(
            "put_corporations_corporation_id_structures_structure_id",
            {
                "path": {
                    "corporation_id": character["corporation_id"],
                    "structure_id": self.id_,
                },
                "body": [window.model_dump() for window in windows],
            },
        )

    async def _load_page(self, page: int) -> PageResult[Order]:
        operation_id = "get_markets_structures_structure_id"
        response = await self.agent.request_page(
            operation_id, {"path": {"structure_id": self.id_}, "query": {"page": page}}
        )
        return PageResult(expect_list(response.data, operation_id), response.x_pages)

    async def orders(self, page: Optional[int] = None) -> list[Order]:
        """
        Market orders in the structure.

        Args:
            page: A single page to load; when omitted every page is loaded
                and concatenated
        """
        if page is not None:
            return (await self._load_page(page)).result
        return await fetch_all(make_page_based_streamer(self._load_page)())

    async def buy_orders_for(self, type_id: int) -> list[Order]:
        return filter_orders(await self.orders(), type_id=type_id, is_buy_order=True)

    async def sell_orders_for(self, type_id: int) -> list[Order]:
        return filter_orders(await self.orders(), type_id=type_id, is_buy_order=False)

    async def orders_for(self, type_id: int) -> list[Order]:
        return filter_orders(await self.orders(), type_id=type_id)


class Structures:
    """Functional entry point for structures visible to a character."""

    def __init__(self, agent: SSOAgent) -> None:
        self.agent = agent
        self.search: Search = make_character_search(agent, "structure")

    def __call__(self, id: int) -> Structure:
        return Structure(self.agent, id)
