"""
Market API.

Defines the market interfaces shared by regions and structures, and the
game-wide market endpoints (average prices and market groups).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Iterable
from typing import Any, Optional, Protocol

from ..core.agent import ESIAgent
from ..core.client import ESIError, JSONValue
from ..internal.resource import ResourceStreamer, make_array_streamer
from ..models.esi import Order


class Market(Protocol):
    """Order book access for a market location (region or structure)."""

    def orders(self) -> AsyncIterator[Order]: ...

    def buy_orders_for(self, type_id: int) -> Awaitable[list[Order]]: ...

    def sell_orders_for(self, type_id: int) -> Awaitable[list[Order]]: ...

    def orders_for(self, type_id: int) -> Awaitable[list[Order]]: ...


class MarketHistory(Protocol):
    """Daily market statistics, only available for regions."""

    def types(self) -> AsyncIterator[int]: ...

    def history(self, type_id: int) -> Awaitable[list[dict[str, Any]]]: ...


def expect_list(result: JSONValue, operation_id: str) -> list[Any]:
    """Narrow a response to a list; a 304/204 empty body becomes []."""
    if result is None:
        return []
    if not isinstance(result, list):
        raise ESIError(f"Expected list response from {operation_id}, got {type(result).__name__}")
    return result


def expect_dict(result: JSONValue, operation_id: str) -> dict[str, Any]:
    if not isinstance(result, dict):
        raise ESIError(f"Expected dict response from {operation_id}, got {type(result).__name__}")
    return result


def filter_orders(
    orders: Iterable[Order],
    type_id: Optional[int] = None,
    is_buy_order: Optional[bool] = None,
) -> list[Order]:
    """Filter orders by type and side; None means no constraint."""
    return [
        order
        for order in orders
        if (type_id is None or order.get("type_id") == type_id)
        and (is_buy_order is None or bool(order.get("is_buy_order")) == is_buy_order)
    ]


class MarketAPI:
    """
    Game-wide market endpoints.

    Usage:
        async for price in api.market.prices():
            print(price["type_id"], price.get("average_price"))
    """

    def __init__(self, agent: ESIAgent) -> None:
        self.agent = agent
        self._prices: Optional[ResourceStreamer[dict[str, Any]]] = None
        self._groups: Optional[ResourceStreamer[int]] = None

    async def _load(self, operation_id: str) -> list[Any]:
        return expect_list(await self.agent.request(operation_id), operation_id)

    def prices(self) -> AsyncIterator[dict[str, Any]]:
        """Stream average and adjusted prices for every traded type."""
        if self._prices is None:
            self._prices = make_array_streamer(lambda: self._load("get_markets_prices"))
        return self._prices()

    def groups(self) -> AsyncIterator[int]:
        """Stream every market group id."""
        if self._groups is None:
            self._groups = make_array_streamer(lambda: self._load("get_markets_groups"))
        return self._groups()

    async def group(self, market_group_id: int) -> dict[str, Any]:
        """Details of one market group."""
        operation_id = "get_markets_groups_market_group_id"
        result = await self.agent.request(
            operation_id, {"path": {"market_group_id": market_group_id}}
        )
        return expect_dict(result, operation_id)
