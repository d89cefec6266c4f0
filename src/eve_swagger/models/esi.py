"""
ESI request and response shapes.

Response bodies are passed through as parsed JSON; the TypedDicts below
document the fields the resource wrappers read. Request payloads that the
library builds itself are validated with pydantic before they are sent.
"""

from __future__ import annotations

from typing import Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Type Aliases
# =============================================================================

SearchCategory = Literal[
    "agent",
    "alliance",
    "character",
    "constellation",
    "corporation",
    "faction",
    "inventory_type",
    "region",
    "solar_system",
    "station",
    "structure",
]
"""Categories accepted by the ESI search endpoints."""

NameCategory = Literal[
    "alliance",
    "character",
    "constellation",
    "corporation",
    "inventory_type",
    "region",
    "solar_system",
    "station",
    "faction",
]
"""Categories returned by post_universe_names."""

OrderType = Literal["buy", "sell", "all"]
"""Order type filter for region market queries."""

# =============================================================================
# Response Shapes
# =============================================================================


class RegionDetails(TypedDict, total=False):
    region_id: int
    name: str
    description: str
    constellations: list[int]


class ConstellationDetails(TypedDict, total=False):
    constellation_id: int
    name: str
    region_id: int
    systems: list[int]
    position: dict[str, float]


class StationInfo(TypedDict, total=False):
    station_id: int
    name: str
    system_id: int
    type_id: int
    owner: int
    services: list[str]


class NameEntry(TypedDict):
    id: int
    name: str
    category: NameCategory


class Order(TypedDict, total=False):
    """A market order, as returned by both region and structure markets."""

    order_id: int
    type_id: int
    location_id: int
    is_buy_order: bool
    price: float
    volume_remain: int
    volume_total: int
    issued: str
    duration: int
    range: str


class Contact(TypedDict, total=False):
    contact_id: int
    contact_type: str
    standing: float
    is_watched: bool
    label_ids: list[int]


class ContactLabel(TypedDict):
    label_id: int
    label_name: str


# =============================================================================
# Request Payloads
# =============================================================================


class VulnerabilityWindow(BaseModel):
    """One hour of a structure's weekly vulnerability schedule."""

    model_config = ConfigDict(frozen=True)

    day: int = Field(ge=0, le=6, description="Day of week, 0 = Monday")
    hour: int = Field(ge=0, le=23, description="Hour of day (EVE time)")


class ContactStanding(BaseModel):
    """Standing and label applied when adding or editing contacts."""

    model_config = ConfigDict(frozen=True)

    standing: float = Field(ge=-10.0, le=10.0)
    label_id: int | None = None
    watched: bool = False

    def to_query(self) -> dict[str, object]:
        query: dict[str, object] = {"standing": self.standing, "watched": self.watched}
        if self.label_id is not None:
            query["label_ids"] = [self.label_id]
        return query
