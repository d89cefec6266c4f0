"""Typed shapes for ESI requests and responses."""

from .esi import (
    ConstellationDetails,
    Contact,
    ContactLabel,
    ContactStanding,
    NameCategory,
    NameEntry,
    Order,
    OrderType,
    RegionDetails,
    SearchCategory,
    StationInfo,
    VulnerabilityWindow,
)

__all__ = [
    "ConstellationDetails",
    "Contact",
    "ContactLabel",
    "ContactStanding",
    "NameCategory",
    "NameEntry",
    "Order",
    "OrderType",
    "RegionDetails",
    "SearchCategory",
    "StationInfo",
    "VulnerabilityWindow",
]
