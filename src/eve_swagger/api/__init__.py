"""Public resource wrappers."""

from .character import Character, Characters
from .market import MarketAPI
from .universe import Constellations, Regions, Stations

__all__ = ["Character", "Characters", "Constellations", "MarketAPI", "Regions", "Stations"]
