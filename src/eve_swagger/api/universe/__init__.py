"""Universe resources: regions, constellations and stations."""

from .constellations import (
    Constellation,
    Constellations,
    IteratedConstellations,
    MappedConstellations,
    make_constellations,
)
from .regions import IteratedRegions, MappedRegions, Region, RegionMarket, Regions, make_regions
from .stations import Station, Stations, make_stations

__all__ = [
    "Constellation",
    "Constellations",
    "IteratedConstellations",
    "MappedConstellations",
    "make_constellations",
    "IteratedRegions",
    "MappedRegions",
    "Region",
    "RegionMarket",
    "Regions",
    "make_regions",
    "Station",
    "Stations",
    "make_stations",
]
