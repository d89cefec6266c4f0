"""
Tests for the constellation and station APIs.
"""

from __future__ import annotations

import pytest

from eve_swagger.api.universe.constellations import (
    Constellation,
    IteratedConstellations,
    MappedConstellations,
    make_constellations,
)
from eve_swagger.api.universe.regions import Region
from eve_swagger.api.universe.stations import Station, make_stations
from eve_swagger.internal.resource import fetch_all


def constellation_details(params):
    cid = params["path"]["constellation_id"]
    return {"constellation_id": cid, "name": f"Constellation {cid}", "region_id": 10000002}


@pytest.fixture
def constellations(fake_agent):
    fake_agent.respond("get_universe_constellations_constellation_id", constellation_details)
    return make_constellations(fake_agent)


class TestConstellationsDispatch:
    def test_shapes(self, constellations):
        assert isinstance(constellations(), IteratedConstellations)
        assert isinstance(constellations(20000020), Constellation)
        assert isinstance(constellations([1, 2]), MappedConstellations)
        assert isinstance(constellations("Kimotoro"), MappedConstellations)


@pytest.mark.asyncio
class TestConstellations:
    """Test the three constellation shapes."""

    async def test_single_details(self, constellations, fake_agent):
        details = await constellations(20000020).details()

        assert details["name"] == "Constellation 20000020"
        assert fake_agent.calls[0].path == {"constellation_id": 20000020}

    async def test_single_names(self, constellations):
        assert await constellations(5).names() == "Constellation 5"

    async def test_region(self, constellations):
        region = await constellations(5).region()

        assert isinstance(region, Region)
        assert region.id_ == 10000002

    async def test_mapped_details(self, constellations):
        details = await constellations([5, 6]).details()

        assert sorted(details) == [5, 6]

    async def test_mapped_names(self, constellations, fake_agent):
        fake_agent.respond(
            "post_universe_names",
            [
                {"id": 5, "name": "Kimotoro", "category": "constellation"},
                {"id": 6, "name": "Jita", "category": "solar_system"},
            ],
        )

        assert await constellations([5, 6]).names() == {5: "Kimotoro"}

    async def test_iterated_details(self, constellations, fake_agent):
        fake_agent.respond("get_universe_constellations", [5, 6])

        pairs = await fetch_all(constellations().details())

        assert [cid for cid, _ in pairs] == [5, 6]

    async def test_search_uses_constellation_category(self, constellations, fake_agent):
        fake_agent.respond("get_search", {"constellation": [5]})

        assert await constellations("Kimo").ids() == {5}
        assert fake_agent.calls[0].query["categories"] == ["constellation"]


@pytest.mark.asyncio
class TestStations:
    """Test the station API."""

    async def test_info(self, fake_agent):
        fake_agent.respond(
            "get_universe_stations_station_id",
            {"station_id": 60003760, "name": "Jita IV - Moon 4 - Caldari Navy Assembly Plant"},
        )
        stations = make_stations(fake_agent)

        info = await stations(60003760).info()

        assert info["name"].startswith("Jita IV")
        assert fake_agent.calls[0].path == {"station_id": 60003760}

    async def test_id(self, fake_agent):
        station = make_stations(fake_agent)(60003760)

        assert isinstance(station, Station)
        assert await station.id() == 60003760

    async def test_search(self, fake_agent):
        fake_agent.respond("get_search", {"station": [60003760]})

        assert await make_stations(fake_agent).search("Jita IV") == [60003760]
        assert fake_agent.calls[0].query["categories"] == ["station"]

    async def test_names(self, fake_agent):
        fake_agent.respond(
            "post_universe_names",
            [{"id": 60003760, "name": "Jita IV", "category": "station"}],
        )

        assert await make_stations(fake_agent).names([60003760]) == {60003760: "Jita IV"}

    async def test_rejects_non_int(self, fake_agent):
        with pytest.raises(TypeError):
            make_stations(fake_agent)("Jita")
