"""
Tests for search and name resolution helpers.
"""

from __future__ import annotations

import pytest

from eve_swagger.core.client import ESIError
from eve_swagger.core.constants import NAMES_CHUNK_SIZE
from eve_swagger.internal.names import get_iterated_names, get_names
from eve_swagger.internal.resource import fetch_all
from eve_swagger.internal.search import make_character_search, make_default_search


def names_responder(category="region"):
    """Answer post_universe_names with a name for every id."""

    def respond(params):
        return [{"id": i, "name": f"Name {i}", "category": category} for i in params["body"]]

    return respond


async def as_stream(ids):
    for item_id in ids:
        yield item_id


@pytest.mark.asyncio
class TestDefaultSearch:
    """Test make_default_search."""

    async def test_returns_category_ids(self, fake_agent):
        fake_agent.respond("get_search", {"region": [10000002]})
        search = make_default_search(fake_agent, "region")

        assert await search("Forge") == [10000002]

        call = fake_agent.calls_to("get_search")[0]
        assert call.query == {"categories": ["region"], "search": "Forge", "strict": False}

    async def test_strict_flag_forwarded(self, fake_agent):
        fake_agent.respond("get_search", {"region": []})
        search = make_default_search(fake_agent, "region")

        await search("The Forge", strict=True)

        assert fake_agent.calls[0].query["strict"] is True

    async def test_missing_category_is_empty(self, fake_agent):
        fake_agent.respond("get_search", {})
        search = make_default_search(fake_agent, "station")

        assert await search("nothing") == []

    async def test_unexpected_shape_raises(self, fake_agent):
        fake_agent.respond("get_search", [1, 2])
        search = make_default_search(fake_agent, "station")

        with pytest.raises(ESIError, match="Expected dict"):
            await search("x")


@pytest.mark.asyncio
class TestCharacterSearch:
    """Test make_character_search."""

    async def test_uses_character_route_and_token(self, fake_agent):
        fake_agent.respond("get_characters_character_id_search", {"structure": [1021975535893]})
        search = make_character_search(fake_agent, "structure")

        assert await search("Keepstar") == [1021975535893]

        call = fake_agent.calls[0]
        assert call.operation_id == "get_characters_character_id_search"
        assert call.path == {"character_id": 1}
        assert call.token == "my_token"

    async def test_requires_token(self, fake_agent):
        fake_agent.token = None
        search = make_character_search(fake_agent, "structure")

        with pytest.raises(ESIError, match="Authentication required"):
            await search("Keepstar")


@pytest.mark.asyncio
class TestGetNames:
    """Test get_names."""

    async def test_maps_ids_to_names(self, fake_agent):
        fake_agent.respond("post_universe_names", names_responder())

        assert await get_names(fake_agent, "region", [1, 2]) == {1: "Name 1", 2: "Name 2"}

    async def test_filters_by_category(self, fake_agent):
        fake_agent.respond(
            "post_universe_names",
            [
                {"id": 1, "name": "The Forge", "category": "region"},
                {"id": 2, "name": "Kimotoro", "category": "constellation"},
            ],
        )

        assert await get_names(fake_agent, "region", [1, 2]) == {1: "The Forge"}

    async def test_no_category_keeps_everything(self, fake_agent):
        fake_agent.respond(
            "post_universe_names",
            [
                {"id": 1, "name": "The Forge", "category": "region"},
                {"id": 2, "name": "Kimotoro", "category": "constellation"},
            ],
        )

        assert await get_names(fake_agent, None, [1, 2]) == {1: "The Forge", 2: "Kimotoro"}

    async def test_empty_ids_skip_request(self, fake_agent):
        assert await get_names(fake_agent, "region", []) == {}
        assert fake_agent.calls == []

    async def test_duplicates_sent_once(self, fake_agent):
        fake_agent.respond("post_universe_names", names_responder())

        await get_names(fake_agent, "region", [5, 5, 6])

        assert fake_agent.calls[0].body == [5, 6]

    async def test_large_requests_are_chunked(self, fake_agent):
        fake_agent.respond("post_universe_names", names_responder())
        ids = list(range(1, NAMES_CHUNK_SIZE + 6))

        names = await get_names(fake_agent, "region", ids)

        assert len(names) == len(ids)
        bodies = sorted(len(call.body) for call in fake_agent.calls)
        assert bodies == [5, NAMES_CHUNK_SIZE]


@pytest.mark.asyncio
class TestGetIteratedNames:
    """Test get_iterated_names."""

    async def test_streams_pairs(self, fake_agent):
        fake_agent.respond("post_universe_names", names_responder())

        pairs = await fetch_all(get_iterated_names(fake_agent, "region", as_stream([1, 2])))

        assert pairs == [(1, "Name 1"), (2, "Name 2")]
        assert len(fake_agent.calls) == 1

    async def test_chunks_long_streams(self, fake_agent):
        fake_agent.respond("post_universe_names", names_responder())
        ids = list(range(1, NAMES_CHUNK_SIZE + 2))

        pairs = await fetch_all(get_iterated_names(fake_agent, "region", as_stream(ids)))

        assert [pair[0] for pair in pairs] == ids
        assert [len(call.body) for call in fake_agent.calls] == [NAMES_CHUNK_SIZE, 1]

    async def test_empty_stream_makes_no_request(self, fake_agent):
        pairs = await fetch_all(get_iterated_names(fake_agent, "region", as_stream([])))

        assert pairs == []
        assert fake_agent.calls == []
