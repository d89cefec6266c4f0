"""
Tests for the async ESI transport.
"""

from __future__ import annotations

import httpx
import pytest

from eve_swagger.core.client import ESIClient, ESIError, ESIResponse

BASE = "https://esi.evetech.net/latest"


class TestESIResponse:
    """Test ESIResponse data class."""

    def test_not_modified(self):
        response = ESIResponse(data=None, status_code=304)

        assert response.is_not_modified is True

    def test_x_pages(self):
        assert ESIResponse(data=[], headers={"X-Pages": "10"}).x_pages == 10

    def test_x_pages_lowercase(self):
        assert ESIResponse(data=[], headers={"x-pages": "5"}).x_pages == 5

    def test_dates(self):
        response = ESIResponse(
            data={},
            headers={
                "Last-Modified": "Thu, 01 Jan 2026 00:00:00 GMT",
                "expires": "Thu, 01 Jan 2026 01:00:00 GMT",
            },
        )

        assert response.expires_timestamp - response.last_modified_timestamp == 3600

    def test_invalid_header_values(self):
        response = ESIResponse(
            data={},
            headers={"Last-Modified": "invalid", "Expires": "invalid", "X-Pages": "many"},
        )

        assert response.last_modified_timestamp is None
        assert response.expires_timestamp is None
        assert response.x_pages is None

    def test_missing_headers(self):
        response = ESIResponse(data={})

        assert response.x_pages is None
        assert response.expires_timestamp is None


class TestESIError:
    """Test ESIError exception."""

    def test_to_dict(self):
        result = ESIError("Rate limited", status_code=429).to_dict()

        assert result == {"error": "esi_error", "message": "Rate limited", "status_code": 429}

    def test_to_dict_without_status(self):
        assert "status_code" not in ESIError("Network error").to_dict()


class TestESIClient:
    """Test ESIClient configuration."""

    def test_defaults_from_settings(self):
        client = ESIClient()

        assert client.base_url == BASE
        assert client.datasource == "tranquility"
        assert client.timeout == 30.0
        assert client.is_open is False

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("EVE_SWAGGER_DATASOURCE", "singularity")
        monkeypatch.setenv("EVE_SWAGGER_TIMEOUT", "5")

        client = ESIClient()

        assert client.datasource == "singularity"
        assert client.timeout == 5.0

    def test_build_params(self):
        params = ESIClient()._build_params(
            {"categories": ["region", "station"], "strict": False, "page": 2, "skip": None}
        )

        assert params == [
            ("datasource", "tranquility"),
            ("categories", "region,station"),
            ("strict", "false"),
            ("page", "2"),
        ]


@pytest.mark.asyncio
class TestESIClientLifecycle:
    async def test_context_manager(self):
        async with ESIClient() as client:
            assert client.is_open

        assert client.is_open is False

    async def test_aclose_idempotent(self):
        client = ESIClient()
        await client.aclose()
        await client.aclose()

        assert client.is_open is False


@pytest.mark.asyncio
@pytest.mark.httpx
class TestESIClientRequests:
    """Requests against a mocked transport."""

    async def test_get(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/universe/regions/10000002/?datasource=tranquility",
            json={"region_id": 10000002, "name": "The Forge"},
        )

        async with ESIClient() as client:
            result = await client.get("/universe/regions/10000002/")

        assert result == {"region_id": 10000002, "name": "The Forge"}

    async def test_sends_user_agent(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/universe/regions/?datasource=tranquility",
            json=[1],
            match_headers={"User-Agent": "eve-swagger-python"},
        )

        async with ESIClient() as client:
            assert await client.get("universe/regions/") == [1]

    async def test_bearer_token(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/characters/1/contacts/labels/?datasource=tranquility",
            json=[],
            match_headers={"Authorization": "Bearer my_token"},
        )

        async with ESIClient() as client:
            await client.get("/characters/1/contacts/labels/", token="my_token")

    async def test_request_with_headers(self, httpx_mock):
        httpx_mock.add_response(
            url=f"{BASE}/markets/10000002/orders/?datasource=tranquility&page=1",
            json=[{"order_id": 1}],
            headers={"X-Pages": "3"},
        )

        async with ESIClient() as client:
            response = await client.request_with_headers(
                "GET", "/markets/10000002/orders/", {"page": 1}
            )

        assert response.data == [{"order_id": 1}]
        assert response.x_pages == 3

    async def test_post_json_body(self, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=f"{BASE}/universe/names/?datasource=tranquility",
            match_json=[10000002],
            json=[{"id": 10000002, "name": "The Forge", "category": "region"}],
        )

        async with ESIClient() as client:
            result = await client.post("/universe/names/", [10000002])

        assert result[0]["name"] == "The Forge"

    async def test_no_content(self, httpx_mock):
        httpx_mock.add_response(
            method="DELETE",
            url=f"{BASE}/characters/1/contacts/?datasource=tranquility&contact_ids=2",
            status_code=204,
        )

        async with ESIClient() as client:
            result = await client.request(
                "DELETE", "/characters/1/contacts/", {"contact_ids": [2]}, token="t"
            )

        assert result is None

    async def test_not_modified(self, httpx_mock):
        httpx_mock.add_response(status_code=304)

        async with ESIClient() as client:
            response = await client.request_with_headers("GET", "/markets/prices/")

        assert response.is_not_modified
        assert response.data is None

    async def test_http_error_message(self, httpx_mock):
        httpx_mock.add_response(status_code=404, json={"error": "Region not found"})

        async with ESIClient() as client:
            with pytest.raises(ESIError) as exc_info:
                await client.get("/universe/regions/1/")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Region not found"

    async def test_retryable_status_surfaces_after_attempts(self, httpx_mock):
        httpx_mock.add_response(status_code=503, text="Service Unavailable")

        async with ESIClient() as client:
            with pytest.raises(ESIError) as exc_info:
                await client.get("/status/")

        assert exc_info.value.status_code == 503

    async def test_network_error(self, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        async with ESIClient() as client:
            with pytest.raises(ESIError, match="Network error"):
                await client.get("/status/")

    async def test_invalid_json(self, httpx_mock):
        httpx_mock.add_response(text="not json", headers={"Content-Type": "application/json"})

        async with ESIClient() as client:
            with pytest.raises(ESIError, match="Invalid JSON"):
                await client.get("/status/")

    async def test_error_limit_headers_tracked(self, httpx_mock):
        httpx_mock.add_response(
            json={},
            headers={"x-esi-error-limit-remain": "50", "x-esi-error-limit-reset": "60"},
        )

        async with ESIClient() as client:
            await client.get("/status/")

            assert client._error_limit_remain == 50
            assert client._error_limit_reset > 0
