"""
eve-swagger Test Suite - Shared Fixtures and Configuration

Provides a recording fake agent for resource wrapper tests and resets the
settings and logging singletons between tests.
"""

# Disable retry BEFORE any imports read settings, so a failing request in a
# test never sleeps through backoff.
import os

os.environ.setdefault("EVE_SWAGGER_NO_RETRY", "1")

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional, Union

import pytest

from eve_swagger.core.agent import RequestParams, SSOAgent, get_route
from eve_swagger.core.client import ESIClient, ESIError, ESIResponse
from eve_swagger.core.config import reset_settings
from eve_swagger.core.logging import reset_logging

Responder = Union[Callable[[RequestParams], Any], Any]


@dataclass
class RecordedCall:
    """One request seen by the fake agent."""

    operation_id: str
    params: RequestParams
    token: Optional[str]

    @property
    def path(self) -> dict[str, Any]:
        return self.params.get("path", {})

    @property
    def query(self) -> dict[str, Any]:
        return self.params.get("query", {})

    @property
    def body(self) -> Any:
        return self.params.get("body")


class FakeAgent(SSOAgent):
    """
    Agent double that answers from registered responders.

    Route ids, path parameters and auth requirements are still validated
    against the real route table, so a wrapper calling a wrong route or
    forgetting a path parameter fails the test.

    Usage:
        fake_agent.respond("get_universe_regions", [1, 2])
        fake_agent.respond(
            "get_universe_regions_region_id",
            lambda params: {"region_id": params["path"]["region_id"]},
        )
    """

    def __init__(self, character_id: int = 1, token: Optional[str] = "my_token") -> None:
        super().__init__(ESIClient(), character_id, token)
        self.calls: list[RecordedCall] = []
        self._responders: dict[str, Responder] = {}

    def respond(self, operation_id: str, responder: Responder) -> None:
        """
        Register the answer for a route.

        A callable responder receives the request params and returns either
        the JSON body or a full ESIResponse (to set X-Pages).
        """
        get_route(operation_id)
        self._responders[operation_id] = responder

    def calls_to(self, operation_id: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.operation_id == operation_id]

    async def request_page(
        self,
        operation_id: str,
        params: Optional[RequestParams] = None,
    ) -> ESIResponse:
        route = get_route(operation_id)
        params = params or {}
        route.format_path(params.get("path"))
        if route.auth and not self.token:
            raise ESIError(f"Authentication required for {operation_id} but no token provided")

        self.calls.append(
            RecordedCall(operation_id, params, self.token if route.auth else None)
        )

        if operation_id not in self._responders:
            raise AssertionError(f"Unexpected request: {operation_id} {params}")
        responder = self._responders[operation_id]
        result = responder(params) if callable(responder) else responder
        if isinstance(result, ESIResponse):
            return result
        return ESIResponse(data=result)

    def for_character(self, character_id: int, token: Optional[str]) -> "FakeAgent":
        self.character_id = character_id
        self.token = token
        return self


def paged(pages: list[list[Any]], report_pages: bool = True) -> Callable[[RequestParams], Any]:
    """
    Responder serving ``pages`` by the ``page`` query parameter.

    Pages past the end are empty. With report_pages the X-Pages header
    carries the page count.
    """

    def responder(params: RequestParams) -> ESIResponse:
        page = params.get("query", {}).get("page", 1)
        data = pages[page - 1] if page <= len(pages) else []
        headers = {"X-Pages": str(len(pages))} if report_pages else {}
        return ESIResponse(data=data, headers=headers)

    return responder


@pytest.fixture
def fake_agent() -> FakeAgent:
    return FakeAgent()


@pytest.fixture
def paged_responder() -> Callable[..., Callable[[RequestParams], Any]]:
    return paged


@pytest.fixture(autouse=True)
def reset_all_singletons():
    """Reset the settings cache and logging state before and after each test."""
    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()
