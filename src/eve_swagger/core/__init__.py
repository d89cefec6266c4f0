"""
eve-swagger core infrastructure: configuration, logging, retry, the httpx
transport and the request agent.
"""

from .agent import ROUTES, ESIAgent, RequestParams, Route, SSOAgent, get_route
from .client import ESIClient, ESIError, ESIResponse
from .config import ESISettings, get_settings, reset_settings
from .logging import get_logger

__all__ = [
    "ROUTES",
    "ESIAgent",
    "ESIClient",
    "ESIError",
    "ESIResponse",
    "ESISettings",
    "RequestParams",
    "Route",
    "SSOAgent",
    "get_logger",
    "get_route",
    "get_settings",
    "reset_settings",
]
