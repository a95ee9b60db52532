"""Shared pytest fixtures for the 12306 client test suite."""
from __future__ import annotations

import pytest

from aether_12306.services.cookie_service import CookieManager
from aether_12306.services.http_client import HttpClient
from aether_12306.services.route_service import RouteService
from aether_12306.services.station_service import StationService
from aether_12306.services.ticket_service import TicketService
from aether_12306.utils.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(station_js_path=None)


@pytest.fixture
async def http_client(settings: Settings):
    client = HttpClient(settings)
    yield client
    await client.close_session()


@pytest.fixture
def cookie_manager(http_client: HttpClient) -> CookieManager:
    return CookieManager(http_client)


@pytest.fixture
def station_service(http_client: HttpClient) -> StationService:
    return StationService(http_client)


@pytest.fixture
def ticket_service(
    http_client: HttpClient, station_service: StationService, cookie_manager: CookieManager
) -> TicketService:
    return TicketService(http_client, station_service, cookie_manager)


@pytest.fixture
def route_service(http_client: HttpClient, cookie_manager: CookieManager) -> RouteService:
    return RouteService(http_client, cookie_manager)
