"""Tests for CookieManager and the Set-Cookie helpers."""
from __future__ import annotations

import httpx
import respx

from aether_12306.services.cookie_service import (
    CookieManager,
    extract_set_cookie,
    format_cookies,
    parse_cookies,
)
from aether_12306.services.http_client import HttpClient
from tests.factories import COOKIE_URL


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def cookie_response() -> httpx.Response:
    return httpx.Response(
        200,
        headers=[
            ("set-cookie", "JSESSIONID=abc123; Path=/otn"),
            ("set-cookie", "route=6f50b51faa11b987e576cdb301e545c4; Path=/"),
        ],
    )


def test_parse_cookies_keeps_first_pair() -> None:
    assert parse_cookies(["a=1; Path=/", "b=x=y; HttpOnly", "broken", "=v"]) == {"a": "1", "b": "x=y"}


def test_format_cookies() -> None:
    assert format_cookies({"a": "1", "b": "2"}) == "a=1; b=2"


def test_extract_set_cookie_multi_value() -> None:
    headers = httpx.Headers([("set-cookie", "a=1"), ("set-cookie", "b=2")])
    assert extract_set_cookie(headers) == ["a=1", "b=2"]


def test_extract_set_cookie_combined_string() -> None:
    """A single combined header is split on cookie boundaries, not on Expires commas."""
    headers = httpx.Headers({"set-cookie": "a=1; Expires=Wed, 21 Oct 2026 07:28:00 GMT, b=2; Path=/"})
    assert extract_set_cookie(headers) == ["a=1; Expires=Wed, 21 Oct 2026 07:28:00 GMT", "b=2; Path=/"]


def test_extract_set_cookie_missing() -> None:
    assert extract_set_cookie(httpx.Headers()) == []


@respx.mock
async def test_get_session_cookie(cookie_manager: CookieManager) -> None:
    respx.get(COOKIE_URL).mock(return_value=cookie_response())
    cookies = await cookie_manager.get_session_cookie()
    assert cookies == {"JSESSIONID": "abc123", "route": "6f50b51faa11b987e576cdb301e545c4"}


@respx.mock
async def test_cookie_cached_until_ttl_expires(http_client: HttpClient) -> None:
    route = respx.get(COOKIE_URL).mock(return_value=cookie_response())
    clock = FakeClock()
    manager = CookieManager(http_client, clock=clock)
    assert manager.ttl_seconds == 600

    await manager.get_session_cookie()
    clock.now += 599
    await manager.get_session_cookie()
    assert route.call_count == 1

    clock.now += 2
    await manager.get_session_cookie()
    assert route.call_count == 2


@respx.mock
async def test_no_set_cookie_returns_none(cookie_manager: CookieManager) -> None:
    respx.get(COOKIE_URL).mock(return_value=httpx.Response(200, text="ok"))
    assert await cookie_manager.get_session_cookie() is None


@respx.mock
async def test_network_error_returns_none(cookie_manager: CookieManager) -> None:
    respx.get(COOKIE_URL).mock(side_effect=httpx.ConnectTimeout("timeout"))
    assert await cookie_manager.get_session_cookie() is None


@respx.mock
async def test_invalidate_forces_refresh(cookie_manager: CookieManager) -> None:
    route = respx.get(COOKIE_URL).mock(return_value=cookie_response())
    await cookie_manager.get_session_cookie()
    cookie_manager.invalidate()
    await cookie_manager.get_session_cookie()
    assert route.call_count == 2
