"""12306 会话 Cookie 管理"""

import asyncio
import logging
import re
import time
from typing import Callable, Dict, Iterable, List, Optional

import httpx

from .http_client import HttpClient

logger = logging.getLogger(__name__)

# 合并后的 Set-Cookie 中，只有后面紧跟 name= 的逗号才是分隔符（Expires 里也有逗号）
_COOKIE_BOUNDARY = re.compile(r",\s*(?=[^;,=\s]+=)")


def parse_cookies(cookies: Iterable[str]) -> Dict[str, str]:
    """Set-Cookie 列表 -> {name: value}，只取每条的第一个键值对"""
    record: Dict[str, str] = {}
    for cookie in cookies:
        key, _, value = cookie.split(";", 1)[0].partition("=")
        if key.strip() and value.strip():
            record[key.strip()] = value.strip()
    return record


def format_cookies(cookies: Dict[str, str]) -> str:
    """{name: value} -> Cookie 请求头"""
    return "; ".join(f"{key}={value}" for key, value in cookies.items())


def extract_set_cookie(headers: httpx.Headers) -> List[str]:
    """兼容多值头与合并成一条字符串的 Set-Cookie"""
    values = headers.get_list("set-cookie")
    if len(values) > 1:
        return values
    combined = values[0] if values else headers.get("set-cookie")
    if not combined:
        return []
    return _COOKIE_BOUNDARY.split(combined)


class CookieManager:
    """缓存 leftTicket/init 下发的会话 Cookie，过期后透明刷新"""

    def __init__(
        self,
        http_client: HttpClient,
        ttl_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.http_client = http_client
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else http_client.settings.cookie_ttl_seconds
        self._clock = clock
        self._cookies: Optional[Dict[str, str]] = None
        self._expires_at = 0.0
        self._lock = asyncio.Lock()

    @property
    def init_url(self) -> str:
        return f"{self.http_client.settings.api_base}/otn/leftTicket/init"

    def invalidate(self) -> None:
        self._cookies = None
        self._expires_at = 0.0

    def _cached(self) -> Optional[Dict[str, str]]:
        if self._cookies and self._clock() < self._expires_at:
            return self._cookies
        return None

    async def get_session_cookie(self) -> Optional[Dict[str, str]]:
        """返回会话 Cookie，获取失败或上游未下发 Cookie 时返回 None"""
        cached = self._cached()
        if cached is not None:
            return cached
        async with self._lock:
            cached = self._cached()
            if cached is not None:
                return cached
            response = await self.http_client.get_response(self.init_url)
            if response is None:
                logger.error("获取12306 Cookie失败")
                return None
            cookies = parse_cookies(extract_set_cookie(response.headers))
            if not cookies:
                logger.warning(f"12306未下发Cookie，状态码: {response.status_code}")
                return None
            self._cookies = cookies
            self._expires_at = self._clock() + self.ttl_seconds
            logger.info(f"已获取12306 Cookie: {', '.join(cookies)}")
            return cookies
