"""HTTP客户端服务"""

import json
import logging
from typing import Any, Dict, Literal, Mapping, Optional, Union

import httpx

from aether_12306.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

ResponseKind = Literal["json", "text"]


class HttpClient:
    """12306 HTTP客户端

    所有上游失败（网络异常、非 2xx、JSON 解析失败）都归一为 None，
    由调用方决定抛出哪一种错误。
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.create_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close_session()

    @property
    def default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json, text/plain, */*",
        }

    async def create_session(self):
        """创建HTTP会话"""
        if self.session is None:
            self.session = httpx.AsyncClient(
                timeout=self.settings.request_timeout,
                verify=self.settings.verify_ssl,  # 12306证书问题
                follow_redirects=True
            )

    async def close_session(self):
        """关闭HTTP会话"""
        if self.session:
            await self.session.aclose()
            self.session = None

    async def get_response(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Optional[httpx.Response]:
        """发送GET请求并返回原始响应，网络异常时返回 None"""
        await self.create_session()
        assert self.session is not None  # 类型保证
        merged = {**self.default_headers, **(headers or {})}
        try:
            logger.debug(f"发送GET请求: {url} {dict(params or {})}")
            response = await self.session.get(url, params=params, headers=merged)
            logger.debug(f"响应状态: {response.status_code}")
            return response
        except httpx.RequestError as e:
            logger.error(f"请求12306失败: {url} - {e!r}")
            return None

    async def fetch(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        response_kind: ResponseKind = "json",
    ) -> Union[str, Any, None]:
        """GET请求，按 response_kind 返回文本或 JSON，失败返回 None"""
        response = await self.get_response(url, params=params, headers=headers)
        if response is None:
            return None
        if not response.is_success:
            logger.error(f"HTTP状态错误: {response.status_code} {response.url}")
            return None
        text = response.text
        if response_kind == "text":
            return text
        try:
            return json.loads(text)
        except ValueError as e:
            logger.error(f"JSON解析失败: {response.url} - {e}")
            return None
