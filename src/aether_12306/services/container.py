"""12306 服务装配

车站目录、会话 Cookie、中转接口路径的缓存都挂在各自的服务实例上，
同一个 Client12306 内共享，不同实例之间互不影响。
"""

import asyncio
import logging
from typing import Optional

from ..utils.config import Settings, get_settings
from .cookie_service import CookieManager
from .http_client import HttpClient
from .route_service import RouteService
from .station_service import StationService
from .ticket_service import TicketService

logger = logging.getLogger(__name__)


class Client12306:
    """对外的 12306 数据客户端"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.http_client = HttpClient(self.settings)
        self.cookie_manager = CookieManager(self.http_client)
        self.station_service = StationService(self.http_client)
        self.ticket_service = TicketService(self.http_client, self.station_service, self.cookie_manager)
        self.route_service = RouteService(self.http_client, self.cookie_manager)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def init(self) -> None:
        """预加载车站目录和中转查询接口路径"""
        await asyncio.gather(
            self.station_service.ensure_loaded(),
            self.ticket_service.ensure_interline_path(),
        )

    async def close(self) -> None:
        await self.http_client.close_session()
