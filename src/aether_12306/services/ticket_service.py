"""车票查询服务"""

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import raise_for_code
from ..models.ticket import InterlineInfo, InterlineQuery, TicketInfo, TicketQuery
from ..utils.date_utils import check_date
from .cookie_service import CookieManager, format_cookies
from .http_client import HttpClient
from .station_service import StationService
from .ticket_decoder import decode_interlines, decode_tickets, parse_ticket_rows
from .ticket_filter import filter_tickets_info

logger = logging.getLogger(__name__)

LC_SEARCH_URL_PATTERN = re.compile(r" var lc_search_url = '(.+?)'")


class InterlinePage(BaseModel):
    """中转查询的一页结果"""
    model_config = ConfigDict(frozen=True)

    middle_list: List[Dict[str, Any]] = Field(default_factory=list, description="中转方案原始数据")
    result_index: str = Field("0", description="下一页游标")
    can_query: str = Field("N", description="是否还有下一页 Y/N")


class InterlineEmpty(BaseModel):
    """上游用字符串 data 表示没有中转方案"""
    model_config = ConfigDict(frozen=True)

    message: str = Field("", description="上游提示信息")


def parse_interline_payload(payload: Dict[str, Any]) -> Union[InterlinePage, InterlineEmpty, None]:
    """把 lcQuery 响应拆成 InterlinePage / InterlineEmpty，data 缺失时返回 None"""
    data = payload.get("data")
    if isinstance(data, str):
        return InterlineEmpty(message=data or str(payload.get("errorMsg") or ""))
    if not isinstance(data, dict):
        return None
    return InterlinePage(
        middle_list=[item for item in data.get("middleList") or [] if isinstance(item, dict)],
        result_index=str(data.get("result_index", "0")),
        can_query=str(data.get("can_query") or "N"),
    )


class TicketService:
    """直达与中转车票查询"""

    def __init__(
        self,
        http_client: HttpClient,
        station_service: StationService,
        cookie_manager: CookieManager,
    ):
        self.http_client = http_client
        self.settings = http_client.settings
        self.station_service = station_service
        self.cookie_manager = cookie_manager
        self.lc_query_path: Optional[str] = None
        self._lc_lock = asyncio.Lock()

    async def _session_headers(self) -> Dict[str, str]:
        cookies = await self.cookie_manager.get_session_cookie()
        if not cookies:
            raise_for_code("cookie_failed")
        return {"Cookie": format_cookies(cookies)}

    async def _resolve_endpoints(self, from_station: str, to_station: str):
        from_code = await self.station_service.resolve_station(from_station)
        to_code = await self.station_service.resolve_station(to_station)
        if not from_code or not to_code:
            logger.error(f"无法找到车站代码: {from_station} -> {to_station}")
            raise_for_code("station_not_found")
        return from_code, to_code

    async def query_tickets(self, query: TicketQuery) -> List[TicketInfo]:
        """查询直达车票"""
        if not check_date(query.date):
            raise_for_code("date_before_today")

        await self.station_service.ensure_loaded()
        from_code, to_code = await self._resolve_endpoints(query.from_station, query.to_station)
        headers = await self._session_headers()

        params = {
            "leftTicketDTO.train_date": query.date,
            "leftTicketDTO.from_station": from_code,
            "leftTicketDTO.to_station": to_code,
            "purpose_codes": "ADULT",
        }
        url = f"{self.settings.api_base}/otn/leftTicket/query"
        response = await self.http_client.fetch(url, params=params, headers=headers)
        if not isinstance(response, dict) or not isinstance(response.get("data"), dict):
            raise_for_code("tickets_request_failed")

        data = response["data"]
        rows = parse_ticket_rows(data.get("result") or [])
        tickets = decode_tickets(rows, data.get("map") or {})
        logger.info(f"{query.from_station}({from_code}) -> {query.to_station}({to_code}) {query.date}: {len(tickets)} 趟列车")
        return filter_tickets_info(
            tickets,
            query.train_filter_flags,
            query.earliest_start_time,
            query.latest_start_time,
            query.sort_flag,
            query.sort_reverse,
            query.limited_num,
        )

    async def ensure_interline_path(self) -> str:
        """从 lcQuery/init 页面中找到实际的中转查询接口路径"""
        if self.lc_query_path:
            return self.lc_query_path
        async with self._lc_lock:
            if self.lc_query_path:
                return self.lc_query_path
            html = await self.http_client.fetch(self.settings.lcquery_init_url, response_kind="text")
            if not html:
                raise_for_code("lcquery_init_failed")
            m = LC_SEARCH_URL_PATTERN.search(html)
            if not m:
                raise_for_code("lcquery_path_not_found")
            self.lc_query_path = m.group(1)
            logger.info(f"中转查询接口: {self.lc_query_path}")
            return self.lc_query_path

    async def query_interline_tickets(self, query: InterlineQuery) -> List[InterlineInfo]:
        """查询中转换乘方案，按 result_index 顺序翻页"""
        if not check_date(query.date):
            raise_for_code("date_before_today")

        await self.station_service.ensure_loaded()
        lc_path = await self.ensure_interline_path()

        from_code, to_code = await self._resolve_endpoints(query.from_station, query.to_station)
        middle_code = ""
        if query.middle_station:
            middle_code = await self.station_service.resolve_station(query.middle_station) or ""
            if not middle_code:
                logger.warning(f"无法识别中转站 {query.middle_station}，按不指定中转站查询")

        headers = await self._session_headers()
        url = f"{self.settings.api_base}{lc_path}"
        params = {
            "train_date": query.date,
            "from_station_telecode": from_code,
            "to_station_telecode": to_code,
            "middle_station": middle_code,
            "result_index": "0",
            "can_query": "Y",
            "isShowWZ": "Y" if query.show_wz else "N",
            "purpose_codes": "00",
            "channel": "E",
        }

        middle_list: List[Dict[str, Any]] = []
        pages = 0
        while query.limited_num <= 0 or len(middle_list) < query.limited_num:
            if pages >= self.settings.interline_max_pages:
                logger.warning(f"中转查询已达最大页数 {pages}，停止翻页")
                break
            response = await self.http_client.fetch(url, params=params, headers=headers)
            pages += 1
            if not isinstance(response, dict):
                raise_for_code("interline_request_failed")
            page = parse_interline_payload(response)
            if page is None:
                raise_for_code("interline_request_failed")
            if isinstance(page, InterlineEmpty):
                logger.info(f"中转查询无结果: {page.message}")
                raise_for_code("interline_no_result", page.message)
            middle_list.extend(page.middle_list)
            if page.can_query == "N":
                break
            params["result_index"] = page.result_index

        interlines = decode_interlines(middle_list)
        return filter_tickets_info(
            interlines,
            query.train_filter_flags,
            query.earliest_start_time,
            query.latest_start_time,
            query.sort_flag,
            query.sort_reverse,
            query.limited_num,
        )
