"""列车经停站查询服务"""

import logging
from typing import Any, Dict, List

from ..exceptions import raise_for_code
from ..models.route import RouteStationInfo
from ..utils.date_utils import compact_date
from .cookie_service import CookieManager, format_cookies
from .http_client import HttpClient

logger = logging.getLogger(__name__)


def parse_route_stations(rows: List[Dict[str, Any]]) -> List[RouteStationInfo]:
    """经停站列表，首站额外保留列车等级、服务类型、终到站"""
    result = []
    for index, row in enumerate(rows):
        extra = {}
        if index == 0:
            extra = {
                "train_class_name": row.get("train_class_name"),
                "service_type": row.get("service_type"),
                "end_station_name": row.get("end_station_name"),
            }
        result.append(RouteStationInfo(
            station_name=row.get("station_name") or "",
            station_train_code=row.get("station_train_code") or "",
            arrive_time=row.get("arrive_time") or "",
            start_time=row.get("start_time") or "",
            lishi=row.get("running_time") or "",
            arrive_day_str=row.get("arrive_day_str") or "",
            **extra,
        ))
    return result


class RouteService:
    """车次号 -> 列车编号 -> 经停站"""

    def __init__(self, http_client: HttpClient, cookie_manager: CookieManager):
        self.http_client = http_client
        self.settings = http_client.settings
        self.cookie_manager = cookie_manager

    async def get_train_no(self, train_code: str, depart_date: str) -> str:
        """用车次号搜索内部列车编号，取第一条结果"""
        url = f"{self.settings.search_api_base}/search/v1/train/search"
        params = {"keyword": train_code, "date": compact_date(depart_date)}
        response = await self.http_client.fetch(url, params=params)
        matches = response.get("data") if isinstance(response, dict) else None
        if not matches or not isinstance(matches, list):
            logger.warning(f"未找到车次: {train_code} {depart_date}")
            raise_for_code("train_not_found")
        first = matches[0]
        train_no = first.get("train_no") if isinstance(first, dict) else None
        if not train_no:
            logger.warning(f"车次搜索结果缺少列车编号: {train_code} {first!r}")
            raise_for_code("train_not_found")
        logger.info(f"车次 {train_code} 转换为列车编号: {train_no}")
        return train_no

    async def get_train_route_stations(self, train_code: str, depart_date: str) -> List[RouteStationInfo]:
        """查询某车次在指定日期的全部经停站"""
        train_no = await self.get_train_no(train_code, depart_date)

        cookies = await self.cookie_manager.get_session_cookie()
        if not cookies:
            raise_for_code("cookie_failed")

        url = f"{self.settings.api_base}/otn/queryTrainInfo/query"
        params = {
            "leftTicketDTO.train_no": train_no,
            "leftTicketDTO.train_date": depart_date,
            "rand_code": "",
        }
        response = await self.http_client.fetch(url, params=params, headers={"Cookie": format_cookies(cookies)})
        if not isinstance(response, dict) or not isinstance(response.get("data"), dict):
            raise_for_code("route_request_failed")

        stations = parse_route_stations(response["data"].get("data") or [])
        if not stations:
            raise_for_code("route_not_found")
        return stations
