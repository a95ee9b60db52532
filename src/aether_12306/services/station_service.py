"""车站目录服务

解析 12306 的 station_name.js（一整串以 | 分隔、每 10 个字段一条记录的数据），
建立电报码、城市、城市代表站、站名四个索引，并把用户输入的城市/站名/电报码
解析成电报码。
"""

import asyncio
import logging
import os
import re
from typing import Awaitable, Callable, Dict, List, Optional, Union
from urllib.parse import urljoin

import aiofiles

from ..exceptions import Error12306, raise_for_code
from ..models.station import Station, StationRef
from .http_client import HttpClient

logger = logging.getLogger(__name__)

STATION_FIELD_COUNT = 10
STATION_FIELDS = (
    "station_id",
    "name",
    "telecode",
    "pinyin",
    "py_short",
    "station_index",
    "num",
    "city",
    "r1",
    "r2",
)

# 上游数据里曾经缺失的车站，只在实时数据没有该电报码时补上
MISSING_STATIONS = (
    Station(
        station_id="@cdd",
        name="成都东",
        telecode="WEI",
        pinyin="chengdudong",
        py_short="cdd",
        station_index="",
        num="1707",
        city="成都",
    ),
)

STATION_JS_PATTERNS = (
    re.compile(r"(/script/core/common/station_name.+?\.js)"),
    re.compile(r"(/otn/resources/js/framework/station_name\.js\?station_version=[^\"]+)"),
)


def _single_quoted(script: str) -> Optional[str]:
    m = re.search(r"station_names\s*=\s*'([^']+)'", script)
    return m.group(1) if m else None


def _double_quoted(script: str) -> Optional[str]:
    m = re.search(r'station_names\s*=\s*"([^"]+)"', script)
    return m.group(1) if m else None


def _bare_expression(script: str) -> Optional[str]:
    m = re.search(r"station_names\s*=\s*([^;]+);", script)
    if not m:
        return None
    raw = m.group(1).strip()
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "'\"":
        return raw[1:-1]
    return None


RAW_DATA_EXTRACTORS: List[Callable[[str], Optional[str]]] = [
    _single_quoted,
    _double_quoted,
    _bare_expression,
]


def extract_station_raw_data(script: str) -> str:
    """从 station_name.js 中取出原始车站串，依次尝试单引号、双引号、裸表达式"""
    for extractor in RAW_DATA_EXTRACTORS:
        raw = extractor(script)
        if raw is not None:
            return raw
    raise Error12306("station_rawdata_not_found")


def parse_stations_data(raw_data: str) -> Dict[str, Station]:
    """| 分隔的原始串按 10 个字段一组映射成 Station，末尾不足一组的字段丢弃"""
    values = raw_data.split("|")
    result: Dict[str, Station] = {}
    for start in range(0, len(values) // STATION_FIELD_COUNT * STATION_FIELD_COUNT, STATION_FIELD_COUNT):
        group = values[start:start + STATION_FIELD_COUNT]
        station = Station(**dict(zip(STATION_FIELDS, group)))
        if not station.telecode:
            continue
        result[station.telecode] = station
    return result


def merge_missing_stations(stations: Dict[str, Station]) -> Dict[str, Station]:
    for station in MISSING_STATIONS:
        if station.telecode not in stations:
            stations[station.telecode] = station
    return stations


def normalize_station_name(name: str) -> str:
    """去掉首尾空白和末尾的“站”字（单独一个“站”字保留）"""
    trimmed = name.strip()
    while trimmed.endswith("站") and len(trimmed) > 1:
        trimmed = trimmed[:-1].strip()
    return trimmed


def build_city_stations(stations: Dict[str, Station]) -> Dict[str, List[StationRef]]:
    result: Dict[str, List[StationRef]] = {}
    for station in stations.values():
        result.setdefault(station.city, []).append(
            StationRef(telecode=station.telecode, name=station.name)
        )
    return result


def build_city_codes(city_stations: Dict[str, List[StationRef]]) -> Dict[str, StationRef]:
    """每个城市选一个代表站：与城市同名的车站，否则取第一个"""
    result: Dict[str, StationRef] = {}
    for city, refs in city_stations.items():
        if not refs:
            continue
        direct = next((ref for ref in refs if ref.name == city), None)
        result[city] = direct or refs[0]
    return result


def build_name_stations(stations: Dict[str, Station]) -> Dict[str, StationRef]:
    return {
        station.name: StationRef(telecode=station.telecode, name=station.name)
        for station in stations.values()
    }


StationStrategy = Callable[[], Awaitable[Optional[Dict[str, Station]]]]


class StationService:
    """车站目录，进程内缓存，首次使用时加载"""

    def __init__(self, http_client: HttpClient):
        self.http_client = http_client
        self.settings = http_client.settings
        self.stations: Dict[str, Station] = {}
        self.city_stations: Dict[str, List[StationRef]] = {}
        self.city_codes: Dict[str, StationRef] = {}
        self.name_stations: Dict[str, StationRef] = {}
        self._loaded = False
        self._lock = asyncio.Lock()
        # 按顺序尝试，返回 None 表示此路不通、继续下一个
        self.strategies: List[StationStrategy] = [
            self._load_from_direct_js,
            self._load_from_homepage,
        ]

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def direct_js_url(self) -> str:
        return f"{self.settings.api_base}/otn/resources/js/framework/station_name.js"

    def set_stations(self, stations: Dict[str, Station]) -> None:
        """替换整个车站目录并重建索引"""
        stations = merge_missing_stations(dict(stations))
        city_stations = build_city_stations(stations)
        self.city_codes = build_city_codes(city_stations)
        self.city_stations = city_stations
        self.name_stations = build_name_stations(stations)
        self.stations = stations
        self._loaded = True

    async def ensure_loaded(self) -> None:
        """加载车站目录，已加载时不做任何网络请求"""
        if self._loaded:
            return
        async with self._lock:
            if self._loaded:
                return
            stations = await self._load()
            self.set_stations(stations)
            logger.info(f"已加载{len(self.stations)}个车站，{len(self.city_codes)}个城市")

    async def _load(self) -> Dict[str, Station]:
        try:
            for strategy in self.strategies:
                stations = await strategy()
                if stations is not None:
                    return stations
            raise_for_code("stations_init_failed")
        except Error12306 as e:
            snapshot = await self._load_from_snapshot()
            if snapshot is None:
                raise
            logger.warning(f"在线获取车站数据失败({e.code})，使用本地快照")
            return snapshot

    async def _load_from_direct_js(self) -> Optional[Dict[str, Station]]:
        script = await self.http_client.fetch(self.direct_js_url, response_kind="text")
        if not script:
            logger.warning("直接获取 station_name.js 失败，尝试从首页查找")
            return None
        try:
            return parse_stations_data(extract_station_raw_data(script))
        except Error12306 as e:
            logger.warning(f"解析 station_name.js 失败({e.code})，尝试从首页查找")
            return None

    async def _load_from_homepage(self) -> Optional[Dict[str, Station]]:
        web_url = self.settings.web_url
        html = await self.http_client.fetch(web_url, response_kind="text")
        if not html:
            raise_for_code("stations_init_failed")
        path = None
        for pattern in STATION_JS_PATTERNS:
            m = pattern.search(html)
            if m:
                path = m.group(1)
                break
        if path is None:
            raise_for_code("station_js_not_found")
        script = await self.http_client.fetch(urljoin(web_url, path), response_kind="text")
        if not script:
            raise_for_code("station_js_request_failed")
        return parse_stations_data(extract_station_raw_data(script))

    async def _load_from_snapshot(self) -> Optional[Dict[str, Station]]:
        path = self.settings.station_js_path
        if not path or not os.path.exists(path):
            return None
        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                script = await f.read()
            return parse_stations_data(extract_station_raw_data(script))
        except (OSError, Error12306) as e:
            logger.error(f"本地车站快照不可用: {path} - {e}")
            return None

    async def resolve_station(self, value: str) -> Optional[str]:
        """电报码 -> 规范化后的电报码 -> 站名 -> 城市代表站，全部失败返回 None"""
        await self.ensure_loaded()
        normalized = normalize_station_name(value)
        if value in self.stations:
            return self.stations[value].telecode
        if normalized in self.stations:
            return self.stations[normalized].telecode
        if normalized in self.name_stations:
            return self.name_stations[normalized].telecode
        if normalized in self.city_codes:
            return self.city_codes[normalized].telecode
        return None

    async def get_stations(self) -> Dict[str, Station]:
        await self.ensure_loaded()
        return self.stations

    async def get_stations_in_city(self, city: str) -> Optional[List[StationRef]]:
        await self.ensure_loaded()
        return self.city_stations.get(city)

    async def get_city_codes(self, cities: List[str]) -> Dict[str, Union[StationRef, Dict[str, str]]]:
        await self.ensure_loaded()
        return {
            city: self.city_codes.get(city) or {"error": "city_not_found"}
            for city in cities
        }

    async def get_stations_by_names(self, names: List[str]) -> Dict[str, Union[StationRef, Dict[str, str]]]:
        await self.ensure_loaded()
        return {
            name: self.name_stations.get(normalize_station_name(name)) or {"error": "station_not_found"}
            for name in names
        }

    async def get_station_by_telecode(self, telecode: str) -> Optional[Station]:
        await self.ensure_loaded()
        return self.stations.get(telecode)
