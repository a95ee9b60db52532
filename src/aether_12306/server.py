import asyncio
import logging
import math
import re
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
import uvicorn

from .exceptions import Error12306
from .models.ticket import InterlineQuery, TicketQuery
from .services.container import Client12306
from .utils.config import get_settings
from .utils.date_utils import get_current_date
from .utils.formatters import (
    format_interlines_info,
    format_route_stations_info,
    format_tickets_info,
    format_tickets_info_csv,
)

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVER_NAME = "aether-12306"
SERVER_VERSION = "1.0.0"

client = Client12306(settings)

app = FastAPI(
    title="12306 Train Ticket API",
    version=SERVER_VERSION,
    description="12306 车站、余票、中转、经停站查询接口",
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


def get_client() -> Client12306:
    return client


def parse_number(value: Optional[str], fallback: int) -> int:
    if value is None:
        return fallback
    try:
        number = float(value)
    except ValueError:
        return fallback
    if not math.isfinite(number):
        return fallback
    return int(number)


def parse_bool(value: Optional[str], fallback: bool) -> bool:
    if value is None:
        return fallback
    return value.lower() in ("1", "true", "yes", "y")


def parse_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in re.split(r"[|,]", value) if item.strip()]


def error_response(code: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": code}, status_code=status_code)


@app.exception_handler(Error12306)
async def error_12306_handler(request: Request, exc: Error12306):
    logger.warning(f"❌ {request.url.path} 查询失败: {exc.code}")
    return error_response(exc.code, exc.status_code)


@app.get("/")
async def root():
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "status": "running",
        "stations_loaded": len(client.station_service.stations),
    }


@app.get("/api/12306/health")
async def health():
    return {"status": "ok"}


@app.get("/api/12306/date")
async def current_date():
    return {"date": get_current_date()}


@app.get("/api/12306/stations")
async def stations(svc: Client12306 = Depends(get_client)):
    result = await svc.station_service.get_stations()
    return {"stations": {code: station.model_dump(by_alias=True) for code, station in result.items()}}


@app.get("/api/12306/stations/city")
async def stations_in_city(name: Optional[str] = None, svc: Client12306 = Depends(get_client)):
    if not name:
        return error_response("missing_city", 400)
    result = await svc.station_service.get_stations_in_city(name)
    if result is None:
        return error_response("city_not_found", 404)
    return {"stations": [ref.model_dump(by_alias=True) for ref in result]}


def _dump_lookup(result: dict) -> dict:
    return {key: value if isinstance(value, dict) else value.model_dump(by_alias=True) for key, value in result.items()}


@app.get("/api/12306/stations/cities")
async def city_codes(names: Optional[str] = None, svc: Client12306 = Depends(get_client)):
    cities = parse_list(names)
    if not cities:
        return error_response("missing_city_names", 400)
    result = await svc.station_service.get_city_codes(cities)
    return {"cities": _dump_lookup(result)}


@app.get("/api/12306/stations/by-names")
async def stations_by_names(names: Optional[str] = None, svc: Client12306 = Depends(get_client)):
    station_names = parse_list(names)
    if not station_names:
        return error_response("missing_station_names", 400)
    result = await svc.station_service.get_stations_by_names(station_names)
    return {"stations": _dump_lookup(result)}


@app.get("/api/12306/stations/telecode/{code}")
async def station_by_telecode(code: str, svc: Client12306 = Depends(get_client)):
    station = await svc.station_service.get_station_by_telecode(code)
    if station is None:
        return error_response("station_not_found", 404)
    return {"station": station.model_dump(by_alias=True)}


@app.get("/api/12306/tickets")
async def tickets(request: Request, svc: Client12306 = Depends(get_client)):
    q = request.query_params
    date, from_station, to_station = q.get("date"), q.get("from"), q.get("to")
    if not date or not from_station or not to_station:
        return error_response("missing_required_params", 400)
    query = TicketQuery(
        date=date,
        from_station=from_station,
        to_station=to_station,
        train_filter_flags=q.get("trainFilterFlags", ""),
        earliest_start_time=parse_number(q.get("earliestStartTime"), 0),
        latest_start_time=parse_number(q.get("latestStartTime"), 24),
        sort_flag=q.get("sortFlag", ""),
        sort_reverse=parse_bool(q.get("sortReverse"), False),
        limited_num=parse_number(q.get("limitedNum"), 0),
    )
    result = await svc.ticket_service.query_tickets(query)
    fmt = (q.get("format") or "").lower()
    if fmt == "csv":
        return PlainTextResponse(format_tickets_info_csv(result))
    if fmt == "text":
        return PlainTextResponse(format_tickets_info(result))
    return {"tickets": [ticket.model_dump(by_alias=True) for ticket in result]}


@app.get("/api/12306/interline")
async def interline(request: Request, svc: Client12306 = Depends(get_client)):
    q = request.query_params
    date, from_station, to_station = q.get("date"), q.get("from"), q.get("to")
    if not date or not from_station or not to_station:
        return error_response("missing_required_params", 400)
    query = InterlineQuery(
        date=date,
        from_station=from_station,
        to_station=to_station,
        middle_station=q.get("middleStation", ""),
        show_wz=parse_bool(q.get("showWZ"), False),
        train_filter_flags=q.get("trainFilterFlags", ""),
        earliest_start_time=parse_number(q.get("earliestStartTime"), 0),
        latest_start_time=parse_number(q.get("latestStartTime"), 24),
        sort_flag=q.get("sortFlag", ""),
        sort_reverse=parse_bool(q.get("sortReverse"), False),
        limited_num=parse_number(q.get("limitedNum"), 10),
    )
    result = await svc.ticket_service.query_interline_tickets(query)
    if (q.get("format") or "").lower() == "text":
        return PlainTextResponse(format_interlines_info(result))
    return {"tickets": [item.model_dump(by_alias=True) for item in result]}


@app.get("/api/12306/route")
async def route(request: Request, svc: Client12306 = Depends(get_client)):
    q = request.query_params
    train_code, depart_date = q.get("trainCode"), q.get("date")
    if not train_code or not depart_date:
        return error_response("missing_required_params", 400)
    result = await svc.route_service.get_train_route_stations(train_code, depart_date)
    if (q.get("format") or "").lower() == "text":
        return PlainTextResponse(format_route_stations_info(result))
    return {"stations": [station.model_dump(by_alias=True) for station in result]}


@app.on_event("startup")
async def startup_event():
    """应用启动时预加载车站目录和中转接口，失败只记录日志"""
    logger.info("🚀 启动12306查询服务...")
    try:
        await client.init()
        logger.info(f"✅ 已加载 {len(client.station_service.stations)} 个车站")
    except Error12306 as e:
        logger.error(f"❌ 12306初始化失败: {e.code}")


@app.on_event("shutdown")
async def shutdown_event():
    await client.close()


async def main_server():
    """启动HTTP服务器"""
    logger.info(f"📡 接口地址: http://{settings.server_host}:{settings.server_port}/api/12306")
    config = uvicorn.Config(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower()
    )
    uvicorn_server = uvicorn.Server(config)
    await uvicorn_server.serve()


def main():
    asyncio.run(main_server())


if __name__ == "__main__":
    main()
