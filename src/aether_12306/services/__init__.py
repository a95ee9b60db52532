"""服务层包"""

from .http_client import HttpClient
from .cookie_service import CookieManager
from .station_service import StationService, normalize_station_name
from .ticket_service import TicketService
from .route_service import RouteService
from .container import Client12306

__all__ = [
    "HttpClient",
    "CookieManager",
    "StationService",
    "TicketService",
    "RouteService",
    "Client12306",
    "normalize_station_name",
]
