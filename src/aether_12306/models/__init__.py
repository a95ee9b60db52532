"""数据模型包"""

from .station import Station, StationRef
from .ticket import Price, TicketInfo, InterlineInfo, TicketQuery, InterlineQuery
from .route import RouteStationInfo

__all__ = [
    "Station",
    "StationRef",
    "Price",
    "TicketInfo",
    "InterlineInfo",
    "TicketQuery",
    "InterlineQuery",
    "RouteStationInfo",
]
