"""查询结果的纯文本 / CSV 输出"""

from typing import List

from ..models.route import RouteStationInfo
from ..models.ticket import InterlineInfo, TicketInfo

NO_TRAINS = "No matching trains found."
NO_ROUTE = "No route information found."
NO_INTERLINES = "No matching interline routes found."

_TICKET_STATUS = {
    "有": "available",
    "充足": "available",
    "无": "sold_out",
    "--": "sold_out",
    "": "sold_out",
    "候补": "waitlist",
}


def format_ticket_status(num: str) -> str:
    """余票字段 -> left_N / available / sold_out / waitlist"""
    if num.isdigit():
        count = int(num)
        return "sold_out" if count == 0 else f"left_{count}"
    return _TICKET_STATUS.get(num, num)


def format_price(price: float) -> str:
    """整数票价不带小数点：55.0 -> 55，55.5 -> 55.5"""
    return f"{price:g}"


def format_tickets_info(tickets_info: List[TicketInfo]) -> str:
    if not tickets_info:
        return NO_TRAINS
    lines = ["Train|From -> To|Departure -> Arrival|Duration"]
    for ticket in tickets_info:
        lines.append(
            f"{ticket.start_train_code} "
            f"{ticket.from_station}(telecode:{ticket.from_station_telecode}) -> "
            f"{ticket.to_station}(telecode:{ticket.to_station_telecode}) "
            f"{ticket.start_time} -> {ticket.arrive_time} duration:{ticket.lishi}"
        )
        for price in ticket.prices:
            lines.append(f"- {price.seat_name}: {format_ticket_status(price.num)} {format_price(price.price)}")
    return "\n".join(lines) + "\n"


def format_tickets_info_csv(tickets_info: List[TicketInfo]) -> str:
    if not tickets_info:
        return NO_TRAINS
    lines = ["train,from,to,depart,arrive,duration,prices,flags"]
    for ticket in tickets_info:
        prices = "".join(
            f"{price.seat_name}:{format_ticket_status(price.num)}{format_price(price.price)}"
            for price in ticket.prices
        )
        flags = "&".join(ticket.dw_flag) if ticket.dw_flag else "/"
        lines.append(
            f"{ticket.start_train_code},"
            f"{ticket.from_station}(telecode:{ticket.from_station_telecode}),"
            f"{ticket.to_station}(telecode:{ticket.to_station_telecode}),"
            f"{ticket.start_time},{ticket.arrive_time},{ticket.lishi},[{prices}],{flags}"
        )
    return "\n".join(lines) + "\n"


def format_route_stations_info(route_stations: List[RouteStationInfo]) -> str:
    if not route_stations:
        return NO_ROUTE
    lines = [
        f"{route_stations[0].station_train_code} route",
        "No.|Station|Train|Arrive|Depart|Duration",
    ]
    for index, station in enumerate(route_stations, 1):
        lines.append(
            f"{index}|{station.station_name}|{station.station_train_code}|"
            f"{station.arrive_time}|{station.start_time}|{station.arrive_day_str} {station.lishi}"
        )
    return "\n".join(lines) + "\n"


def _transfer_kind(interline: InterlineInfo) -> str:
    if interline.same_train:
        return "same_train"
    if interline.same_station:
        return "same_station"
    return "transfer_station"


def format_interlines_info(interlines_info: List[InterlineInfo]) -> str:
    if not interlines_info:
        return NO_INTERLINES
    result = "Depart -> Arrive | From -> Middle -> To | Transfer | Wait | Duration\n\n"
    for interline in interlines_info:
        result += (
            f"{interline.start_date} {interline.start_time} -> "
            f"{interline.arrive_date} {interline.arrive_time} | "
            f"{interline.from_station_name} -> {interline.middle_station_name} -> "
            f"{interline.end_station_name} | "
            f"{_transfer_kind(interline)} | {interline.wait_time} | {interline.lishi}\n\n"
        )
        result += "\t" + format_tickets_info(interline.ticket_list).replace("\n", "\n\t")
        result += "\n"
    return result
