"""Tests for the text and CSV renderers."""
from __future__ import annotations

from aether_12306.models.route import RouteStationInfo
from aether_12306.models.ticket import InterlineInfo, Price, TicketInfo
from aether_12306.utils.formatters import (
    NO_INTERLINES,
    NO_ROUTE,
    NO_TRAINS,
    format_interlines_info,
    format_price,
    format_route_stations_info,
    format_ticket_status,
    format_tickets_info,
    format_tickets_info_csv,
)


def make_ticket(dw_flag: list[str] | None = None) -> TicketInfo:
    return TicketInfo(
        train_no="240000G10101",
        start_train_code="G1",
        start_date="2024-06-01",
        arrive_date="2024-06-01",
        start_time="08:00",
        arrive_time="12:30",
        lishi="04:30",
        from_station="北京",
        to_station="上海",
        from_station_telecode="BJP",
        to_station_telecode="SHH",
        prices=[
            Price(seat_name="二等座", short="ze", seat_type_code="O", num="有", price=55.0),
            Price(seat_name="一等座", short="zy", seat_type_code="M", num="3", price=93.0),
        ],
        dw_flag=dw_flag or [],
    )


def test_empty_inputs_return_sentinels() -> None:
    assert format_tickets_info([]) == NO_TRAINS
    assert format_tickets_info_csv([]) == NO_TRAINS
    assert format_route_stations_info([]) == NO_ROUTE
    assert format_interlines_info([]) == NO_INTERLINES
    assert NO_TRAINS and NO_ROUTE and NO_INTERLINES


def test_ticket_status() -> None:
    assert format_ticket_status("有") == "available"
    assert format_ticket_status("充足") == "available"
    assert format_ticket_status("无") == "sold_out"
    assert format_ticket_status("") == "sold_out"
    assert format_ticket_status("--") == "sold_out"
    assert format_ticket_status("0") == "sold_out"
    assert format_ticket_status("12") == "left_12"
    assert format_ticket_status("候补") == "waitlist"
    assert format_ticket_status("*") == "*"


def test_format_tickets_info_lists_prices() -> None:
    text = format_tickets_info([make_ticket()])
    lines = text.splitlines()
    assert lines[0] == "Train|From -> To|Departure -> Arrival|Duration"
    assert lines[1] == "G1 北京(telecode:BJP) -> 上海(telecode:SHH) 08:00 -> 12:30 duration:04:30"
    assert lines[2] == "- 二等座: available 55"
    assert lines[3] == "- 一等座: left_3 93"


def test_format_tickets_csv_flags() -> None:
    csv = format_tickets_info_csv([make_ticket(), make_ticket(["复兴号", "静音车厢"])])
    lines = csv.splitlines()
    assert lines[0] == "train,from,to,depart,arrive,duration,prices,flags"
    assert lines[1].endswith("[二等座:available55一等座:left_393],/")
    assert lines[2].endswith(",复兴号&静音车厢")


def test_format_route_stations() -> None:
    rows = [
        RouteStationInfo(station_name="北京南", station_train_code="G1", arrive_time="----",
                         start_time="08:00", lishi="00:00", arrive_day_str="当日到达",
                         train_class_name="高速", service_type="2", end_station_name="上海虹桥"),
        RouteStationInfo(station_name="上海虹桥", station_train_code="G1", arrive_time="12:30",
                         start_time="12:30", lishi="04:30", arrive_day_str="当日到达"),
    ]
    lines = format_route_stations_info(rows).splitlines()
    assert lines[0] == "G1 route"
    assert lines[2] == "1|北京南|G1|----|08:00|当日到达 00:00"
    assert lines[3] == "2|上海虹桥|G1|12:30|12:30|当日到达 04:30"


def test_format_interlines_transfer_kind() -> None:
    interline = InterlineInfo(
        lishi="05:30", start_time="08:00", start_date="2024-06-01", arrive_date="2024-06-01",
        arrive_time="13:30", from_station_name="北京", middle_station_name="嘉兴南",
        end_station_name="上海", same_station=True, same_train=False, wait_time="30分钟",
        ticket_list=[make_ticket()],
    )
    text = format_interlines_info([interline])
    assert "2024-06-01 08:00 -> 2024-06-01 13:30 | 北京 -> 嘉兴南 -> 上海 | same_station | 30分钟 | 05:30" in text
    assert "\tTrain|From -> To" in text


def test_format_price_drops_trailing_zero() -> None:
    """Whole-yuan fares print without a decimal point, fractional ones keep it."""
    assert format_price(55.0) == "55"
    assert format_price(55.5) == "55.5"
    assert format_price(1234.5) == "1234.5"
    assert format_price(0.0) == "0"
