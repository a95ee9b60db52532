"""Tests for train-type filtering, the departure window, sorting and limits."""
from __future__ import annotations

from aether_12306.models.ticket import InterlineInfo, TicketInfo
from aether_12306.services.ticket_decoder import FUXING, SMART_EMU
from aether_12306.services.ticket_filter import filter_tickets_info, match_train_filters


def ticket(code: str, start: str = "08:00", arrive: str = "12:00", lishi: str = "04:00", flags=None) -> TicketInfo:
    return TicketInfo(
        train_no=f"0000{code}",
        start_train_code=code,
        start_time=start,
        arrive_time=arrive,
        lishi=lishi,
        from_station="北京",
        to_station="上海",
        from_station_telecode="BJP",
        to_station_telecode="SHH",
        dw_flag=flags or [],
    )


def codes(tickets) -> list[str]:
    return [t.start_train_code for t in tickets]


def test_no_flags_keeps_everything() -> None:
    tickets = [ticket("G1"), ticket("K5")]
    assert codes(filter_tickets_info(tickets)) == ["G1", "K5"]


def test_g_includes_intercity() -> None:
    tickets = [ticket("G1"), ticket("C2"), ticket("D3"), ticket("K4")]
    assert codes(filter_tickets_info(tickets, "G")) == ["G1", "C2"]
    assert codes(filter_tickets_info(tickets, "GD")) == ["G1", "C2", "D3"]


def test_other_and_feature_flags() -> None:
    tickets = [
        ticket("G1", flags=[SMART_EMU, FUXING]),
        ticket("D2", flags=[SMART_EMU]),
        ticket("Y3"),
        ticket("1461"),
    ]
    assert codes(filter_tickets_info(tickets, "O")) == ["Y3", "1461"]
    assert codes(filter_tickets_info(tickets, "F")) == ["G1"]
    assert codes(filter_tickets_info(tickets, "S")) == ["G1", "D2"]
    # unknown letters are ignored
    assert codes(filter_tickets_info(tickets, "X")) == []


def test_interline_uses_first_leg_flags() -> None:
    first = ticket("G1", flags=[FUXING])
    second = ticket("K2")
    interline = InterlineInfo(lishi="05:00", start_time="08:00", arrive_time="13:00", start_train_code="G1", ticket_list=[first, second])
    assert match_train_filters(interline, "F")
    assert match_train_filters(interline, "G")
    assert not match_train_filters(interline, "K")


def test_departure_window_is_half_open() -> None:
    tickets = [ticket("G1", start="07:59"), ticket("G2", start="08:00"), ticket("G3", start="11:59"), ticket("G4", start="12:00")]
    assert codes(filter_tickets_info(tickets, earliest_start_time=8, latest_start_time=12)) == ["G2", "G3"]


def test_sort_keys_and_reverse() -> None:
    tickets = [
        ticket("G1", start="10:00", arrive="15:00", lishi="05:00"),
        ticket("G2", start="08:00", arrive="16:00", lishi="08:00"),
        ticket("G3", start="09:00", arrive="12:00", lishi="03:00"),
    ]
    assert codes(filter_tickets_info(tickets, sort_flag="startTime")) == ["G2", "G3", "G1"]
    assert codes(filter_tickets_info(tickets, sort_flag="arriveTime")) == ["G3", "G1", "G2"]
    assert codes(filter_tickets_info(tickets, sort_flag="duration")) == ["G3", "G1", "G2"]
    assert codes(filter_tickets_info(tickets, sort_flag="duration", sort_reverse=True)) == ["G2", "G1", "G3"]
    # unknown key keeps upstream order, and reverse alone does nothing
    assert codes(filter_tickets_info(tickets, sort_flag="price", sort_reverse=True)) == ["G1", "G2", "G3"]


def test_limit() -> None:
    tickets = [ticket(f"G{i}") for i in range(5)]
    assert len(filter_tickets_info(tickets, limited_num=2)) == 2
    assert len(filter_tickets_info(tickets, limited_num=0)) == 5
    assert len(filter_tickets_info(tickets, limited_num=-1)) == 5


def test_filter_runs_before_sort_and_limit() -> None:
    """Limiting happens last, so filtered-out trains never take a slot."""
    tickets = [
        ticket("K1", start="06:00"),
        ticket("G2", start="09:00"),
        ticket("G3", start="07:00"),
    ]
    result = filter_tickets_info(tickets, "G", sort_flag="startTime", limited_num=1)
    assert codes(result) == ["G3"]

    # sorting and limiting first would have kept only K1 and then dropped it
    naive = filter_tickets_info(filter_tickets_info(tickets, sort_flag="startTime", limited_num=1), "G")
    assert codes(naive) == []


def test_input_not_mutated() -> None:
    tickets = [ticket("G2", start="09:00"), ticket("G1", start="08:00")]
    filter_tickets_info(tickets, sort_flag="startTime")
    assert codes(tickets) == ["G2", "G1"]
