"""车次筛选、排序、截断（直达与中转共用）"""

from typing import Callable, Dict, List, Sequence, TypeVar, Union

from ..models.ticket import InterlineInfo, TicketInfo
from ..utils.date_utils import parse_hhmm
from .ticket_decoder import FUXING, SMART_EMU

TicketLike = TypeVar("TicketLike", TicketInfo, InterlineInfo)


def _flags(info: Union[TicketInfo, InterlineInfo]) -> List[str]:
    if isinstance(info, InterlineInfo):
        return info.ticket_list[0].dw_flag if info.ticket_list else []
    return info.dw_flag


def _prefix(*prefixes: str) -> Callable[[Union[TicketInfo, InterlineInfo]], bool]:
    return lambda info: info.start_train_code.startswith(prefixes)


TRAIN_FILTERS: Dict[str, Callable[[Union[TicketInfo, InterlineInfo]], bool]] = {
    "G": _prefix("G", "C"),
    "D": _prefix("D"),
    "Z": _prefix("Z"),
    "T": _prefix("T"),
    "K": _prefix("K"),
    "O": lambda info: not info.start_train_code.startswith(("G", "C", "D", "Z", "T", "K")),
    "F": lambda info: FUXING in _flags(info),
    "S": lambda info: SMART_EMU in _flags(info),
}

SORT_KEYS: Dict[str, Callable[[Union[TicketInfo, InterlineInfo]], tuple]] = {
    "startTime": lambda info: parse_hhmm(info.start_time),
    "arriveTime": lambda info: parse_hhmm(info.arrive_time),
    "duration": lambda info: parse_hhmm(info.lishi),
}


def match_train_filters(info: Union[TicketInfo, InterlineInfo], train_filter_flags: str) -> bool:
    """任一筛选字母命中即保留，未知字母忽略"""
    for flag in train_filter_flags:
        predicate = TRAIN_FILTERS.get(flag)
        if predicate and predicate(info):
            return True
    return False


def filter_tickets_info(
    tickets_info: Sequence[TicketLike],
    train_filter_flags: str = "",
    earliest_start_time: int = 0,
    latest_start_time: int = 24,
    sort_flag: str = "",
    sort_reverse: bool = False,
    limited_num: int = 0,
) -> List[TicketLike]:
    """按 车次类型 -> 出发时段 -> 排序 -> 数量 的顺序处理，顺序不能调换"""
    if train_filter_flags:
        result = [info for info in tickets_info if match_train_filters(info, train_filter_flags)]
    else:
        result = list(tickets_info)

    result = [
        info for info in result
        if earliest_start_time <= parse_hhmm(info.start_time)[0] < latest_start_time
    ]

    sort_key = SORT_KEYS.get(sort_flag)
    if sort_key is not None:
        result.sort(key=sort_key)
        if sort_reverse:
            result.reverse()

    if limited_num > 0:
        return result[:limited_num]
    return result
