"""12306 票价、席别、列车特征解码

上游没有公开的数据格式说明，下面的字段宽度、偏移和阈值都按实际返回的数据固定，
修改前请先对照真实响应。
"""

import logging
import re
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from ..models.ticket import InterlineInfo, Price, TicketInfo
from ..utils.date_utils import shift_date

logger = logging.getLogger(__name__)

PRICE_STR_LENGTH = 10
DISCOUNT_STR_LENGTH = 5
# 票价块 6-10 位 >= 3000 时，上游把无座票价塞在了普通席别的位置
NO_SEAT_THRESHOLD = 3000


class SeatType(NamedTuple):
    name: str
    short: str
    num_field: str


SEAT_TYPES: Dict[str, SeatType] = {
    "9": SeatType("商务座", "swz", "swz_num"),
    "P": SeatType("特等座", "tz", "tz_num"),
    "M": SeatType("一等座", "zy", "zy_num"),
    "D": SeatType("优选一等座", "zy", "zy_num"),
    "O": SeatType("二等座", "ze", "ze_num"),
    "S": SeatType("二等包座", "ze", "ze_num"),
    "6": SeatType("高级软卧", "gr", "gr_num"),
    "A": SeatType("高级动卧", "gr", "gr_num"),
    "4": SeatType("软卧", "rw", "rw_num"),
    "I": SeatType("一等卧", "rw", "rw_num"),
    "F": SeatType("动卧", "rw", "rw_num"),
    "3": SeatType("硬卧", "yw", "yw_num"),
    "J": SeatType("二等卧", "yw", "yw_num"),
    "2": SeatType("软座", "rz", "rz_num"),
    "1": SeatType("硬座", "yz", "yz_num"),
    "W": SeatType("无座", "wz", "wz_num"),
    "WZ": SeatType("无座", "wz", "wz_num"),
    "H": SeatType("其他", "qt", "qt_num"),
}
NO_SEAT_CODE = "W"
OTHER_SEAT_CODE = "H"

SMART_EMU = "智能动车组"
FUXING = "复兴号"
QUIET_CAR = "静音车厢"
WARM_SLEEPER = "温馨动卧"
DONGGAN = "动感号"
BERTH_SELECTION = "支持选铺"
SENIOR_DISCOUNT = "老年优惠"
DW_FLAGS = (SMART_EMU, FUXING, QUIET_CAR, WARM_SLEEPER, DONGGAN, BERTH_SELECTION, SENIOR_DISCOUNT)

# leftTicket/query 每行 | 分隔字段的位置，数字名称的位置上游有值但含义未知
TICKET_DATA_KEYS = (
    "secret_Sstr", "button_text_info", "train_no", "station_train_code",
    "start_station_telecode", "end_station_telecode", "from_station_telecode", "to_station_telecode",
    "start_time", "arrive_time", "lishi", "canWebBuy",
    "yp_info", "start_train_date", "train_seat_feature", "location_code",
    "from_station_no", "to_station_no", "is_support_card", "controlled_train_flag",
    "gg_num", "gr_num", "qt_num", "rw_num",
    "rz_num", "tz_num", "wz_num", "yb_num",
    "yw_num", "yz_num", "ze_num", "zy_num",
    "swz_num", "srrb_num", "yp_ex", "seat_types",
    "exchange_train_flag", "houbu_train_flag", "houbu_seat_limit", "yp_info_new",
    "40", "41", "42", "43",
    "44", "45", "dw_flag", "47",
    "stopcheckTime", "country_flag", "local_arrive_time", "local_start_time",
    "52", "bed_level_info", "seat_discount_info", "sale_time",
    "56",
)

_LISHI_PATTERN = re.compile(r"(?:(\d+)小时)?(\d+?)分钟")


def _chunks(blob: str, size: int) -> List[str]:
    return [blob[i:i + size] for i in range(0, len(blob) // size * size, size)]


def decode_discounts(seat_discount_info: str) -> Dict[str, int]:
    """5 位一组：席别代码 + 4 位折扣百分比"""
    discounts: Dict[str, int] = {}
    for chunk in _chunks(seat_discount_info or "", DISCOUNT_STR_LENGTH):
        try:
            discounts[chunk[0]] = int(chunk[1:])
        except ValueError:
            logger.warning(f"无法解析折扣信息: {chunk!r}")
    return discounts


def decode_prices(yp_info: str, seat_discount_info: str, row: Mapping[str, Any]) -> List[Price]:
    """10 位一组：席别代码(0) + 票价(1-6，单位 0.1 元) + 无座判定值(6-10)

    余票数不在票价串里，而是按席别从原始行的 *_num 字段读取。
    """
    discounts = decode_discounts(seat_discount_info)
    prices: List[Price] = []
    for chunk in _chunks(yp_info or "", PRICE_STR_LENGTH):
        try:
            raw_price = int(chunk[1:6])
            marker = int(chunk[6:10])
        except ValueError:
            logger.warning(f"无法解析票价信息: {chunk!r}")
            continue
        if marker >= NO_SEAT_THRESHOLD:
            seat_type_code = NO_SEAT_CODE
        elif chunk[0] in SEAT_TYPES:
            seat_type_code = chunk[0]
        else:
            seat_type_code = OTHER_SEAT_CODE
        seat_type = SEAT_TYPES[seat_type_code]
        prices.append(Price(
            seat_name=seat_type.name,
            short=seat_type.short,
            seat_type_code=seat_type_code,
            num=str(row.get(seat_type.num_field) or ""),
            price=raw_price / 10,
            discount=discounts.get(seat_type_code),
        ))
    return prices


def decode_dw_flags(dw_flag: str) -> List[str]:
    """# 分隔的列车特征位，每一位有自己的判定规则"""
    parts = (dw_flag or "").split("#")
    result: List[str] = []
    if parts[0] == "5":
        result.append(SMART_EMU)
    if len(parts) > 1 and parts[1] == "1":
        result.append(FUXING)
    if len(parts) > 2:
        if parts[2].startswith("Q"):
            result.append(QUIET_CAR)
        elif parts[2].startswith("R"):
            result.append(WARM_SLEEPER)
    if len(parts) > 5 and parts[5] == "D":
        result.append(DONGGAN)
    if len(parts) > 6 and parts[6] != "z":
        result.append(BERTH_SELECTION)
    if len(parts) > 7 and parts[7] != "z":
        result.append(SENIOR_DISCOUNT)
    return result


def decode_lishi(all_lishi: str) -> str:
    """“3小时5分钟” -> 03:05，无法解析时返回 00:00"""
    m = _LISHI_PATTERN.search(all_lishi or "")
    if not m:
        return "00:00"
    hours = m.group(1) or "0"
    return f"{hours.zfill(2)}:{m.group(2).zfill(2)}"


def parse_ticket_rows(rows: List[str]) -> List[Dict[str, str]]:
    """按位置把每行 | 分隔的数据映射成字段字典，缺失的位置为空串"""
    result = []
    for row in rows:
        values = row.split("|")
        result.append({
            key: values[index] if index < len(values) else ""
            for index, key in enumerate(TICKET_DATA_KEYS)
        })
    return result


def _ticket_info(row: Mapping[str, Any], yp_info: str, from_station: str, to_station: str) -> TicketInfo:
    start_time = row.get("start_time") or ""
    lishi = row.get("lishi") or ""
    start_date, arrive_date = shift_date(row.get("start_train_date") or "", start_time, lishi)
    return TicketInfo(
        train_no=row.get("train_no") or "",
        start_train_code=row.get("station_train_code") or "",
        start_date=start_date,
        arrive_date=arrive_date,
        start_time=start_time,
        arrive_time=row.get("arrive_time") or "",
        lishi=lishi,
        from_station=from_station,
        to_station=to_station,
        from_station_telecode=row.get("from_station_telecode") or "",
        to_station_telecode=row.get("to_station_telecode") or "",
        prices=decode_prices(yp_info, row.get("seat_discount_info") or "", row),
        dw_flag=decode_dw_flags(row.get("dw_flag") or ""),
    )


def decode_tickets(rows: List[Dict[str, str]], station_map: Mapping[str, str]) -> List[TicketInfo]:
    """直达车票，票价来自 yp_info_new，站名来自响应自带的 map"""
    result = []
    for row in rows:
        from_code = row.get("from_station_telecode", "")
        to_code = row.get("to_station_telecode", "")
        result.append(_ticket_info(
            row,
            row.get("yp_info_new", ""),
            station_map.get(from_code, from_code),
            station_map.get(to_code, to_code),
        ))
    return result


def decode_interline_tickets(legs: List[Mapping[str, Any]]) -> List[TicketInfo]:
    """中转方案里的每一段，票价来自 yp_info"""
    return [
        _ticket_info(
            leg,
            leg.get("yp_info") or "",
            leg.get("from_station_name") or "",
            leg.get("to_station_name") or "",
        )
        for leg in legs
    ]


def decode_interlines(middle_list: List[Mapping[str, Any]]) -> List[InterlineInfo]:
    result = []
    for item in middle_list:
        tickets = decode_interline_tickets(item.get("fullList") or [])
        result.append(InterlineInfo(
            lishi=decode_lishi(item.get("all_lishi") or ""),
            start_time=item.get("start_time") or "",
            start_date=item.get("train_date") or "",
            middle_date=item.get("middle_date") or "",
            arrive_date=item.get("arrive_date") or "",
            arrive_time=item.get("arrive_time") or "",
            from_station_code=item.get("from_station_code") or "",
            from_station_name=item.get("from_station_name") or "",
            middle_station_code=item.get("middle_station_code") or "",
            middle_station_name=item.get("middle_station_name") or "",
            end_station_code=item.get("end_station_code") or "",
            end_station_name=item.get("end_station_name") or "",
            start_train_code=tickets[0].start_train_code if tickets else "",
            first_train_no=item.get("first_train_no") or "",
            second_train_no=item.get("second_train_no") or "",
            train_count=_to_int(item.get("train_count")),
            ticket_list=tickets,
            same_station=item.get("same_station") == "0",
            same_train=item.get("same_train") == "Y",
            wait_time=item.get("wait_time") or "",
        ))
    return result


def _to_int(value: Optional[Any]) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
