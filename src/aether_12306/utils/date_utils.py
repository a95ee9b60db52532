"""日期工具"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz

SHANGHAI_TZ = pytz.timezone("Asia/Shanghai")


def get_current_date(now: Optional[datetime] = None) -> str:
    """获取上海时区的今天日期 (YYYY-MM-DD)，与服务器本地时区无关"""
    if now is None:
        now = datetime.now(SHANGHAI_TZ)
    elif now.tzinfo is None:
        now = SHANGHAI_TZ.localize(now)
    else:
        now = now.astimezone(SHANGHAI_TZ)
    return now.strftime("%Y-%m-%d")


def check_date(date_str: str, today: Optional[str] = None) -> bool:
    """出发日期不早于今天

    只做 YYYY-MM-DD 字符串比较，依赖格式本身的字典序。
    """
    if today is None:
        today = get_current_date()
    return date_str >= today


def compact_date(date_str: str) -> str:
    """2024-06-01 -> 20240601"""
    return date_str.replace("-", "")


def parse_hhmm(value: str) -> Tuple[int, int]:
    """解析 HH:MM，无法解析的部分记为 0"""
    parts = (value or "").split(":")
    result = []
    for part in parts[:2]:
        try:
            result.append(int(part))
        except ValueError:
            result.append(0)
    while len(result) < 2:
        result.append(0)
    return result[0], result[1]


def shift_date(train_date: str, start_time: str, lishi: str) -> Tuple[str, str]:
    """根据 YYYYMMDD 发车日期、发车时间和历时计算 (出发日期, 到达日期)"""
    try:
        day = datetime.strptime(train_date, "%Y%m%d")
    except (TypeError, ValueError):
        return "", ""
    start_hour, start_minute = parse_hhmm(start_time)
    duration_hour, duration_minute = parse_hhmm(lishi)
    start = day + timedelta(hours=start_hour, minutes=start_minute)
    arrive = start + timedelta(hours=duration_hour, minutes=duration_minute)
    return start.strftime("%Y-%m-%d"), arrive.strftime("%Y-%m-%d")
