"""12306 客户端异常定义"""

from typing import Dict, NoReturn, Type


class Error12306(Exception):
    """12306 核心异常基类，code 为对外暴露的错误类型字符串"""

    status_code = 500

    def __init__(self, code: str, message: str = "") -> None:
        self.code = code
        super().__init__(message or code)


class ClientInputError(Error12306):
    """用户输入可修正的错误（日期、车站、车次等）"""

    status_code = 400


class UpstreamError(Error12306):
    """12306 上游接口异常或数据格式变化"""

    status_code = 502


CLIENT_ERROR_CODES = (
    "date_before_today",
    "station_not_found",
    "train_not_found",
    "route_not_found",
    "interline_no_result",
)

UPSTREAM_ERROR_CODES = (
    "cookie_failed",
    "tickets_request_failed",
    "interline_request_failed",
    "route_request_failed",
    "stations_init_failed",
    "station_js_not_found",
    "station_js_request_failed",
    "lcquery_init_failed",
    "lcquery_path_not_found",
)

_ERROR_CLASSES: Dict[str, Type[Error12306]] = {
    **{code: ClientInputError for code in CLIENT_ERROR_CODES},
    **{code: UpstreamError for code in UPSTREAM_ERROR_CODES},
}


def raise_for_code(code: str, message: str = "") -> NoReturn:
    """按错误类型抛出对应的异常子类，未登记的类型抛出基类"""
    raise _ERROR_CLASSES.get(code, Error12306)(code, message)
