"""12306 火车票数据客户端"""

from .exceptions import ClientInputError, Error12306, UpstreamError
from .services import Client12306

__version__ = "1.0.0"

__all__ = ["Client12306", "Error12306", "ClientInputError", "UpstreamError", "__version__"]
