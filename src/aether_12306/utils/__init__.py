"""工具包"""

from .config import get_settings
from .date_utils import check_date, get_current_date

__all__ = ["get_settings", "check_date", "get_current_date"]
