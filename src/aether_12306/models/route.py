"""经停站数据模型"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RouteStationInfo(BaseModel):
    """经停站信息，首站额外带有列车等级、服务类型、终到站"""
    model_config = ConfigDict(frozen=True)

    station_name: str = Field(..., description="车站名称")
    station_train_code: str = Field("", description="车次")
    arrive_time: str = Field("", description="到达时间")
    start_time: str = Field("", description="出发时间")
    lishi: str = Field("", description="运行时间")
    arrive_day_str: str = Field("", description="到达日（当日/次日…）")
    train_class_name: Optional[str] = Field(None, description="列车等级")
    service_type: Optional[str] = Field(None, description="服务类型")
    end_station_name: Optional[str] = Field(None, description="终到站")
