"""车票数据模型"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Price(BaseModel):
    """席别票价与余票"""
    model_config = ConfigDict(frozen=True)

    seat_name: str = Field(..., description="席别名称")
    short: str = Field(..., description="席别简写")
    seat_type_code: str = Field(..., description="席别代码")
    num: str = Field("", description="余票")
    price: float = Field(..., description="票价（元）")
    discount: Optional[int] = Field(None, description="折扣百分比")


class TicketInfo(BaseModel):
    """单程车次信息"""
    model_config = ConfigDict(frozen=True)

    train_no: str = Field(..., description="列车编号")
    start_train_code: str = Field(..., description="车次")
    start_date: str = Field("", description="出发日期")
    arrive_date: str = Field("", description="到达日期")
    start_time: str = Field(..., description="出发时间")
    arrive_time: str = Field(..., description="到达时间")
    lishi: str = Field(..., description="历时 HH:MM")
    from_station: str = Field(..., description="出发站名")
    to_station: str = Field(..., description="到达站名")
    from_station_telecode: str = Field(..., description="出发站电报码")
    to_station_telecode: str = Field(..., description="到达站电报码")
    prices: List[Price] = Field(default_factory=list, description="票价列表")
    dw_flag: List[str] = Field(default_factory=list, description="列车特征")


class InterlineInfo(BaseModel):
    """中转换乘方案"""
    model_config = ConfigDict(frozen=True)

    lishi: str = Field(..., description="总历时 HH:MM")
    start_time: str = Field(..., description="出发时间")
    start_date: str = Field("", description="出发日期")
    middle_date: str = Field("", description="中转日期")
    arrive_date: str = Field("", description="到达日期")
    arrive_time: str = Field(..., description="到达时间")
    from_station_code: str = Field("", description="出发站电报码")
    from_station_name: str = Field("", description="出发站")
    middle_station_code: str = Field("", description="中转站电报码")
    middle_station_name: str = Field("", description="中转站")
    end_station_code: str = Field("", description="到达站电报码")
    end_station_name: str = Field("", description="到达站")
    start_train_code: str = Field("", description="首段车次")
    first_train_no: str = Field("", description="首段列车编号")
    second_train_no: str = Field("", description="次段列车编号")
    train_count: int = Field(0, description="乘车次数")
    ticket_list: List[TicketInfo] = Field(default_factory=list, serialization_alias="ticketList", description="各段车票")
    same_station: bool = Field(False, description="同站换乘")
    same_train: bool = Field(False, description="同车换乘")
    wait_time: str = Field("", description="换乘等候时间")


class TicketQuery(BaseModel):
    """余票查询参数"""
    date: str = Field(..., description="出发日期 (YYYY-MM-DD)")
    from_station: str = Field(..., description="出发站/城市/电报码")
    to_station: str = Field(..., description="到达站/城市/电报码")
    train_filter_flags: str = Field("", description="车次类型筛选，如 GD")
    earliest_start_time: int = Field(0, description="最早出发小时")
    latest_start_time: int = Field(24, description="最晚出发小时（不含）")
    sort_flag: str = Field("", description="startTime / arriveTime / duration")
    sort_reverse: bool = Field(False, description="倒序")
    limited_num: int = Field(0, description="结果数量，0 为不限")


class InterlineQuery(TicketQuery):
    """中转查询参数"""
    middle_station: str = Field("", description="指定中转站")
    show_wz: bool = Field(False, description="是否显示无座车次")
    limited_num: int = Field(10, description="结果数量")
