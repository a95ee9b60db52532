"""车站数据模型"""

from pydantic import BaseModel, ConfigDict, Field


class Station(BaseModel):
    """车站信息模型，对应 station_name.js 中的一条 10 字段记录"""
    model_config = ConfigDict(frozen=True)

    station_id: str = Field("", description="记录标识，如 @bjb")
    name: str = Field(..., serialization_alias="station_name", description="车站名称")
    telecode: str = Field(..., serialization_alias="station_code", description="电报码")
    pinyin: str = Field("", serialization_alias="station_pinyin", description="拼音")
    py_short: str = Field("", serialization_alias="station_short", description="拼音简写")
    station_index: str = Field("", description="序号")
    num: str = Field("", serialization_alias="code", description="车站编号")
    city: str = Field("", description="所属城市")
    r1: str = Field("", description="保留字段")
    r2: str = Field("", description="保留字段")


class StationRef(BaseModel):
    """索引中的车站引用"""
    model_config = ConfigDict(frozen=True)

    telecode: str = Field(..., serialization_alias="station_code", description="电报码")
    name: str = Field(..., serialization_alias="station_name", description="车站名称")
