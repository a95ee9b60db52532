"""配置管理"""

import logging
from typing import Optional
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    """应用配置"""
    server_host: str = Field(default="0.0.0.0", description="服务器主机地址")
    server_port: int = Field(default=8787, description="服务器端口")
    debug: bool = Field(default=False, description="调试模式")
    log_level: str = Field(default="INFO", description="日志级别")

    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="用户代理字符串"
    )
    request_timeout: float = Field(default=30, description="请求超时时间（秒）")
    verify_ssl: bool = Field(default=False, description="是否校验12306证书")

    api_base: str = Field(default="https://kyfw.12306.cn", description="12306接口地址")
    search_api_base: str = Field(default="https://search.12306.cn", description="车次搜索接口地址")
    web_url: str = Field(default="https://www.12306.cn/index/", description="12306首页地址")
    lcquery_init_url: str = Field(
        default="https://kyfw.12306.cn/otn/lcQuery/init",
        description="中转查询初始化页面"
    )

    cookie_ttl_seconds: int = Field(default=600, description="会话Cookie缓存时间（秒）")
    interline_max_pages: int = Field(default=20, description="中转查询最大翻页次数")
    station_js_path: Optional[str] = Field(
        default=None,
        description="本地 station_name.js 快照路径，网络获取失败时使用"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """获取配置实例"""
    global _settings
    if _settings is None:
        env_file_path = Path(".env")
        if not env_file_path.exists():
            logger.warning(f"环境配置文件 {env_file_path.absolute()} 不存在，使用默认配置")
        else:
            logger.info(f"加载环境配置文件: {env_file_path.absolute()}")

        try:
            _settings = Settings()
            logger.info(f"配置加载成功 - 主机: {_settings.server_host}, 端口: {_settings.server_port}, 调试模式: {_settings.debug}, 日志级别: {_settings.log_level}")
        except Exception as e:
            logger.error(f"配置加载失败: {e}，使用默认配置")
            _settings = Settings.model_validate({})

    return _settings
