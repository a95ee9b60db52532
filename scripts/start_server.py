"""12306 查询服务启动脚本：检查依赖和配置后启动 HTTP 服务"""

import asyncio
import importlib.util
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# 导入名 -> pip 包名
REQUIRED_PACKAGES = {
    "fastapi": "fastapi",
    "uvicorn": "uvicorn",
    "httpx": "httpx",
    "pydantic": "pydantic",
    "pydantic_settings": "pydantic-settings",
    "pytz": "pytz",
    "aiofiles": "aiofiles",
}


def check_environment() -> bool:
    if sys.version_info < (3, 10):
        logger.error(f"Python版本过低: {sys.version_info}，需要Python 3.10+")
        return False
    missing = [pkg for module, pkg in REQUIRED_PACKAGES.items() if importlib.util.find_spec(module) is None]
    if missing:
        logger.error(f"❌ 缺少必要包: {', '.join(missing)}")
        logger.error("请运行: pip install -e .")
        return False
    return True


def report_settings() -> None:
    """启动前打印上游地址和本地车站快照状态"""
    from aether_12306.utils.config import get_settings

    settings = get_settings()
    logger.info(f"12306接口: {settings.api_base}，中转初始化页: {settings.lcquery_init_url}")
    snapshot = settings.station_js_path
    if not snapshot:
        logger.info("未配置本地车站快照，车站数据只从网络获取")
    elif os.path.exists(snapshot):
        logger.info(f"本地车站快照: {snapshot}")
    else:
        logger.warning(f"本地车站快照不存在: {snapshot}，可运行 scripts/update_stations.py 生成")


def main():
    if not check_environment():
        sys.exit(1)
    report_settings()

    from aether_12306.server import main_server

    asyncio.run(main_server())


if __name__ == "__main__":
    main()
