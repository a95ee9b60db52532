"""下载 station_name.js 保存为本地快照，在线获取失败时 StationService 会使用它"""

import asyncio
import os
import sys
import logging
from datetime import datetime, timezone
from pathlib import Path

import aiofiles

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aether_12306.services.http_client import HttpClient
from aether_12306.services.station_service import StationService, extract_station_raw_data, parse_stations_data
from aether_12306.utils.config import get_settings

LOCAL_PATH = "src/aether_12306/resources/station_name.js"

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


async def fetch_station_js(save_path: str) -> bool:
    settings = get_settings()
    async with HttpClient(settings) as client:
        service = StationService(client)
        text = await client.fetch(service.direct_js_url, response_kind="text")
    if not text:
        return False
    os.makedirs(os.path.dirname(save_path), exist_ok=True)
    async with aiofiles.open(save_path, "w", encoding="utf-8") as f:
        await f.write(text)
    return True


async def update_stations():
    save_path = get_settings().station_js_path or LOCAL_PATH
    print("🚀 12306车站信息更新工具")
    print("=" * 50)
    print(f"⏰ 更新时间: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} (UTC)")
    print(f"💾 保存路径: {save_path}")
    print("=" * 50)
    print("📡 正在连接12306官网...")
    if await fetch_station_js(save_path):
        print("✅ 已成功获取12306最新JS数据!")
    else:
        print("❌ 获取失败，使用本地 station_name.js 文件继续解析...")
        if not os.path.exists(save_path):
            print("❌ 本地 station_name.js 文件不存在，无法继续。")
            sys.exit(1)
    print("🔍 正在解析车站数据...")
    async with aiofiles.open(save_path, "r", encoding="utf-8") as f:
        stations = parse_stations_data(extract_station_raw_data(await f.read()))
    print(f"✅ 共解析 {len(stations)} 个车站，示例：")
    for station in list(stations.values())[:10]:
        print(f"    - {station.name}（{station.telecode}，{station.city}）")
    print("✨ 车站信息更新完成！")


if __name__ == "__main__":
    asyncio.run(update_stations())
