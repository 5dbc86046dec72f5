"""植物信息：先查缓存，未命中再请求 Gemini 并写入缓存。"""
import json
import re
import sys
from typing import Optional

from plant_care.plantinfo.cache import PlantInfoCache
from plant_care.plantinfo.client import GeminiClient
from plant_care.plantinfo.prompt import build_plant_info_prompt

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n([\s\S]*?)\n```")


def parse_plant_info(text: str) -> tuple[Optional[dict], Optional[str]]:
    """解析模型返回的 JSON，兼容 ```json 代码块包裹。"""
    match = _FENCED_JSON.search(text)
    payload = match.group(1) if match else text
    try:
        data = json.loads(payload)
    except ValueError as e:
        return None, f"无法解析植物信息: {e}"
    if not isinstance(data, dict):
        return None, "植物信息格式异常"
    return data, None


class PlantInfoService:
    """获取植物的综合信息（基本信息、养护指南、季节养护等）。"""

    def __init__(self, cache: PlantInfoCache, generator: Optional[GeminiClient] = None):
        self.cache = cache
        self.generator = generator or GeminiClient()

    def get_plant_info(self, plant_name: str) -> tuple[Optional[dict], Optional[str]]:
        """返回 (信息, None) 或 (None, 错误信息)。"""
        name = (plant_name or "").strip()
        if not name:
            return None, "植物名称为空"
        cached = self.cache.get(name)
        if cached is not None:
            return cached, None
        text, err = self.generator.generate(build_plant_info_prompt(name))
        if err:
            print(f"[养护-Gemini] 获取 {name} 信息失败: {err}", file=sys.stderr, flush=True)
            return None, f"获取植物信息失败: {err}"
        info, err = parse_plant_info(text)
        if err:
            return None, err
        self.cache.set(name, info)
        return info, None
