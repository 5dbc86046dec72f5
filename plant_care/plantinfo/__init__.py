"""AI 植物信息：Gemini 客户端与本地缓存。"""
from plant_care.plantinfo.cache import PlantInfoCache, normalize_key
from plant_care.plantinfo.client import GeminiClient
from plant_care.plantinfo.prompt import PLANT_INFO_SCHEMA, build_plant_info_prompt
from plant_care.plantinfo.service import PlantInfoService, parse_plant_info

__all__ = [
    "PlantInfoCache",
    "normalize_key",
    "GeminiClient",
    "PLANT_INFO_SCHEMA",
    "build_plant_info_prompt",
    "PlantInfoService",
    "parse_plant_info",
]
