"""已保存植物与养护日志数据模型。"""
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JournalEntry(BaseModel):
    """植物日志条目（备注、浇水记录、识别分析等）。"""
    id: str = Field(..., description="条目 ID")
    type: str = Field(..., description="类型，如 note / watering / analysis")
    title: str = Field("", description="标题")
    description: str = Field("", description="描述")
    data: Dict[str, Any] = Field(default_factory=dict, description="条目附带数据")
    images: List[str] = Field(default_factory=list, description="图片 URI")
    date: datetime = Field(..., description="条目日期")
    created_at: datetime = Field(..., description="创建时间")


class SavedPlant(BaseModel):
    """用户收藏的植物。"""
    id: str = Field(..., description="植物唯一 ID")
    common_name: str = Field("Unknown Plant", description="常用名")
    scientific_name: str = Field("", description="学名")
    family: str = Field("", description="科")
    genus: str = Field("", description="属")
    image_uri: Optional[str] = Field(None, description="拍照/上传的图片")
    search_type: str = Field("image", description="识别方式：image / text")
    search_term: str = Field("", description="文字搜索时的原始关键词")
    probability: Optional[float] = Field(None, description="识别置信度")
    journal_entries: List[JournalEntry] = Field(default_factory=list, description="养护日志")
    saved_at: Optional[datetime] = Field(None, description="收藏时间")

    model_config = ConfigDict(use_enum_values=True)


def create_standard_plant(
    identification: Optional[dict] = None,
    ai_info: Optional[dict] = None,
    image_uri: Optional[str] = None,
    search_type: str = "image",
    search_term: str = "",
    plant_id: Optional[str] = None,
) -> SavedPlant:
    """
    由识别结果与 AI 信息组装统一的植物记录。
    identification 为识别接口返回（取 suggestions[0]），ai_info 为 Gemini 返回的 plantInfo。
    """
    suggestion = ((identification or {}).get("suggestions") or [{}])[0]
    details = suggestion.get("plant_details") or {}
    ai = ai_info or {}
    common_names = details.get("common_names") or []
    common_name = (
        ai.get("commonName")
        or (common_names[0] if common_names else None)
        or search_term
        or "Unknown Plant"
    )
    return SavedPlant(
        id=plant_id or str(int(time.time() * 1000)),
        common_name=common_name,
        scientific_name=ai.get("scientificName") or details.get("scientific_name") or "",
        family=details.get("family") or ai.get("family") or "",
        genus=details.get("genus") or ai.get("genus") or "",
        image_uri=image_uri,
        search_type=search_type,
        search_term=search_term,
        probability=suggestion.get("probability"),
    )


def create_journal_entry(
    entry_type: str,
    data: Optional[dict] = None,
    images: Optional[List[str]] = None,
    title: str = "",
    description: str = "",
    date: Optional[datetime] = None,
) -> JournalEntry:
    """创建一条日志。type 为 analysis 时 data 存放识别分析结果。"""
    now = datetime.now(timezone.utc)
    return JournalEntry(
        id=secrets.token_hex(8),
        type=entry_type,
        title=title,
        description=description,
        data=data or {},
        images=list(images or []),
        date=date or now,
        created_at=now,
    )
