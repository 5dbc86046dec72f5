"""养护提醒数据模型。"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CareType(str, Enum):
    """养护类型。"""
    WATERING = "watering"        # 浇水
    FERTILIZING = "fertilizing"  # 施肥
    PRUNING = "pruning"          # 修剪
    REPOTTING = "repotting"      # 换盆


class ReminderStatus(str, Enum):
    """提醒状态，由启用标记、下次时间与所属植物推导。"""
    SCHEDULED = "scheduled"  # 启用且未到期
    DUE = "due"              # 启用且已到期
    DISABLED = "disabled"
    ORPHANED = "orphaned"    # 所属植物已删除，待清理


class DueLabel(str, Enum):
    """界面展示用的到期提示。"""
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    UPCOMING = "upcoming"


class Reminder(BaseModel):
    """单条循环养护提醒。"""
    id: str = Field(..., description="提醒 ID")
    plant_id: str = Field(..., description="所属植物 ID，植物删除后可能悬空")
    plant_name: Optional[str] = Field(None, description="植物名称，用于通知文案")
    care_type: CareType = Field(..., description="养护类型")
    frequency_days: int = Field(..., gt=0, description="间隔天数")
    next_due: datetime = Field(..., description="下次到期时间")
    reminder_time: Optional[datetime] = Field(None, description="提醒时刻，仅取时分")
    enabled: bool = Field(True, description="是否启用")
    notes: Optional[str] = Field(None, description="备注")
    last_completed: Optional[datetime] = Field(None, description="上次完成时间")
    last_skipped: Optional[datetime] = Field(None, description="上次跳过时间")
    created_at: Optional[datetime] = Field(None, description="创建时间")

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("plant_id", mode="before")
    @classmethod
    def _plant_id_as_str(cls, v):
        return v if v is None else str(v)

    @field_validator(
        "next_due", "reminder_time", "last_completed", "last_skipped", "created_at", mode="after"
    )
    @classmethod
    def _assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # 无时区的时间一律按 UTC 处理
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
