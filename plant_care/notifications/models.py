"""本地通知数据模型。"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ScheduledNotification(BaseModel):
    """一条已排期的本地通知。"""
    identifier: str = Field(..., description="通知标识，形如 reminder-<id>")
    reminder_id: str = Field(..., description="对应提醒 ID")
    fire_at: datetime = Field(..., description="触发时间")
    title: str = Field("", description="标题")
    body: str = Field("", description="正文")
    data: Dict[str, Any] = Field(default_factory=dict, description="点击通知时回传的数据")


class NotificationTap(BaseModel):
    """用户点击通知的事件，用于跳回对应植物/提醒。"""
    reminder_id: str = Field(..., description="提醒 ID")
    plant_id: Optional[str] = Field(None, description="植物 ID")
    care_type: Optional[str] = Field(None, description="养护类型")
