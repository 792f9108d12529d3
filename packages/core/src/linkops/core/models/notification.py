"""Notification domain model"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import NotificationType


class Notification(BaseModel):
    """One row per (recipient, event)"""

    id: str = Field(description="Unique id, ULID")
    user_id: str
    type: NotificationType = NotificationType.BACKLINK_REPORT
    title: str
    message: str
    data: dict = Field(default_factory=dict)
    read: bool = False
    created_at: datetime
