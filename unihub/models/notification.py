# unihub/models/notification.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid


class NotificationType(str, Enum):
    SYSTEM = "system"
    EXAM = "exam"
    EVENT = "event"
    NOTICE = "notice"


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    message: str
    type: NotificationType = NotificationType.SYSTEM
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )
    read: bool = False
    action_url: Optional[str] = Field(default=None, alias="actionUrl")

    def to_record(self) -> dict:
        """Serialize to the persisted (camelCase, JSON-safe) shape."""
        return self.model_dump(mode="json", by_alias=True)
