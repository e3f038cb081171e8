# employee_api/models/notification.py - Notification schemas

from typing import Any, Literal

from pydantic import BaseModel, Field

NotificationType = Literal["INFO", "WARNING", "CRITICAL", "MESSAGE", "APPROVAL"]


class NotificationCreate(BaseModel):
    user_id: int
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: NotificationType = "INFO"
    link_to: str | None = None
    action_url: str | None = None
    metadata: dict[str, Any] | None = None
