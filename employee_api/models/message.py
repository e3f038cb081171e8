# employee_api/models/message.py - Direct message schemas

from typing import Literal

from pydantic import BaseModel, Field

MessagePriority = Literal["low", "normal", "high"]


class MessageCreate(BaseModel):
    recipient_id: int
    message: str = Field(min_length=1)
    subject: str | None = None
    priority: MessagePriority = "normal"
    reply_to_id: int | None = None


class ConversationSummary(BaseModel):
    conversation_id: str
    participant: str
    participant_id: int
    participant_role: str
    last_message: str
    last_message_time: str
    unread_count: int
