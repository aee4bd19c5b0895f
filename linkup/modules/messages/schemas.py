from pydantic import BaseModel, field_validator
from typing import Optional, Union, Dict, Any
from datetime import datetime

from linkup.modules.messages.models import MESSAGE_MAX_LENGTH


class MessageCreate(BaseModel):
    id_receiver: int
    content: str
    message_type: str = "text"

    @field_validator("content")
    @classmethod
    def content_length(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message content is required")
        if len(value) > MESSAGE_MAX_LENGTH:
            raise ValueError(f"Message must be at most {MESSAGE_MAX_LENGTH} characters")
        return value


class AdminMessageCreate(MessageCreate):
    id_sender: int


class MessageResponse(BaseModel):
    id_message: int
    id_sender: int
    id_receiver: int
    content: str
    message_type: Optional[str] = "text"
    is_read: bool = False
    send_at: Optional[Union[datetime, str]] = None

    class Config:
        from_attributes = True


class ConversationSummary(BaseModel):
    correspondent_id: int
    correspondent: Optional[Dict[str, Any]] = None
    last_message: MessageResponse
    unread_count: int = 0
