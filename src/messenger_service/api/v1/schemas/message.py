from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from messenger_service.api.v1.schemas.common import RequestBody
from messenger_service.api.v1.schemas.user import UserResponse
from messenger_service.domain.entities.message import Message, MessageWithSender


class SendMessageRequest(RequestBody):
    content: str | None = None
    message_type: str = "text"
    metadata: dict[str, Any] | None = None


class MarkReadRequest(RequestBody):
    message_id: UUID


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    message_type: str
    metadata: dict[str, Any] | None
    created_at: datetime

    @classmethod
    def from_entity(cls, message: Message) -> MessageResponse:
        return cls(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            content=message.content,
            message_type=message.type,
            metadata=message.metadata,
            created_at=message.created_at,
        )


class MessageWithSenderResponse(MessageResponse):
    sender: UserResponse | None

    @classmethod
    def from_item(cls, item: MessageWithSender) -> MessageWithSenderResponse:
        base = MessageResponse.from_entity(item.message)
        return cls(
            **base.model_dump(),
            sender=UserResponse.model_validate(item.sender, from_attributes=True) if item.sender else None,
        )
