from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from messenger_service.domain.entities.message import MessageWithSender
from messenger_service.domain.value_objects.enums import MessageType


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    conversation_id: UUID
    sender_id: UUID
    content: str | None = None
    type: MessageType | str = MessageType.TEXT
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class MessagePage:
    items: list[MessageWithSender]
    next_cursor: str | None
