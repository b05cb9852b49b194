from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from messenger_service.domain.entities.user import User


@dataclass(frozen=True, slots=True)
class NewMessage:
    """A validated message that has not been persisted yet (no id, no timestamp)."""

    conversation_id: UUID
    sender_id: UUID
    content: str
    type: str
    metadata: dict[str, Any] | None


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    type: str
    metadata: dict[str, Any] | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class MessageWithSender:
    message: Message
    sender: User | None
