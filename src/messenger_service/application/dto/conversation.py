from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from messenger_service.domain.entities.conversation import Conversation
from messenger_service.domain.entities.message import Message
from messenger_service.domain.entities.user import User


@dataclass(frozen=True, slots=True)
class CreateGroupDTO:
    name: str
    participant_ids: list[UUID] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """A conversation as seen by one of its participants."""

    conversation: Conversation
    last_message: Message | None
    unread_count: int
    other_participants: list[User]
