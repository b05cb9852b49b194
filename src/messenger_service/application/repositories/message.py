from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from messenger_service.domain.entities.message import Message, NewMessage


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_messages(
        self,
        conversation_id: UUID,
        *,
        cursor: str | None = None,
        limit: int = 50,
    ) -> list[Message]:
        """Ascending by (created_at, id). Without cursor: the latest ``limit``; with cursor: strictly after it."""
        ...

    async def get_last(self, conversation_id: UUID) -> Message | None: ...

    async def count_unread(
        self,
        conversation_id: UUID,
        user_id: UUID,
        after: datetime | None,
    ) -> int: ...


class MessageWriter(Protocol):
    async def create(self, message: NewMessage) -> Message:
        """Persist the message, assigning id and created_at, and move the conversation's updated_at forward."""
        ...
