from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from messenger_service.domain.entities.read_state import ReadState


class ReadStateReader(Protocol):
    async def get(self, conversation_id: UUID, user_id: UUID) -> ReadState | None: ...


class ReadStateWriter(Protocol):
    async def upsert_last_read(
        self,
        conversation_id: UUID,
        user_id: UUID,
        last_message_id: UUID,
        last_read_at: datetime,
    ) -> None: ...
