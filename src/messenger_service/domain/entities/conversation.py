from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Conversation:
    id: UUID
    name: str | None
    is_group: bool
    participant_ids: tuple[UUID, ...]
    created_at: datetime
    updated_at: datetime

    def has_participant(self, user_id: UUID) -> bool:
        return user_id in self.participant_ids

    def other_participants(self, user_id: UUID) -> tuple[UUID, ...]:
        return tuple(p for p in self.participant_ids if p != user_id)
