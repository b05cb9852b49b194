from __future__ import annotations

from typing import Protocol
from uuid import UUID

from messenger_service.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...

    async def get_direct(self, user_a: UUID, user_b: UUID) -> Conversation | None:
        """Find the non-group conversation between two users, in either order."""
        ...

    async def list_for_user(self, user_id: UUID) -> list[Conversation]:
        """Conversations the user participates in, most recently updated first."""
        ...


class ConversationWriter(Protocol):
    async def create_group(
        self, name: str, participant_ids: list[UUID]
    ) -> Conversation: ...

    async def create_direct_if_not_exists(
        self, user_a: UUID, user_b: UUID
    ) -> tuple[Conversation, bool]:
        """Insert the 1:1 conversation. Return (conversation, created). On conflict → return existing."""
        ...
