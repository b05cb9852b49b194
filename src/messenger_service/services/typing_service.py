from __future__ import annotations

from uuid import UUID

from messenger_service.application.policies.permissions import assert_conversation_exists
from messenger_service.application.uow import UoWFactory
from messenger_service.infrastructure.ws.protocol import TypingEvent
from messenger_service.infrastructure.ws.registry import ConnectionRegistry


class TypingCoordinator:
    """Stateless relay of typing indicators to the other participants.

    Nothing is stored; debouncing and the inactivity timeout belong to the client.
    """

    def __init__(self, registry: ConnectionRegistry, uow_factory: UoWFactory) -> None:
        self._registry = registry
        self._uow_factory = uow_factory

    async def set_typing(self, conversation_id: UUID, user_id: UUID, is_typing: bool) -> int:
        async with self._uow_factory() as uow:
            conversation = assert_conversation_exists(
                await uow.conversations.get_by_id(conversation_id)
            )

        return await self._registry.send_to_users(
            conversation.participant_ids,
            TypingEvent(conversation_id=conversation_id, sender_id=user_id, is_typing=is_typing),
            exclude=user_id,
        )
