"""Persist-then-broadcast delivery of chat messages."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from messenger_service.application.dto.message import SendMessageDTO
from messenger_service.application.uow import UoWFactory
from messenger_service.domain.entities.message import MessageWithSender
from messenger_service.domain.value_objects.enums import MessageType
from messenger_service.infrastructure.ws.protocol import MessageEvent, MessagePayload
from messenger_service.infrastructure.ws.registry import ConnectionRegistry
from messenger_service.services import message_service

logger = logging.getLogger(__name__)


class MessageRouter:
    """Validates and stores a message, then fans it out to every participant.

    The sender is included so the author's other tabs and devices stay in
    sync. Participants without a live connection pick the message up from
    history; there is no redelivery.
    """

    def __init__(self, registry: ConnectionRegistry, uow_factory: UoWFactory) -> None:
        self._registry = registry
        self._uow_factory = uow_factory

    async def submit(
        self,
        conversation_id: UUID,
        sender_id: UUID,
        content: str | None,
        msg_type: MessageType | str = MessageType.TEXT,
        metadata: dict[str, Any] | None = None,
    ) -> MessageWithSender:
        data = SendMessageDTO(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            type=msg_type,
            metadata=metadata,
        )
        # NotFound / Forbidden / InvalidPayload / Persistence abort here, before any broadcast
        async with self._uow_factory() as uow:
            item, conversation = await message_service.send_message(data, uow)

        delivered = await self._registry.send_to_users(
            conversation.participant_ids,
            MessageEvent(data=MessagePayload.from_entity(item)),
        )
        logger.debug(
            "Message %s in %s delivered to %d connection(s)",
            item.message.id, conversation_id, delivered,
        )
        return item
