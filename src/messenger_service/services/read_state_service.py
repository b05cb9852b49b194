from __future__ import annotations

import uuid

from messenger_service.application.dto.principal import Principal
from messenger_service.application.exceptions import NotFoundError
from messenger_service.application.policies.permissions import assert_conversation_access
from messenger_service.application.uow import UnitOfWork


async def mark_read(
    conversation_id: uuid.UUID,
    principal: Principal,
    last_message_id: uuid.UUID,
    uow: UnitOfWork,
) -> None:
    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(principal.user_id, conversation)

    message = await uow.messages.get_by_id(last_message_id)
    if message is None or message.conversation_id != conversation_id:
        raise NotFoundError("Message not found in this conversation")

    await uow.read_state_w.upsert_last_read(
        conversation_id,
        principal.user_id,
        message.id,
        message.created_at,
    )
    await uow.commit()
