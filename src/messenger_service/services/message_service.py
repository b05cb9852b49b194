from __future__ import annotations

import uuid

from messenger_service.application.dto.message import MessagePage, SendMessageDTO
from messenger_service.application.dto.principal import Principal
from messenger_service.application.pagination import encode_cursor
from messenger_service.application.policies.payload import build_new_message
from messenger_service.application.policies.permissions import assert_conversation_access
from messenger_service.application.uow import UnitOfWork
from messenger_service.domain.entities.conversation import Conversation
from messenger_service.domain.entities.message import MessageWithSender


async def send_message(
    data: SendMessageDTO,
    uow: UnitOfWork,
) -> tuple[MessageWithSender, Conversation]:
    """Validate and persist a message.

    Every check runs before the first write; the caller fans the result out
    only after this returns, i.e. after commit.
    """
    conversation = assert_conversation_access(
        data.sender_id, await uow.conversations.get_by_id(data.conversation_id),
    )

    new_message = build_new_message(
        data.conversation_id, data.sender_id, data.content, data.type, data.metadata,
    )

    message = await uow.messages_w.create(new_message)
    sender = await uow.users.get_by_id(data.sender_id)
    await uow.commit()

    return MessageWithSender(message=message, sender=sender), conversation


async def list_messages(
    conversation_id: uuid.UUID,
    principal: Principal,
    cursor: str | None,
    limit: int,
    uow: UnitOfWork,
) -> MessagePage:
    conversation = await uow.conversations.get_by_id(conversation_id)
    assert_conversation_access(principal.user_id, conversation)

    messages = await uow.messages.list_messages(conversation_id, cursor=cursor, limit=limit)
    senders = {u.id: u for u in await uow.users.get_many({m.sender_id for m in messages})}

    items = [MessageWithSender(message=m, sender=senders.get(m.sender_id)) for m in messages]
    # the newest item is the resume point for "what did I miss" reads
    next_cursor = encode_cursor(messages[-1].created_at, messages[-1].id) if messages else cursor
    return MessagePage(items=items, next_cursor=next_cursor)
