from __future__ import annotations

import logging
import uuid

from messenger_service.application.dto.conversation import ConversationSummary, CreateGroupDTO
from messenger_service.application.dto.principal import Principal
from messenger_service.application.exceptions import InvalidPayloadError, NotFoundError
from messenger_service.application.policies.permissions import assert_conversation_access
from messenger_service.application.uow import UnitOfWork
from messenger_service.domain.entities.conversation import Conversation

logger = logging.getLogger(__name__)


async def _assert_users_exist(user_ids: list[uuid.UUID], uow: UnitOfWork) -> None:
    found = {u.id for u in await uow.users.get_many(user_ids)}
    missing = [str(uid) for uid in user_ids if uid not in found]
    if missing:
        raise NotFoundError(f"Users not found: {', '.join(missing)}")


async def find_or_create_direct_conversation(
    principal: Principal,
    participant_id: uuid.UUID,
    uow: UnitOfWork,
) -> tuple[Conversation, bool]:
    """Return the 1:1 conversation between the caller and ``participant_id``, creating it once.

    Returns (conversation, created) where created=True if a new conversation was made.
    """
    if participant_id == principal.user_id:
        raise InvalidPayloadError("A direct conversation needs two different users")

    existing = await uow.conversations.get_direct(principal.user_id, participant_id)
    if existing is not None:
        return existing, False

    await _assert_users_exist([principal.user_id, participant_id], uow)

    conversation, created = await uow.conversations_w.create_direct_if_not_exists(
        principal.user_id, participant_id,
    )
    if created:
        await uow.commit()
        logger.info(
            "Created direct conversation %s between %s and %s",
            conversation.id, principal.user_id, participant_id,
        )
    return conversation, created


async def create_group_conversation(
    principal: Principal,
    data: CreateGroupDTO,
    uow: UnitOfWork,
) -> Conversation:
    name = data.name.strip()
    if not name:
        raise InvalidPayloadError("Group conversations require a name")

    # creator first, duplicates dropped, order kept
    participant_ids = list(dict.fromkeys([principal.user_id, *data.participant_ids]))
    if len(participant_ids) < 2:
        raise InvalidPayloadError("A conversation needs at least two participants")

    await _assert_users_exist(participant_ids, uow)

    conversation = await uow.conversations_w.create_group(name, participant_ids)
    await uow.commit()
    logger.info("Created group conversation %s with %d participants", conversation.id, len(participant_ids))
    return conversation


async def list_user_conversations(
    principal: Principal,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    """The caller's conversations with last message, unread count and other participants."""
    conversations = await uow.conversations.list_for_user(principal.user_id)

    others = {
        uid for conv in conversations for uid in conv.other_participants(principal.user_id)
    }
    users = {u.id: u for u in await uow.users.get_many(others)}

    summaries: list[ConversationSummary] = []
    for conv in conversations:
        last_message = await uow.messages.get_last(conv.id)
        read_state = await uow.read_state.get(conv.id, principal.user_id)
        unread = await uow.messages.count_unread(
            conv.id,
            principal.user_id,
            read_state.last_read_at if read_state else None,
        )
        summaries.append(
            ConversationSummary(
                conversation=conv,
                last_message=last_message,
                unread_count=unread,
                other_participants=[
                    users[uid] for uid in conv.other_participants(principal.user_id) if uid in users
                ],
            )
        )

    summaries.sort(
        key=lambda s: (s.last_message.created_at if s.last_message else s.conversation.updated_at),
        reverse=True,
    )
    return summaries


async def get_conversation(
    conversation_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    return assert_conversation_access(principal.user_id, conversation)
