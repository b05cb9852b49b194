from __future__ import annotations

from uuid import UUID

from messenger_service.application.exceptions import ForbiddenError, NotFoundError
from messenger_service.domain.entities.conversation import Conversation


def assert_conversation_access(
    user_id: UUID,
    conversation: Conversation | None,
) -> Conversation:
    """Raise if conversation doesn't exist or the user is not one of its participants."""
    if conversation is None:
        raise NotFoundError("Conversation not found")

    if not conversation.has_participant(user_id):
        raise ForbiddenError("Not a participant of this conversation")

    return conversation


def assert_conversation_exists(conversation: Conversation | None) -> Conversation:
    if conversation is None:
        raise NotFoundError("Conversation not found")
    return conversation
