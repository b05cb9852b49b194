from __future__ import annotations

from messenger_service.domain.entities.message import Message
from messenger_service.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        sender_id=model.sender_id,
        content=model.content,
        type=model.type,
        metadata=model.metadata_,
        created_at=model.created_at,
    )
