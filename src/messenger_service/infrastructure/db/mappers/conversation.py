from __future__ import annotations

from messenger_service.domain.entities.conversation import Conversation
from messenger_service.infrastructure.db.models.conversation import ConversationModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        name=model.name,
        is_group=model.is_group,
        participant_ids=tuple(p.user_id for p in model.participants),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
