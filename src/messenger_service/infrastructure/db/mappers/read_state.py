from __future__ import annotations

from messenger_service.domain.entities.read_state import ReadState
from messenger_service.infrastructure.db.models.read_state import ReadStateModel


def model_to_entity(model: ReadStateModel) -> ReadState:
    return ReadState(
        conversation_id=model.conversation_id,
        user_id=model.user_id,
        last_read_message_id=model.last_read_message_id,
        last_read_at=model.last_read_at,
    )
