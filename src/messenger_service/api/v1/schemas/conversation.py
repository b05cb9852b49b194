from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from messenger_service.api.v1.schemas.common import RequestBody
from messenger_service.api.v1.schemas.message import MessageResponse
from messenger_service.api.v1.schemas.user import UserResponse
from messenger_service.application.dto.conversation import ConversationSummary


class CreateDirectConversationRequest(RequestBody):
    participant_id: UUID


class CreateGroupConversationRequest(RequestBody):
    name: str = Field(..., min_length=1, max_length=200)
    participant_ids: list[UUID] = Field(..., min_length=1)


class ConversationResponse(BaseModel):
    id: UUID
    name: str | None
    is_group: bool
    participant_ids: list[UUID]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConversationSummaryResponse(ConversationResponse):
    last_message: MessageResponse | None
    unread_count: int
    other_participants: list[UserResponse]

    @classmethod
    def from_summary(cls, summary: ConversationSummary) -> ConversationSummaryResponse:
        conv = summary.conversation
        return cls(
            id=conv.id,
            name=conv.name,
            is_group=conv.is_group,
            participant_ids=list(conv.participant_ids),
            created_at=conv.created_at,
            updated_at=conv.updated_at,
            last_message=(
                MessageResponse.from_entity(summary.last_message) if summary.last_message else None
            ),
            unread_count=summary.unread_count,
            other_participants=[
                UserResponse.model_validate(u, from_attributes=True)
                for u in summary.other_participants
            ],
        )
