from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response, status

from messenger_service.api.deps import CurrentPrincipal, UoWDep
from messenger_service.api.v1.schemas.conversation import (
    ConversationResponse,
    ConversationSummaryResponse,
    CreateDirectConversationRequest,
    CreateGroupConversationRequest,
)
from messenger_service.application.dto.conversation import CreateGroupDTO
from messenger_service.services import conversation_service

router = APIRouter(prefix="/api/v1/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationSummaryResponse])
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[ConversationSummaryResponse]:
    summaries = await conversation_service.list_user_conversations(principal, uow)
    return [ConversationSummaryResponse.from_summary(s) for s in summaries]


@router.post("", response_model=ConversationResponse)
async def find_or_create_direct_conversation(
    body: CreateDirectConversationRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    response: Response,
) -> ConversationResponse:
    conv, created = await conversation_service.find_or_create_direct_conversation(
        principal, body.participant_id, uow,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.post("/group", response_model=ConversationResponse, status_code=201)
async def create_group_conversation(
    body: CreateGroupConversationRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.create_group_conversation(
        principal,
        CreateGroupDTO(name=body.name, participant_ids=body.participant_ids),
        uow,
    )
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.get_conversation(conversation_id, principal, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)
