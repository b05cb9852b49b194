from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status

from messenger_service.api.deps import CurrentPrincipal, MessageRouterDep, UoWDep
from messenger_service.api.v1.schemas.common import PaginatedResponse
from messenger_service.api.v1.schemas.message import (
    MarkReadRequest,
    MessageWithSenderResponse,
    SendMessageRequest,
)
from messenger_service.config import settings
from messenger_service.services import message_service, read_state_service

router = APIRouter(prefix="/api/v1/conversations", tags=["messages"])


@router.get(
    "/{conversation_id}/messages",
    response_model=PaginatedResponse[MessageWithSenderResponse],
)
async def list_messages(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
    cursor: str | None = Query(None),
    limit: int = Query(settings.HISTORY_PAGE_SIZE, ge=1, le=200),
) -> PaginatedResponse[MessageWithSenderResponse]:
    page = await message_service.list_messages(
        conversation_id, principal, cursor, limit, uow,
    )
    return PaginatedResponse[MessageWithSenderResponse](
        items=[MessageWithSenderResponse.from_item(i) for i in page.items],
        next_cursor=page.next_cursor,
    )


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageWithSenderResponse,
    status_code=201,
)
async def send_message(
    conversation_id: UUID,
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    router_: MessageRouterDep,
) -> MessageWithSenderResponse:
    # goes through the router so live participants get it too
    item = await router_.submit(
        conversation_id,
        principal.user_id,
        body.content,
        body.message_type,
        body.metadata,
    )
    return MessageWithSenderResponse.from_item(item)


@router.post("/{conversation_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    conversation_id: UUID,
    body: MarkReadRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> None:
    await read_state_service.mark_read(conversation_id, principal, body.message_id, uow)
