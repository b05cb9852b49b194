"""WebSocket frame models.

Inbound frames form a closed union discriminated on ``type`` and are validated
once in :func:`decode_frame`. Keys are camelCase on the wire.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from messenger_service.application.exceptions import TransportError
from messenger_service.domain.entities.message import MessageWithSender
from messenger_service.domain.entities.user import User


class _Frame(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Client → Server


class AuthFrame(_Frame):
    type: Literal["auth"]
    user_id: UUID


class SendMessageFrame(_Frame):
    type: Literal["message"]
    conversation_id: UUID
    sender_id: UUID
    content: str | None = None
    message_type: str = "text"
    metadata: dict[str, Any] | None = None


class TypingFrame(_Frame):
    type: Literal["typing"]
    conversation_id: UUID
    sender_id: UUID
    is_typing: bool


class PingFrame(_Frame):
    type: Literal["ping"]


InboundFrame = Annotated[
    Union[AuthFrame, SendMessageFrame, TypingFrame, PingFrame],
    Field(discriminator="type"),
]

_inbound = TypeAdapter(InboundFrame)


def decode_frame(raw: str | bytes) -> AuthFrame | SendMessageFrame | TypingFrame | PingFrame:
    """Parse one inbound frame. Raises TransportError on anything malformed."""
    try:
        return _inbound.validate_json(raw)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        first = errors[0] if errors else {}
        where = ".".join(str(p) for p in first.get("loc", ())) or "frame"
        raise TransportError(f"{where}: {first.get('msg', 'invalid frame')}") from exc


# Server → Client


class UserPayload(_Frame):
    id: UUID
    username: str
    display_name: str
    avatar: str | None = None
    department: str | None = None
    status_message: str | None = None
    is_online: bool
    last_seen: datetime | None = None

    @classmethod
    def from_entity(cls, user: User) -> UserPayload:
        return cls(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            avatar=user.avatar,
            department=user.department,
            status_message=user.status_message,
            is_online=user.is_online,
            last_seen=user.last_seen,
        )


class MessagePayload(_Frame):
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    message_type: str
    metadata: dict[str, Any] | None = None
    created_at: datetime
    sender: UserPayload | None = None

    @classmethod
    def from_entity(cls, item: MessageWithSender) -> MessagePayload:
        msg = item.message
        return cls(
            id=msg.id,
            conversation_id=msg.conversation_id,
            sender_id=msg.sender_id,
            content=msg.content,
            message_type=msg.type,
            metadata=msg.metadata,
            created_at=msg.created_at,
            sender=UserPayload.from_entity(item.sender) if item.sender else None,
        )


class MessageEvent(_Frame):
    type: Literal["message"] = "message"
    data: MessagePayload


class TypingEvent(_Frame):
    type: Literal["typing"] = "typing"
    conversation_id: UUID
    sender_id: UUID
    is_typing: bool


class UserStatusEvent(_Frame):
    type: Literal["userStatus"] = "userStatus"
    user_id: UUID
    is_online: bool


class ErrorEvent(_Frame):
    type: Literal["error"] = "error"
    code: str
    detail: str = ""


class PongEvent(_Frame):
    type: Literal["pong"] = "pong"


OutboundFrame = Union[MessageEvent, TypingEvent, UserStatusEvent, ErrorEvent, PongEvent]


def encode_frame(frame: OutboundFrame) -> str:
    return frame.model_dump_json(by_alias=True)
