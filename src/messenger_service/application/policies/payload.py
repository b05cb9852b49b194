"""Shape checks for message content and type-specific metadata."""
from __future__ import annotations

import math
from typing import Any
from uuid import UUID

from messenger_service.application.exceptions import InvalidPayloadError
from messenger_service.domain.entities.message import NewMessage
from messenger_service.domain.value_objects.enums import MessageType

LOCATION_CONTENT_TEMPLATE = "📍 Shared location: {address}"


def _coordinate(metadata: dict[str, Any], key: str, bound: float) -> float:
    value = metadata.get(key)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPayloadError(f"Location metadata requires numeric '{key}'")
    value = float(value)
    if math.isnan(value) or not -bound <= value <= bound:
        raise InvalidPayloadError(f"'{key}' must be within [-{bound:g}, {bound:g}]")
    return value


def build_new_message(
    conversation_id: UUID,
    sender_id: UUID,
    content: str | None,
    msg_type: MessageType | str,
    metadata: dict[str, Any] | None,
) -> NewMessage:
    """Validate a send request and return the record to persist.

    Raises InvalidPayloadError when the content or metadata does not fit the type.
    """
    try:
        msg_type = MessageType(msg_type)
    except ValueError as exc:
        raise InvalidPayloadError(f"Unsupported message type: {msg_type}") from exc

    text = (content or "").strip()

    if msg_type == MessageType.TEXT:
        if not text:
            raise InvalidPayloadError("Text message requires non-empty content")
        return NewMessage(
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content or "",
            type=msg_type.value,
            metadata=metadata or None,
        )

    if not isinstance(metadata, dict):
        raise InvalidPayloadError("Location message requires metadata")
    latitude = _coordinate(metadata, "latitude", 90)
    longitude = _coordinate(metadata, "longitude", 180)
    address = metadata.get("address")
    if not isinstance(address, str) or not address.strip():
        raise InvalidPayloadError("Location metadata requires 'address'")

    return NewMessage(
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=text or LOCATION_CONTENT_TEMPLATE.format(address=address.strip()),
        type=msg_type.value,
        metadata={
            **metadata,
            "latitude": latitude,
            "longitude": longitude,
            "address": address.strip(),
        },
    )
