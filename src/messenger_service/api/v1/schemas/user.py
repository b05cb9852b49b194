from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from messenger_service.api.v1.schemas.common import RequestBody


class UserResponse(BaseModel):
    id: UUID
    username: str
    email: str
    display_name: str
    avatar: str | None
    department: str | None
    status_message: str | None
    is_online: bool
    last_seen: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UpdateProfileRequest(RequestBody):
    display_name: str | None = Field(None, max_length=200)
    avatar: str | None = None
    department: str | None = Field(None, max_length=200)
    status_message: str | None = Field(None, max_length=200)
