from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class User:
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
