from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol
from uuid import UUID

from messenger_service.application.dto.user import NewUserDTO
from messenger_service.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: UUID) -> User | None: ...

    async def get_many(self, user_ids: Iterable[UUID]) -> list[User]:
        """Return the users that exist among ``user_ids``, in no particular order."""
        ...

    async def list_all(self) -> list[User]: ...


class UserWriter(Protocol):
    async def create(self, user: NewUserDTO) -> User: ...

    async def update_profile(self, user_id: UUID, changes: dict[str, str]) -> User | None: ...

    async def set_online_status(
        self, user_id: UUID, is_online: bool, seen_at: datetime
    ) -> None: ...
