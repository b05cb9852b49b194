from __future__ import annotations

from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from messenger_service.application.dto.user import NewUserDTO
from messenger_service.domain.entities.user import User
from messenger_service.infrastructure.db.mappers import user as mapper
from messenger_service.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None

    async def get_many(self, user_ids: Iterable[UUID]) -> list[User]:
        ids = list(user_ids)
        if not ids:
            return []
        result = await self._session.execute(select(UserModel).where(UserModel.id.in_(ids)))
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_all(self) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.display_name, UserModel.id)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: NewUserDTO) -> User:
        model = UserModel(
            username=user.username,
            email=user.email,
            display_name=user.display_name,
            avatar=user.avatar,
            department=user.department,
            status_message=user.status_message,
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def update_profile(self, user_id: UUID, changes: dict[str, str]) -> User | None:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            return None
        for key, value in changes.items():
            setattr(model, key, value)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def set_online_status(
        self,
        user_id: UUID,
        is_online: bool,
        seen_at: datetime,
    ) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(is_online=is_online, last_seen=seen_at)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
