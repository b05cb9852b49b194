from __future__ import annotations

import uuid

from messenger_service.application.dto.user import NewUserDTO, ProfileUpdateDTO
from messenger_service.application.exceptions import InvalidPayloadError, NotFoundError
from messenger_service.application.uow import UnitOfWork
from messenger_service.domain.entities.user import User


async def create_user(data: NewUserDTO, uow: UnitOfWork) -> User:
    if not data.username.strip() or not data.display_name.strip():
        raise InvalidPayloadError("username and display_name are required")
    user = await uow.users_w.create(data)
    await uow.commit()
    return user


async def get_user(user_id: uuid.UUID, uow: UnitOfWork) -> User:
    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def list_users(uow: UnitOfWork) -> list[User]:
    return await uow.users.list_all()


async def update_profile(
    user_id: uuid.UUID,
    update: ProfileUpdateDTO,
    uow: UnitOfWork,
) -> User:
    """Apply profile changes. Presence fields are not writable here."""
    changes = update.changes()
    if "display_name" in changes and not changes["display_name"].strip():
        raise InvalidPayloadError("display_name cannot be blank")
    if not changes:
        return await get_user(user_id, uow)

    user = await uow.users_w.update_profile(user_id, changes)
    if user is None:
        raise NotFoundError("User not found")
    await uow.commit()
    return user
