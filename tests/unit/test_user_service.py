from __future__ import annotations

import uuid

import pytest

from messenger_service.application.dto.user import NewUserDTO, ProfileUpdateDTO
from messenger_service.application.exceptions import InvalidPayloadError, NotFoundError
from messenger_service.services import user_service
from tests.conftest import FakeUoW


@pytest.mark.asyncio
async def test_create_user_defaults(uow: FakeUoW):
    user = await user_service.create_user(
        NewUserDTO(username="dana", email="dana@example.com", display_name="Dana"), uow,
    )

    assert user.status_message == "Available"
    assert user.is_online is False
    assert uow._committed is True


@pytest.mark.asyncio
async def test_create_user_requires_names(uow: FakeUoW):
    with pytest.raises(InvalidPayloadError):
        await user_service.create_user(
            NewUserDTO(username=" ", email="x@example.com", display_name="X"), uow,
        )


@pytest.mark.asyncio
async def test_update_profile_changes_only_given_fields(uow: FakeUoW):
    user = uow.store.add_user("erin", department="Ops")

    updated = await user_service.update_profile(
        user.id, ProfileUpdateDTO(status_message="In a meeting"), uow,
    )

    assert updated.status_message == "In a meeting"
    assert updated.department == "Ops"
    assert updated.display_name == user.display_name


@pytest.mark.asyncio
async def test_update_profile_rejects_blank_display_name(uow: FakeUoW):
    user = uow.store.add_user("erin")

    with pytest.raises(InvalidPayloadError):
        await user_service.update_profile(user.id, ProfileUpdateDTO(display_name=" "), uow)


@pytest.mark.asyncio
async def test_get_unknown_user(uow: FakeUoW):
    with pytest.raises(NotFoundError):
        await user_service.get_user(uuid.uuid4(), uow)
