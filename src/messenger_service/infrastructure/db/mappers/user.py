from __future__ import annotations

from messenger_service.domain.entities.user import User
from messenger_service.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        username=model.username,
        email=model.email,
        display_name=model.display_name,
        avatar=model.avatar,
        department=model.department,
        status_message=model.status_message,
        is_online=model.is_online,
        last_seen=model.last_seen,
        created_at=model.created_at,
    )
