"""Seed development data: creates the schema, sample users, a group chat and messages."""
from __future__ import annotations

import asyncio
import logging

from messenger_service.application.dto.conversation import CreateGroupDTO
from messenger_service.application.dto.message import SendMessageDTO
from messenger_service.application.dto.principal import Principal
from messenger_service.application.dto.user import NewUserDTO
from messenger_service.config import settings
from messenger_service.domain.value_objects.enums import MessageType
from messenger_service.infrastructure.auth.hs256_verifier import HS256Verifier
from messenger_service.infrastructure.db import models  # noqa: F401
from messenger_service.infrastructure.db.base import Base
from messenger_service.infrastructure.db.session import engine
from messenger_service.infrastructure.db.uow import session_scope
from messenger_service.services import conversation_service, message_service, user_service

logger = logging.getLogger(__name__)

USERS = [
    NewUserDTO(username="alice", email="alice@example.com", display_name="Alice Martin", department="Engineering"),
    NewUserDTO(username="bob", email="bob@example.com", display_name="Bob Chen", department="Design"),
    NewUserDTO(username="carol", email="carol@example.com", display_name="Carol Diaz", department="Sales"),
]


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_scope() as uow:
        users = [await user_service.create_user(data, uow) for data in USERS]
        alice, bob, carol = users

        group = await conversation_service.create_group_conversation(
            Principal(user_id=alice.id),
            CreateGroupDTO(name="Launch crew", participant_ids=[bob.id, carol.id]),
            uow,
        )
        direct, _ = await conversation_service.find_or_create_direct_conversation(
            Principal(user_id=alice.id), bob.id, uow,
        )

        messages_data = [
            (group.id, alice, "Morning all, standup in 10", MessageType.TEXT, None),
            (group.id, bob, "On my way", MessageType.TEXT, None),
            (
                group.id, carol, None, MessageType.LOCATION,
                {"latitude": 48.8584, "longitude": 2.2945, "address": "Champ de Mars, Paris"},
            ),
            (direct.id, bob, "Can you review my mockups later?", MessageType.TEXT, None),
        ]
        for conversation_id, sender, content, msg_type, metadata in messages_data:
            await message_service.send_message(
                SendMessageDTO(
                    conversation_id=conversation_id,
                    sender_id=sender.id,
                    content=content,
                    type=msg_type,
                    metadata=metadata,
                ),
                uow,
            )

    logger.info("Seeded %d users and %d messages", len(users), len(messages_data))

    verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    for user in users:
        print(f"{user.username}: {verifier.issue(user.id)}")

    await engine.dispose()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
