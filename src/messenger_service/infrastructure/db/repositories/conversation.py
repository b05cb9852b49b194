from __future__ import annotations

import uuid
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from messenger_service.domain.entities.conversation import Conversation
from messenger_service.domain.value_objects.ids import direct_key
from messenger_service.infrastructure.db.mappers import conversation as mapper
from messenger_service.infrastructure.db.models.conversation import ConversationModel
from messenger_service.infrastructure.db.models.participant import ParticipantModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        result = await self._session.get(ConversationModel, conversation_id)
        return mapper.model_to_entity(result) if result else None

    async def get_direct(self, user_a: UUID, user_b: UUID) -> Conversation | None:
        stmt = select(ConversationModel).where(
            ConversationModel.direct_key == direct_key(user_a, user_b),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_for_user(self, user_id: UUID) -> list[Conversation]:
        stmt = (
            select(ConversationModel)
            .join(
                ParticipantModel,
                ParticipantModel.conversation_id == ConversationModel.id,
            )
            .where(ParticipantModel.user_id == user_id)
            .order_by(ConversationModel.updated_at.desc(), ConversationModel.id)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._reader = ConversationReaderRepo(session)

    async def create_group(self, name: str, participant_ids: list[UUID]) -> Conversation:
        model = ConversationModel(
            name=name,
            is_group=True,
            participants=[
                ParticipantModel(user_id=user_id, position=position)
                for position, user_id in enumerate(participant_ids)
            ],
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def create_direct_if_not_exists(
        self,
        user_a: UUID,
        user_b: UUID,
    ) -> tuple[Conversation, bool]:
        """Insert the 1:1 conversation idempotently. Returns (conversation, created_flag)."""
        stmt = (
            pg_insert(ConversationModel)
            .values(id=uuid.uuid4(), is_group=False, direct_key=direct_key(user_a, user_b))
            .on_conflict_do_nothing(index_elements=[ConversationModel.direct_key])
            .returning(ConversationModel.id)
        )
        result = await self._session.execute(stmt)
        new_id = result.scalar_one_or_none()

        if new_id is not None:
            await self._session.execute(
                pg_insert(ParticipantModel).values(
                    [
                        {"conversation_id": new_id, "user_id": user_a, "position": 0},
                        {"conversation_id": new_id, "user_id": user_b, "position": 1},
                    ]
                )
            )
            created = await self._reader.get_by_id(new_id)
            assert created is not None
            return created, True

        # conflict: another request created it first
        existing = await self._reader.get_direct(user_a, user_b)
        assert existing is not None
        return existing, False
