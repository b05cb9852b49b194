from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from messenger_service.domain.entities.read_state import ReadState
from messenger_service.infrastructure.db.mappers import read_state as mapper
from messenger_service.infrastructure.db.models.read_state import ReadStateModel


class ReadStateReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, conversation_id: UUID, user_id: UUID) -> ReadState | None:
        stmt = select(ReadStateModel).where(
            ReadStateModel.conversation_id == conversation_id,
            ReadStateModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class ReadStateWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert_last_read(
        self,
        conversation_id: UUID,
        user_id: UUID,
        last_message_id: UUID,
        last_read_at: datetime,
    ) -> None:
        stmt = pg_insert(ReadStateModel).values(
            conversation_id=conversation_id,
            user_id=user_id,
            last_read_message_id=last_message_id,
            last_read_at=last_read_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ReadStateModel.conversation_id, ReadStateModel.user_id],
            set_={
                "last_read_message_id": stmt.excluded.last_read_message_id,
                "last_read_at": stmt.excluded.last_read_at,
                "updated_at": func.now(),
            },
            # the cursor never moves backwards
            where=(
                ReadStateModel.last_read_at.is_(None)
                | (ReadStateModel.last_read_at < stmt.excluded.last_read_at)
            ),
        )
        await self._session.execute(stmt)
