from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from messenger_service.application.pagination import decode_cursor
from messenger_service.domain.entities.message import Message, NewMessage
from messenger_service.infrastructure.db.mappers import message as mapper
from messenger_service.infrastructure.db.models.conversation import ConversationModel
from messenger_service.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: UUID) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None

    async def list_messages(
        self,
        conversation_id: UUID,
        *,
        cursor: str | None = None,
        limit: int = 50,
    ) -> list[Message]:
        stmt = select(MessageModel).where(MessageModel.conversation_id == conversation_id)
        if cursor:
            ts, mid = decode_cursor(cursor)
            stmt = (
                stmt.where(
                    (MessageModel.created_at > ts)
                    | ((MessageModel.created_at == ts) & (MessageModel.id > mid))
                )
                .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
                .limit(limit)
            )
            result = await self._session.execute(stmt)
            return [mapper.model_to_entity(m) for m in result.scalars().all()]

        # latest page, returned oldest first
        stmt = stmt.order_by(MessageModel.created_at.desc(), MessageModel.id.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in reversed(result.scalars().all())]

    async def get_last(self, conversation_id: UUID) -> Message | None:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def count_unread(
        self,
        conversation_id: UUID,
        user_id: UUID,
        after: datetime | None,
    ) -> int:
        stmt = select(func.count(MessageModel.id)).where(
            MessageModel.conversation_id == conversation_id,
            MessageModel.sender_id != user_id,
        )
        if after is not None:
            stmt = stmt.where(MessageModel.created_at > after)
        result = await self._session.execute(stmt)
        return int(result.scalar_one())


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: NewMessage) -> Message:
        """Insert the message stamped under the conversation's row lock.

        The UPDATE takes the row lock before the insert, so concurrent sends
        to one conversation get created_at in the order they commit.
        """
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == message.conversation_id)
            .values(updated_at=func.clock_timestamp())
            .returning(ConversationModel.updated_at)
            .execution_options(synchronize_session=False)
        )
        stamped_at = (await self._session.execute(stmt)).scalar_one()

        model = MessageModel(
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            content=message.content,
            type=message.type,
            metadata_=message.metadata,
            created_at=stamped_at,
        )
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)
