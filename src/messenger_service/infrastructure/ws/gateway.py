"""Per-connection protocol state machine and frame dispatch.

Malformed frames are logged and dropped. The sender alone also gets an
``invalid_frame`` error frame back; nothing is broadcast for them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import UUID

from messenger_service.application.exceptions import (
    AppError,
    ForbiddenError,
    NotFoundError,
    TransportError,
)
from messenger_service.application.ports.connection import Connection
from messenger_service.domain.value_objects.enums import ConnectionState
from messenger_service.infrastructure.ws.protocol import (
    AuthFrame,
    ErrorEvent,
    OutboundFrame,
    PingFrame,
    PongEvent,
    SendMessageFrame,
    TypingFrame,
    decode_frame,
    encode_frame,
)
from messenger_service.infrastructure.ws.registry import ConnectionRegistry
from messenger_service.services.message_router import MessageRouter
from messenger_service.services.presence_service import PresenceTracker
from messenger_service.services.typing_service import TypingCoordinator

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ClientSession:
    """Gateway-side state of one connection."""

    connection: Connection
    # identity verified at the handshake; None only in legacy mode
    trusted_user_id: UUID | None = None
    user_id: UUID | None = None
    state: ConnectionState = ConnectionState.UNAUTHENTICATED
    typing_in: set[UUID] = field(default_factory=set)


class RealtimeGateway:
    def __init__(
        self,
        registry: ConnectionRegistry,
        presence: PresenceTracker,
        router: MessageRouter,
        typing: TypingCoordinator,
    ) -> None:
        self._registry = registry
        self._presence = presence
        self._router = router
        self._typing = typing

    def open(self, connection: Connection, trusted_user_id: UUID | None = None) -> ClientSession:
        logger.debug("WS opened: conn=%s", connection.id)
        return ClientSession(connection=connection, trusted_user_id=trusted_user_id)

    async def handle(self, session: ClientSession, raw: str | bytes) -> None:
        """Process one inbound frame. Never raises for bad input."""
        if session.state is ConnectionState.CLOSED:
            return

        try:
            frame = decode_frame(raw)
        except TransportError as exc:
            logger.warning("Dropping malformed frame from conn=%s: %s", session.connection.id, exc.detail)
            await self._reply(session, ErrorEvent(code=exc.code, detail=exc.detail))
            return

        try:
            await self._dispatch(session, frame)
        except AppError as exc:
            logger.info(
                "Rejected %s frame from conn=%s: %s %s",
                frame.type, session.connection.id, exc.code, exc.detail,
            )
            await self._reply(session, ErrorEvent(code=exc.code, detail=exc.detail))
        except Exception:
            logger.exception("Error handling %s frame from conn=%s", frame.type, session.connection.id)

    async def _dispatch(
        self,
        session: ClientSession,
        frame: AuthFrame | SendMessageFrame | TypingFrame | PingFrame,
    ) -> None:
        if isinstance(frame, PingFrame):
            await self._reply(session, PongEvent())

        elif isinstance(frame, AuthFrame):
            await self._authenticate(session, frame.user_id)

        elif session.state is not ConnectionState.AUTHENTICATED:
            await self._reply(
                session,
                ErrorEvent(code="unauthenticated", detail="Send an auth frame first"),
            )

        elif isinstance(frame, SendMessageFrame):
            await self._handle_send(session, frame)

        elif isinstance(frame, TypingFrame):
            await self._handle_typing(session, frame)

    async def _authenticate(self, session: ClientSession, user_id: UUID) -> None:
        if session.state is ConnectionState.AUTHENTICATED:
            if user_id == session.user_id:
                return
            raise ForbiddenError("Connection is already bound to another user")

        if session.trusted_user_id is not None and user_id != session.trusted_user_id:
            raise ForbiddenError("userId does not match the session identity")

        session.user_id = user_id
        session.state = ConnectionState.AUTHENTICATED
        first = self._registry.register(user_id, session.connection)
        if first:
            await self._presence.mark_online(user_id)

    async def _handle_send(self, session: ClientSession, frame: SendMessageFrame) -> None:
        assert session.user_id is not None
        if frame.sender_id != session.user_id:
            raise ForbiddenError("senderId does not match the authenticated user")

        # sending ends the typing burst for this conversation
        session.typing_in.discard(frame.conversation_id)
        # the author sees its own message through the regular fan-out
        await self._router.submit(
            frame.conversation_id,
            session.user_id,
            frame.content,
            frame.message_type,
            frame.metadata,
        )

    async def _handle_typing(self, session: ClientSession, frame: TypingFrame) -> None:
        assert session.user_id is not None
        if frame.sender_id != session.user_id:
            logger.warning(
                "Dropping typing frame from conn=%s: senderId %s is not %s",
                session.connection.id, frame.sender_id, session.user_id,
            )
            return

        try:
            await self._typing.set_typing(frame.conversation_id, session.user_id, frame.is_typing)
        except NotFoundError:
            logger.debug("Typing for unknown conversation %s dropped", frame.conversation_id)
            return

        if frame.is_typing:
            session.typing_in.add(frame.conversation_id)
        else:
            session.typing_in.discard(frame.conversation_id)

    async def close(self, session: ClientSession) -> None:
        """Tear down a connection. Safe to call more than once."""
        if session.state is ConnectionState.CLOSED:
            return
        was_authenticated = session.state is ConnectionState.AUTHENTICATED
        session.state = ConnectionState.CLOSED
        logger.debug("WS closed: conn=%s user=%s", session.connection.id, session.user_id)
        if not was_authenticated or session.user_id is None:
            return

        user_id = session.user_id
        _, was_last = self._registry.unregister(session.connection)

        try:
            for conversation_id in list(session.typing_in):
                try:
                    await self._typing.set_typing(conversation_id, user_id, False)
                except AppError as exc:
                    logger.warning("Could not reset typing in %s: %s", conversation_id, exc.detail)
                except Exception:
                    logger.exception("Typing reset in %s failed", conversation_id)
            session.typing_in.clear()
        finally:
            if was_last:
                await self._presence.mark_offline(user_id)

    async def _reply(self, session: ClientSession, frame: OutboundFrame) -> None:
        try:
            await session.connection.send_text(encode_frame(frame))
        except Exception:
            logger.debug("Reply to conn=%s failed", session.connection.id, exc_info=True)
