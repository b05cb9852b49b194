from __future__ import annotations

import asyncio
import logging
from uuid import UUID

import jwt
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from messenger_service.api.middleware.correlation_id import correlation_id_ctx
from messenger_service.config import settings
from messenger_service.infrastructure.ws.connection import WebSocketConnection
from messenger_service.infrastructure.ws.protocol import PongEvent, encode_frame

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


async def _authenticate(websocket: WebSocket, token: str | None) -> tuple[bool, UUID | None]:
    """Resolve the handshake identity. Returns (accepted, trusted_user_id)."""
    if token is None:
        return (not settings.WS_REQUIRE_TOKEN), None
    try:
        principal = await websocket.app.state.verifier.verify(token)
    except jwt.InvalidTokenError:
        logger.debug("WS auth failed", exc_info=True)
        return False, None
    return True, principal.user_id


@router.websocket("/ws")
async def ws_endpoint(
    websocket: WebSocket,
    token: str | None = Query(None),
) -> None:
    accepted, trusted_user_id = await _authenticate(websocket, token)
    if not accepted:
        await websocket.close(code=4001, reason="Authentication failed")
        return

    await websocket.accept()
    connection = WebSocketConnection(websocket)
    correlation_id_ctx.set(connection.id)

    gateway = websocket.app.state.gateway
    session = gateway.open(connection, trusted_user_id)

    heartbeat_task = asyncio.create_task(
        _heartbeat(connection), name=f"ws-heartbeat-{connection.id}",
    )
    try:
        while True:
            raw = await websocket.receive_text()
            await gateway.handle(session, raw)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for conn=%s", connection.id)
    finally:
        heartbeat_task.cancel()
        await gateway.close(session)


async def _heartbeat(connection: WebSocketConnection) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await connection.send_text(encode_frame(PongEvent()))
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped for conn=%s", connection.id, exc_info=True)
