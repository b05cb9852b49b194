from __future__ import annotations

import asyncio
import uuid

from fastapi import WebSocket


class WebSocketConnection:
    """Adapts a FastAPI WebSocket to the Connection port."""

    def __init__(self, websocket: WebSocket) -> None:
        self._ws = websocket
        self._id = uuid.uuid4().hex
        # fan-out from other connections' tasks and the heartbeat write concurrently
        self._send_lock = asyncio.Lock()

    @property
    def id(self) -> str:
        return self._id

    async def send_text(self, data: str) -> None:
        async with self._send_lock:
            await self._ws.send_text(data)

    def __repr__(self) -> str:
        return f"WebSocketConnection(id={self._id})"
