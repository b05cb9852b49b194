"""In-process registry of live connections per user."""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import Iterable
from uuid import UUID

from messenger_service.application.ports.connection import Connection
from messenger_service.infrastructure.ws.protocol import OutboundFrame, encode_frame

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Maps a user id to its live connections.

    Mutations and snapshots run under one lock and never await while holding
    it; broadcasting iterates over a snapshot.
    """

    def __init__(self) -> None:
        self._connections: dict[UUID, set[Connection]] = {}
        self._owners: dict[Connection, UUID] = {}
        self._lock = threading.Lock()

    def register(self, user_id: UUID, connection: Connection) -> bool:
        """File ``connection`` under ``user_id``. Returns True if it is the user's first one."""
        with self._lock:
            owner = self._owners.get(connection)
            if owner is not None and owner != user_id:
                raise ValueError(f"Connection {connection.id} already belongs to user {owner}")
            conns = self._connections.setdefault(user_id, set())
            first = not conns
            conns.add(connection)
            self._owners[connection] = user_id
            total = len(conns)
        logger.debug("WS registered: user=%s conn=%s (user total=%d)", user_id, connection.id, total)
        return first

    def unregister(self, connection: Connection) -> tuple[UUID | None, bool]:
        """Remove ``connection``. Returns (owner, was_last); (None, False) if it was not registered."""
        with self._lock:
            user_id = self._owners.pop(connection, None)
            if user_id is None:
                return None, False
            conns = self._connections.get(user_id, set())
            conns.discard(connection)
            was_last = not conns
            if was_last:
                self._connections.pop(user_id, None)
        logger.debug("WS unregistered: user=%s conn=%s (last=%s)", user_id, connection.id, was_last)
        return user_id, was_last

    def connections_for(self, user_id: UUID) -> frozenset[Connection]:
        with self._lock:
            return frozenset(self._connections.get(user_id, ()))

    def online_users(self) -> frozenset[UUID]:
        with self._lock:
            return frozenset(self._connections)

    async def send_to_users(
        self,
        user_ids: Iterable[UUID],
        frame: OutboundFrame,
        *,
        exclude: UUID | None = None,
    ) -> int:
        """Push one frame to every live connection of ``user_ids``.

        Returns the number of connections that accepted the frame.
        """
        with self._lock:
            targets = [
                conn
                for user_id in dict.fromkeys(user_ids)
                if user_id != exclude
                for conn in self._connections.get(user_id, ())
            ]
        if not targets:
            return 0
        raw = encode_frame(frame)
        results = await asyncio.gather(*(_send(conn, raw) for conn in targets))
        return sum(results)


async def _send(connection: Connection, raw: str) -> bool:
    try:
        await connection.send_text(raw)
    except Exception:
        # the closing handler owns cleanup; a dead socket only misses this frame
        logger.debug("WS send failed for conn=%s", connection.id, exc_info=True)
        return False
    return True
