"""Online/offline tracking derived from connection occupancy."""
from __future__ import annotations

import asyncio
import logging
import weakref
from uuid import UUID

from messenger_service.application.exceptions import PersistenceError
from messenger_service.application.ports.clock import Clock, utc_now
from messenger_service.application.uow import UoWFactory
from messenger_service.infrastructure.ws.protocol import UserStatusEvent
from messenger_service.infrastructure.ws.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Persists presence transitions and announces them to everyone else online.

    The gateway calls :meth:`mark_online` on a user's first connection and
    :meth:`mark_offline` when the last one closes. Transitions of one user
    are serialized so the stored flag ends up matching the final state.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        uow_factory: UoWFactory,
        clock: Clock = utc_now,
    ) -> None:
        self._registry = registry
        self._uow_factory = uow_factory
        self._clock = clock
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, user_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def is_online(self, user_id: UUID) -> bool:
        return bool(self._registry.connections_for(user_id))

    async def mark_online(self, user_id: UUID) -> None:
        async with self._lock_for(user_id):
            await self._persist(user_id, True)
            await self._announce(user_id, True)
        logger.info("User %s is online", user_id)

    async def mark_offline(self, user_id: UUID) -> None:
        async with self._lock_for(user_id):
            if self._registry.connections_for(user_id):
                logger.debug("User %s reconnected before going offline", user_id)
                return
            await self._persist(user_id, False)
            await self._announce(user_id, False)
        logger.info("User %s is offline", user_id)

    async def _persist(self, user_id: UUID, is_online: bool) -> None:
        try:
            async with self._uow_factory() as uow:
                await uow.users_w.set_online_status(user_id, is_online, self._clock())
                await uow.commit()
        except PersistenceError as exc:
            logger.warning(
                "Presence write failed for %s (online=%s): %s", user_id, is_online, exc.detail,
            )

    async def _announce(self, user_id: UUID, is_online: bool) -> None:
        await self._registry.send_to_users(
            self._registry.online_users(),
            UserStatusEvent(user_id=user_id, is_online=is_online),
            exclude=user_id,
        )
